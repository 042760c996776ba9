from __future__ import annotations

import asyncio
from datetime import date, timedelta

import httpx
import pytest

from moonphase.domain.errors import ApiError, HttpError, NoDataError
from moonphase.domain.models import DayRecord, Location
from moonphase.hub.forecast import WeeklyAggregator
from moonphase.infra.usno.usno_client import UsnoClient
from moonphase.providers.moon.usno import UsnoMoonProvider
from moonphase.tests.payloads import oneday_payload

LOCATION = Location(10.5276, 76.2144, 5.5)
START = date(2024, 3, 1)


class _StaticMoonProvider:
    def __init__(self, failures: dict | None = None) -> None:
        self.failures = failures or {}
        self.requested: list[date] = []

    async def fetch_day(self, day: date, location: Location) -> DayRecord:
        self.requested.append(day)
        if day in self.failures:
            raise self.failures[day]
        return DayRecord(date=day, phase_name="Waxing Gibbous", illumination_percent=60 + day.day)


class _RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _aggregator(provider, sleep=None, delay: float = 0.15) -> WeeklyAggregator:
    return WeeklyAggregator(provider, delay=delay, sleep=sleep or _RecordingSleep())


def test_requests_seven_consecutive_days_in_order():
    provider = _StaticMoonProvider()
    records = asyncio.run(_aggregator(provider).fetch_week(LOCATION, start=START))

    expected = [START + timedelta(days=i) for i in range(7)]
    assert provider.requested == expected
    assert [r.date for r in records] == expected
    assert provider.requested[-1] == date(2024, 3, 7)


def test_two_failed_days_are_skipped_without_gaps():
    failures = {
        date(2024, 3, 2): HttpError(500, "Internal Server Error"),
        date(2024, 3, 5): ApiError("No data for date"),
    }
    provider = _StaticMoonProvider(failures)
    records = asyncio.run(_aggregator(provider).fetch_week(LOCATION, start=START))

    assert len(records) == 5
    assert all(r is not None for r in records)
    dates = [r.date for r in records]
    assert dates == sorted(dates)
    assert date(2024, 3, 2) not in dates
    assert date(2024, 3, 5) not in dates
    assert len(provider.requested) == 7


def test_transport_failures_and_timeouts_are_skipped():
    failures = {
        date(2024, 3, 1): httpx.ConnectError("connection refused"),
        date(2024, 3, 3): httpx.ReadTimeout("timed out"),
    }
    records = asyncio.run(_aggregator(_StaticMoonProvider(failures)).fetch_week(LOCATION, start=START))
    assert [r.date.day for r in records] == [2, 4, 5, 6, 7]


def test_all_days_failing_raises_no_data():
    failures = {START + timedelta(days=i): HttpError(502, "Bad Gateway") for i in range(7)}
    with pytest.raises(NoDataError):
        asyncio.run(_aggregator(_StaticMoonProvider(failures)).fetch_week(LOCATION, start=START))


def test_collect_reports_every_outcome():
    failing = HttpError(404, "Not Found")
    provider = _StaticMoonProvider({date(2024, 3, 4): failing})
    outcomes = asyncio.run(_aggregator(provider).collect(LOCATION, start=START))

    assert len(outcomes) == 7
    assert [o.ok for o in outcomes] == [True, True, True, False, True, True, True]
    assert outcomes[3].error is failing


def test_pauses_between_requests_but_not_after_last():
    sleep = _RecordingSleep()
    failures = {date(2024, 3, 3): ApiError("bad day")}
    asyncio.run(_aggregator(_StaticMoonProvider(failures), sleep=sleep).fetch_week(LOCATION, start=START))
    assert sleep.calls == [0.15] * 6


def test_zero_delay_disables_pacing():
    sleep = _RecordingSleep()
    asyncio.run(_aggregator(_StaticMoonProvider(), sleep=sleep, delay=0).fetch_week(LOCATION, start=START))
    assert sleep.calls == []


def test_records_are_labelled_for_display():
    records = asyncio.run(_aggregator(_StaticMoonProvider()).fetch_week(LOCATION, start=START))
    first = records[0]
    assert first.day_name == START.strftime("%a")
    assert first.display_date == f"{START.strftime('%b')} 1"


def test_unexpected_errors_propagate():
    provider = _StaticMoonProvider({START: RuntimeError("bug")})
    with pytest.raises(RuntimeError):
        asyncio.run(_aggregator(provider).fetch_week(LOCATION, start=START))


def test_malformed_body_for_one_day_is_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["date"] == "2024-03-02":
            return httpx.Response(200, json={"properties": ["oops"]})
        return httpx.Response(200, json=oneday_payload("Waxing Gibbous", "64%"))

    client = UsnoClient(base_url="http://usno.test/api", transport=httpx.MockTransport(handler))
    aggregator = _aggregator(UsnoMoonProvider(client))
    records = asyncio.run(aggregator.fetch_week(LOCATION, start=START))

    assert len(records) == 6
    assert date(2024, 3, 2) not in [r.date for r in records]
