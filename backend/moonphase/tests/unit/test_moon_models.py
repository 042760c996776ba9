from __future__ import annotations

import math
from datetime import date

import pytest

from moonphase.domain.errors import ApiError, FetchError, HttpError, NoDataError
from moonphase.domain.models import (
    DayOutcome,
    DayRecord,
    Location,
    canonical_date,
    day_labels,
    illumination_percent,
    parse_day,
)


def test_location_rejects_non_finite_values():
    with pytest.raises(ValueError):
        Location(math.nan, 76.2)
    with pytest.raises(ValueError):
        Location(10.5, math.inf)
    with pytest.raises(ValueError):
        Location(10.5, 76.2, "5.5")  # type: ignore[arg-type]


def test_location_rejects_out_of_range_coordinates():
    with pytest.raises(ValueError):
        Location(91.0, 0.0)
    with pytest.raises(ValueError):
        Location(0.0, -181.0)


def test_location_is_immutable_and_formats_coords():
    location = Location(10.5276, 76.2144, 5.5)
    assert location.coords == "10.5276,76.2144"
    with pytest.raises(Exception):
        location.latitude = 0.0  # type: ignore[misc]


@pytest.mark.parametrize("fraction", [i / 200 for i in range(201)])
def test_fraction_illumination_rounds_to_percent(fraction):
    value = illumination_percent(fraction)
    assert value == round(fraction * 100)
    assert 0 <= value <= 100


def test_percent_string_illumination():
    assert illumination_percent("87%") == 87
    assert illumination_percent("0%") == 0
    assert illumination_percent("100%") == 100
    assert illumination_percent("0.42") == 42


def test_illumination_rejects_garbage():
    with pytest.raises(ValueError):
        illumination_percent("bright")


def test_canonical_date_zero_pads():
    assert canonical_date(2024, 3, 9) == "2024-03-09"
    assert canonical_date(2024, 12, 25) == "2024-12-25"


def test_parse_day_accepts_dates_and_strings():
    assert parse_day("2024-03-01") == date(2024, 3, 1)
    assert parse_day(date(2024, 3, 1)) == date(2024, 3, 1)
    with pytest.raises(ValueError):
        parse_day("2024-02-30")


def test_day_labels():
    day_name, display = day_labels(date(2024, 3, 1))
    assert day_name and display.endswith(" 1")


def test_day_outcome_requires_exactly_one_side():
    record = DayRecord(date=date(2024, 3, 1), phase_name="Full Moon", illumination_percent=100)
    assert DayOutcome(date=record.date, record=record).ok
    assert not DayOutcome(date=record.date, error=HttpError(500, "Server Error")).ok
    with pytest.raises(ValueError):
        DayOutcome(date=record.date)


def test_error_kinds_are_distinguishable():
    http = HttpError(503, "Service Unavailable")
    api = ApiError("invalid date")
    assert http.status_code == 503
    assert "503" in str(http)
    assert api.message == "invalid date"
    assert not isinstance(http, ApiError)
    assert not isinstance(api, HttpError)
    wrapped = FetchError("primary", api)
    assert wrapped.branch == "primary"
    assert wrapped.cause is api
    assert not isinstance(NoDataError("none"), (HttpError, ApiError))


@pytest.mark.parametrize("value", ["87", 1.5, -0.1, "120%"])
def test_illumination_out_of_range_is_rejected(value):
    with pytest.raises(ValueError):
        illumination_percent(value)
