from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Awaitable, Callable, List, Optional

import httpx

from moonphase.domain.errors import MoonDataError, NoDataError
from moonphase.domain.models import DayOutcome, DayRecord, Location, day_labels
from moonphase.providers.moon.base import MoonProvider

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

WEEK_DAYS = 7

# Per-day failures that are recorded and skipped.
SKIPPABLE_ERRORS = (MoonDataError, httpx.HTTPError, ValueError)


class WeeklyAggregator:
    """Fetches a window of consecutive days, one request at a time.

    Days that fail are recorded as failed outcomes and left out of the
    forecast. A pause of ``delay`` seconds separates consecutive requests.
    """

    def __init__(
        self,
        provider: MoonProvider,
        *,
        delay: float = 0.15,
        sleep: Optional[Sleep] = None,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._provider = provider
        self.delay = delay
        self._sleep = sleep or asyncio.sleep

    async def collect(
        self,
        location: Location,
        *,
        start: Optional[date] = None,
        days: int = WEEK_DAYS,
    ) -> List[DayOutcome]:
        if days < 1:
            raise ValueError("days must be >= 1")
        start = start or location.today()
        outcomes: List[DayOutcome] = []
        for offset in range(days):
            target = start + timedelta(days=offset)
            logger.debug("fetching day %d/%d: %s", offset + 1, days, target)
            try:
                record = await self._provider.fetch_day(target, location)
            except SKIPPABLE_ERRORS as exc:
                logger.warning("skipping %s: %s", target, exc)
                outcomes.append(DayOutcome(date=target, error=exc))
            else:
                outcomes.append(DayOutcome(date=target, record=self._annotate(record)))
            if offset < days - 1 and self.delay > 0:
                await self._sleep(self.delay)
        return outcomes

    async def fetch_week(
        self,
        location: Location,
        *,
        start: Optional[date] = None,
        days: int = WEEK_DAYS,
    ) -> List[DayRecord]:
        outcomes = await self.collect(location, start=start, days=days)
        records = [outcome.record for outcome in outcomes if outcome.ok]
        logger.info("fetched %d/%d days of moon data", len(records), days)
        if not records:
            raise NoDataError("No moon phase data could be retrieved for any day")
        return records

    @staticmethod
    def _annotate(record: DayRecord) -> DayRecord:
        day_name, display_date = day_labels(record.date)
        record.day_name = day_name
        record.display_date = display_date
        return record
