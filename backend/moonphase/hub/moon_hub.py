from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Awaitable, Dict, List, Optional

from moonphase.config import MoonSettings
from moonphase.domain.errors import FetchError
from moonphase.domain.models import AggregateResult, CurrentPhaseRecord, DayRecord, Location, PhaseEvent
from moonphase.infra.usno.usno_client import UsnoClient
from moonphase.providers.moon.base import MoonProvider
from moonphase.providers.moon.usno import UsnoMoonProvider

from .forecast import Sleep, WeeklyAggregator

logger = logging.getLogger(__name__)


class MoonHub:
    """Entry point to the moon data layer.

    Holds configuration and collaborators only; every call runs its own
    requests and returns fresh records.
    """

    def __init__(
        self,
        provider: MoonProvider,
        *,
        primary_count: int = 8,
        day_delay: float = 0.15,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self._provider = provider
        self.primary_count = primary_count
        self.forecast = WeeklyAggregator(provider, delay=day_delay, sleep=sleep)

    @classmethod
    def from_settings(cls, settings: MoonSettings, *, transport=None, sleep: Optional[Sleep] = None) -> "MoonHub":
        client = UsnoClient(
            base_url=settings.base_url,
            client_id=settings.client_id,
            timeout=settings.timeout,
            transport=transport,
        )
        return cls(
            UsnoMoonProvider(client),
            primary_count=settings.primary_count,
            day_delay=settings.day_delay,
            sleep=sleep,
        )

    async def fetch_current(self, location: Location, *, today: Optional[date] = None) -> CurrentPhaseRecord:
        return await self._provider.fetch_current(today or location.today(), location)

    async def fetch_week(self, location: Location, *, today: Optional[date] = None) -> List[DayRecord]:
        return await self.forecast.fetch_week(location, start=today)

    async def fetch_primary(
        self,
        location: Location,
        *,
        count: Optional[int] = None,
        today: Optional[date] = None,
    ) -> List[PhaseEvent]:
        start = today or location.today()
        count = self.primary_count if count is None else count
        return await self._provider.fetch_primary_phases(start, count)

    async def fetch_all(self, location: Location, *, today: Optional[date] = None) -> AggregateResult:
        """Fetch today, the weekly forecast and primary phases concurrently.

        The first failing branch cancels the others and is raised as
        :class:`FetchError`.
        """
        today = today or location.today()
        branches: Dict[str, Awaitable] = {
            "current": self.fetch_current(location, today=today),
            "weekly": self.fetch_week(location, today=today),
            "primary": self.fetch_primary(location, today=today),
        }
        tasks = {name: asyncio.ensure_future(coro) for name, coro in branches.items()}
        done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        for name, task in tasks.items():
            if task in done and task.exception() is not None:
                exc = task.exception()
                logger.error("aggregate fetch failed in %s branch: %s", name, exc)
                raise FetchError(name, exc) from exc
        logger.info("all moon data fetched")
        return AggregateResult(
            current=tasks["current"].result(),
            weekly=tasks["weekly"].result(),
            primary=tasks["primary"].result(),
        )
