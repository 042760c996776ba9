from __future__ import annotations

from datetime import date
from typing import Protocol

from moonphase.domain.models import CurrentPhaseRecord, DayRecord, Location, PhaseEvent


class MoonProvider(Protocol):
    """Contract for lunar-phase data providers."""

    async def fetch_day(self, day: date, location: Location) -> DayRecord:
        raise NotImplementedError

    async def fetch_current(self, day: date, location: Location) -> CurrentPhaseRecord:
        """Like :meth:`fetch_day` plus closest-phase and same-day event data."""
        raise NotImplementedError

    async def fetch_primary_phases(self, start: date, count: int) -> list[PhaseEvent]:
        """Next ``count`` primary phase transitions on or after ``start``, in source order."""
        raise NotImplementedError
