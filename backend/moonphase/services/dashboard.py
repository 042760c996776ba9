from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

import httpx

from moonphase.domain.errors import MoonDataError
from moonphase.domain.models import CurrentPhaseRecord, DayRecord, Location
from moonphase.hub.moon_hub import MoonHub

logger = logging.getLogger(__name__)

INITIAL_LOAD_ERROR = "Failed to load moon data. Please check your internet connection."
WEEKLY_LOAD_ERROR = "Failed to load weekly forecast. Please try again."


@dataclass
class DashboardState:
    current: Optional[CurrentPhaseRecord] = None
    weekly: List[DayRecord] = field(default_factory=list)
    show_weekly: bool = False
    loading: bool = False
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.current is not None

    @property
    def view(self) -> str:
        """One of ``loading``, ``error`` or ``dashboard``."""
        if self.has_data:
            return "dashboard"
        if self.error:
            return "error"
        return "loading"


class DashboardController:
    """Drives a :class:`DashboardState` through the hub.

    Today's card loads first; the forecast is fetched on demand and a
    failed forecast never discards the card already shown.
    """

    def __init__(self, hub: MoonHub, location: Location, *, today: Optional[date] = None) -> None:
        self.hub = hub
        self.location = location
        self.today = today
        self.state = DashboardState()

    async def load_initial(self) -> DashboardState:
        self.state.loading = True
        self.state.error = None
        try:
            self.state.current = await self.hub.fetch_current(self.location, today=self.today)
        except (MoonDataError, httpx.HTTPError) as exc:
            logger.error("initial load failed: %s", exc)
            self.state.error = INITIAL_LOAD_ERROR
        finally:
            self.state.loading = False
        return self.state

    async def load_weekly(self) -> DashboardState:
        self.state.loading = True
        try:
            self.state.weekly = await self.hub.fetch_week(self.location, today=self.today)
        except (MoonDataError, httpx.HTTPError) as exc:
            logger.error("weekly load failed: %s", exc)
            self.state.error = WEEKLY_LOAD_ERROR
        else:
            self.state.error = None
            self.state.show_weekly = True
        finally:
            self.state.loading = False
        return self.state

    def hide_weekly(self) -> DashboardState:
        self.state.show_weekly = False
        return self.state

    async def retry(self) -> DashboardState:
        self.state = DashboardState()
        return await self.load_initial()
