from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Union

from moonphase.domain.errors import ApiError
from moonphase.domain.models import (
    ClosestPhase,
    CurrentPhaseRecord,
    DayRecord,
    Location,
    PhaseEvent,
    canonical_date,
    illumination_percent,
    parse_day,
)
from moonphase.infra.usno.usno_client import UsnoClient

from .base import MoonProvider

logger = logging.getLogger(__name__)

MAX_PHASES = 99


class UsnoMoonProvider(MoonProvider):
    def __init__(self, client: Optional[UsnoClient] = None):
        self.client = client or UsnoClient()

    async def fetch_day(self, day: Union[date, str], location: Location) -> DayRecord:
        target = parse_day(day)
        info = await self._fetch_moon_info(target, location)
        return DayRecord(
            date=target,
            phase_name=info["curphase"],
            illumination_percent=self._illumination(info),
        )

    async def fetch_current(self, day: Union[date, str], location: Location) -> CurrentPhaseRecord:
        target = parse_day(day)
        info = await self._fetch_moon_info(target, location)
        return CurrentPhaseRecord(
            date=target,
            phase_name=info["curphase"],
            illumination_percent=self._illumination(info),
            closest_phase=self._map_closest(info.get("closestphase")),
            raw_day_events=list(info.get("moondata") or []),
        )

    async def fetch_primary_phases(self, start: Union[date, str], count: int = 8) -> List[PhaseEvent]:
        if not 1 <= count <= MAX_PHASES:
            raise ValueError(f"count must be between 1 and {MAX_PHASES}")
        target = parse_day(start)
        data = await self.client.fetch_phases(target, count)
        phasedata = data.get("phasedata")
        if not isinstance(phasedata, list):
            raise ApiError("response is missing 'phasedata'")
        events = [self._map_phase(item) for item in phasedata]
        logger.info("fetched %d primary phases from %s", len(events), target)
        return events

    async def _fetch_moon_info(self, day: date, location: Location) -> dict:
        data = await self.client.fetch_oneday(day, location)
        props = data.get("properties")
        if not isinstance(props, dict):
            raise ApiError(f"response for {day} has no usable properties")
        info = props.get("data")
        if not isinstance(info, dict) or "curphase" not in info or "fracillum" not in info:
            raise ApiError(f"response for {day} is missing moon data")
        return info

    @staticmethod
    def _illumination(info: dict) -> int:
        try:
            return illumination_percent(info["fracillum"])
        except (TypeError, ValueError) as exc:
            raise ApiError(f"invalid fracillum {info['fracillum']!r}") from exc

    @staticmethod
    def _map_closest(payload: Optional[dict]) -> Optional[ClosestPhase]:
        if not payload:
            return None
        if not isinstance(payload, dict):
            logger.warning("ignoring malformed closestphase %r", payload)
            return None
        try:
            phase_date = canonical_date(payload["year"], payload["month"], payload["day"])
        except (KeyError, TypeError, ValueError):
            logger.warning("ignoring malformed closestphase %r", payload)
            return None
        return ClosestPhase(
            phase_name=payload.get("phase", ""),
            date=phase_date,
            time=payload.get("time"),
        )

    @staticmethod
    def _map_phase(payload: dict) -> PhaseEvent:
        try:
            year = int(payload["year"])
            month = int(payload["month"])
            day = int(payload["day"])
            return PhaseEvent(
                phase_name=payload["phase"],
                date=canonical_date(year, month, day),
                time=payload.get("time", ""),
                year=year,
                month=month,
                day=day,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"malformed phase entry {payload!r}") from exc
