from __future__ import annotations

from dataclasses import asdict
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query

from moonphase.api.deps import get_hub, get_settings
from moonphase.config import MoonSettings
from moonphase.domain.errors import FetchError, MoonDataError, NoDataError
from moonphase.domain.models import DayRecord, Location, PhaseEvent
from moonphase.domain.symbols import map_phase_to_symbol
from moonphase.hub.forecast import WEEK_DAYS
from moonphase.hub.moon_hub import MoonHub

router = APIRouter(tags=["moon"])


def _location(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
    tz: Optional[float] = Query(None, ge=-14, le=14, description="UTC offset in hours"),
    settings: MoonSettings = Depends(get_settings),
) -> Location:
    return settings.location(lat, lon, tz)


@router.get("/moon")
async def get_moon(location: Location = Depends(_location), hub: MoonHub = Depends(get_hub)):
    try:
        result = await hub.fetch_all(location)
    except FetchError as exc:
        status = 503 if isinstance(exc.cause, NoDataError) else 502
        raise HTTPException(status_code=status, detail=str(exc)) from exc
    return {
        "location": asdict(location),
        "current": _serialize_record(result.current),
        "weekly": [_serialize_record(day) for day in result.weekly],
        "primary": [_serialize_phase(event) for event in result.primary],
    }


@router.get("/moon/today")
async def get_today(location: Location = Depends(_location), hub: MoonHub = Depends(get_hub)):
    try:
        current = await hub.fetch_current(location)
    except (MoonDataError, httpx.HTTPError) as exc:
        raise HTTPException(status_code=502, detail=f"Failed to get current moon phase: {exc}") from exc
    return _serialize_record(current)


@router.get("/moon/weekly")
async def get_weekly(location: Location = Depends(_location), hub: MoonHub = Depends(get_hub)):
    try:
        days = await hub.fetch_week(location)
    except NoDataError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"days": [_serialize_record(day) for day in days], "requested": WEEK_DAYS}


@router.get("/moon/phases")
async def get_phases(
    count: Optional[int] = Query(None, ge=1, le=99),
    location: Location = Depends(_location),
    hub: MoonHub = Depends(get_hub),
):
    try:
        events = await hub.fetch_primary(location, count=count)
    except (MoonDataError, httpx.HTTPError) as exc:
        raise HTTPException(status_code=502, detail=f"Failed to get primary moon phases: {exc}") from exc
    return {"phases": [_serialize_phase(event) for event in events]}


def _serialize_record(record: DayRecord) -> dict:
    payload = asdict(record)
    payload["date"] = record.date.isoformat()
    payload["symbol"] = map_phase_to_symbol(record.phase_name)
    return payload


def _serialize_phase(event: PhaseEvent) -> dict:
    payload = asdict(event)
    payload["symbol"] = map_phase_to_symbol(event.phase_name)
    return payload
