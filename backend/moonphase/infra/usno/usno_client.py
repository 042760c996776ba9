from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

import httpx

from moonphase.domain.errors import ApiError, HttpError
from moonphase.domain.models import Location

logger = logging.getLogger(__name__)


class UsnoClient:
    """Thin async client for the USNO astronomical applications API."""

    BASE_URL = "https://aa.usno.navy.mil/api"
    ONEDAY_PATH = "/rstt/oneday"
    PHASES_PATH = "/moon/phases/date"

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: str = "moonapp",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.client_id = client_id
        self.timeout = timeout
        self.transport = transport

    async def fetch_oneday(self, day: date, location: Location) -> dict:
        params = {
            "date": day.isoformat(),
            "coords": location.coords,
            "tz": location.utc_offset_hours,
            "id": self.client_id,
        }
        return await self._get_json(self.ONEDAY_PATH, params)

    async def fetch_phases(self, start: date, count: int) -> dict:
        params = {
            "date": start.isoformat(),
            "nump": count,
            "id": self.client_id,
        }
        return await self._get_json(self.PHASES_PATH, params)

    async def _get_json(self, path: str, params: Dict[str, Any]) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(url, params=params)
        if not resp.is_success:
            raise HttpError(resp.status_code, resp.reason_phrase)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError("response body is not valid JSON") from exc
        if not isinstance(data, dict):
            raise ApiError(f"unexpected response body of type {type(data).__name__}")
        if data.get("error"):
            raise ApiError(str(data["error"]))
        return data
