from __future__ import annotations

import os
from dataclasses import dataclass

from moonphase.domain.models import Location

DEFAULT_BASE_URL = "https://aa.usno.navy.mil/api"
DEFAULT_CLIENT_ID = "moonapp"

# Thrissur, Kerala, India (IST, UTC+5:30)
DEFAULT_LAT = 10.5276
DEFAULT_LON = 76.2144
DEFAULT_TZ = 5.5


@dataclass(frozen=True)
class MoonSettings:
    base_url: str = DEFAULT_BASE_URL
    client_id: str = DEFAULT_CLIENT_ID
    timeout: float = 10.0
    day_delay: float = 0.15
    primary_count: int = 8
    default_location: Location = Location(DEFAULT_LAT, DEFAULT_LON, DEFAULT_TZ)

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.day_delay < 0:
            raise ValueError("day_delay must be >= 0")
        if not 1 <= self.primary_count <= 99:
            raise ValueError("primary_count must be between 1 and 99")

    @classmethod
    def from_env(cls) -> "MoonSettings":
        location = Location(
            float(os.getenv("MOON_DEFAULT_LAT", str(DEFAULT_LAT))),
            float(os.getenv("MOON_DEFAULT_LON", str(DEFAULT_LON))),
            float(os.getenv("MOON_DEFAULT_TZ", str(DEFAULT_TZ))),
        )
        return cls(
            base_url=os.getenv("MOON_API_BASE", DEFAULT_BASE_URL).rstrip("/"),
            client_id=os.getenv("MOON_API_ID", DEFAULT_CLIENT_ID),
            timeout=float(os.getenv("MOON_API_TIMEOUT", "10.0")),
            day_delay=float(os.getenv("MOON_DAY_DELAY", "0.15")),
            primary_count=int(os.getenv("MOON_PRIMARY_COUNT", "8")),
            default_location=location,
        )

    def location(self, lat=None, lon=None, tz=None) -> Location:
        """Default location with any of ``lat``/``lon``/``tz`` overridden."""
        base = self.default_location
        return Location(
            base.latitude if lat is None else lat,
            base.longitude if lon is None else lon,
            base.utc_offset_hours if tz is None else tz,
        )
