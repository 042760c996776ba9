from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Union


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    utc_offset_hours: float = 0.0

    def __post_init__(self):
        for name in ("latitude", "longitude", "utc_offset_hours"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not -14.0 <= self.utc_offset_hours <= 14.0:
            raise ValueError(f"utc_offset_hours out of range: {self.utc_offset_hours}")

    @property
    def coords(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def today(self) -> date:
        """Calendar date at this location's UTC offset."""
        tz = timezone(timedelta(hours=self.utc_offset_hours))
        return datetime.now(tz).date()


@dataclass
class DayRecord:
    date: date
    phase_name: str
    illumination_percent: int
    day_name: Optional[str] = None
    display_date: Optional[str] = None


@dataclass
class ClosestPhase:
    phase_name: str
    date: str
    time: Optional[str] = None


@dataclass
class CurrentPhaseRecord(DayRecord):
    closest_phase: Optional[ClosestPhase] = None
    raw_day_events: List[dict] = field(default_factory=list)


@dataclass
class PhaseEvent:
    phase_name: str
    date: str
    time: str
    year: int
    month: int
    day: int


@dataclass
class DayOutcome:
    date: date
    record: Optional[DayRecord] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        if (self.record is None) == (self.error is None):
            raise ValueError("exactly one of record/error must be set")

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass
class AggregateResult:
    current: CurrentPhaseRecord
    weekly: List[DayRecord]
    primary: List[PhaseEvent]


def parse_day(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid calendar date: {value!r}") from exc


def canonical_date(year: int, month: int, day: int) -> str:
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def illumination_percent(value: Union[float, int, str]) -> int:
    """Normalise a source illumination value to a whole percentage.

    Fractions (0..1) are scaled by 100; strings such as ``"87%"`` are
    already percentages. Anything outside 0..100 after scaling is rejected.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            percent = float(text[:-1])
        else:
            percent = float(text) * 100
    else:
        percent = float(value) * 100
    if not math.isfinite(percent):
        raise ValueError(f"illumination is not finite: {value!r}")
    if not 0.0 <= percent <= 100.0:
        raise ValueError(f"illumination out of range: {value!r}")
    return round(percent)


def day_labels(day: date) -> tuple[str, str]:
    """Short weekday and month/day labels in the process locale."""
    return day.strftime("%a"), f"{day.strftime('%b')} {day.day}"
