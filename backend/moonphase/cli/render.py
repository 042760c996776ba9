from __future__ import annotations

from typing import Iterable, List, Optional

from moonphase.domain.models import CurrentPhaseRecord, DayRecord, PhaseEvent
from moonphase.domain.symbols import map_phase_to_symbol

BAR_WIDTH = 20


def illumination_bar(percent: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * max(0, min(100, percent)) / 100)
    return "#" * filled + "." * (width - filled)


def render_today(current: CurrentPhaseRecord) -> List[str]:
    lines = [
        f"Today ({current.date.isoformat()})",
        f"  {map_phase_to_symbol(current.phase_name)}  {current.phase_name}",
        f"  [{illumination_bar(current.illumination_percent)}] {current.illumination_percent}% illuminated",
    ]
    closest = current.closest_phase
    if closest is not None:
        when = f"{closest.date} {closest.time}" if closest.time else closest.date
        lines.append(f"  Closest phase: {closest.phase_name} on {when}")
    for event in current.raw_day_events:
        phen = event.get("phen")
        time = event.get("time")
        if phen and time:
            lines.append(f"  Moon {phen.lower()}: {time}")
    return lines


def render_week(days: Iterable[DayRecord]) -> List[str]:
    lines = ["7-day forecast"]
    for day in days:
        label = f"{day.day_name or ''} {day.display_date or day.date.isoformat()}".strip()
        lines.append(
            f"  {label:<10} {map_phase_to_symbol(day.phase_name)}  "
            f"{day.illumination_percent:>3}%  {day.phase_name}"
        )
    return lines


def render_phases(events: Iterable[PhaseEvent]) -> List[str]:
    lines = ["Upcoming primary phases"]
    for event in events:
        lines.append(f"  {event.date} {event.time:<5}  {map_phase_to_symbol(event.phase_name)}  {event.phase_name}")
    return lines


def render_error(message: str, detail: Optional[str] = None) -> List[str]:
    lines = [f"\U0001F31A {message}"]
    if detail:
        lines.append(f"  ({detail})")
    return lines
