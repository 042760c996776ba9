from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import List, Optional

import httpx
import typer

from moonphase.cli.render import render_error, render_phases, render_today, render_week
from moonphase.config import MoonSettings
from moonphase.domain.errors import MoonDataError
from moonphase.domain.models import parse_day
from moonphase.hub.moon_hub import MoonHub
from moonphase.services.dashboard import DashboardController

app = typer.Typer(help="Moon phase dashboard backed by the USNO API")

CLI_ERRORS = (MoonDataError, httpx.HTTPError)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and skipped days")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_hub(settings: MoonSettings) -> MoonHub:
    return MoonHub.from_settings(settings)


def _resolve(lat: Optional[float], lon: Optional[float], tz: Optional[float]):
    settings = MoonSettings.from_env()
    try:
        location = settings.location(lat, lon, tz)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return settings, location


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_day(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--date") from exc


def _echo(lines: List[str]) -> None:
    for line in lines:
        typer.echo(line)


def _fail(message: str, exc: Exception) -> None:
    _echo(render_error(message, str(exc)))
    raise typer.Exit(code=1)


@app.command("today")
def cli_today(
    lat: Optional[float] = typer.Option(None, help="Latitude"),
    lon: Optional[float] = typer.Option(None, help="Longitude"),
    tz: Optional[float] = typer.Option(None, help="UTC offset in hours"),
    on: Optional[str] = typer.Option(None, "--date", help="Date YYYY-MM-DD (default: today at the location)"),
):
    """Show the moon phase card for one day."""
    settings, location = _resolve(lat, lon, tz)
    target = _parse_date(on)
    hub = _build_hub(settings)
    try:
        current = asyncio.run(hub.fetch_current(location, today=target))
    except CLI_ERRORS as exc:
        _fail("Failed to get current moon phase", exc)
    _echo(render_today(current))


@app.command("week")
def cli_week(
    lat: Optional[float] = typer.Option(None, help="Latitude"),
    lon: Optional[float] = typer.Option(None, help="Longitude"),
    tz: Optional[float] = typer.Option(None, help="UTC offset in hours"),
    on: Optional[str] = typer.Option(None, "--date", help="First day YYYY-MM-DD"),
):
    """Show the 7-day forecast, skipping days the service could not answer."""
    settings, location = _resolve(lat, lon, tz)
    start = _parse_date(on)
    hub = _build_hub(settings)
    try:
        days = asyncio.run(hub.fetch_week(location, today=start))
    except CLI_ERRORS as exc:
        _fail("Failed to get 7-day forecast", exc)
    _echo(render_week(days))
    typer.echo(f"[week] fetched {len(days)}/7 days")


@app.command("phases")
def cli_phases(
    lat: Optional[float] = typer.Option(None, help="Latitude"),
    lon: Optional[float] = typer.Option(None, help="Longitude"),
    tz: Optional[float] = typer.Option(None, help="UTC offset in hours"),
    count: int = typer.Option(8, min=1, max=99, help="Number of primary phases"),
    on: Optional[str] = typer.Option(None, "--date", help="Start date YYYY-MM-DD (default: today at the location)"),
):
    """List the next primary phases (new, first quarter, full, last quarter)."""
    settings, location = _resolve(lat, lon, tz)
    start = _parse_date(on)
    hub = _build_hub(settings)
    try:
        events = asyncio.run(hub.fetch_primary(location, count=count, today=start))
    except CLI_ERRORS as exc:
        _fail("Failed to get primary moon phases", exc)
    _echo(render_phases(events))


@app.command("dashboard")
def cli_dashboard(
    lat: Optional[float] = typer.Option(None, help="Latitude"),
    lon: Optional[float] = typer.Option(None, help="Longitude"),
    tz: Optional[float] = typer.Option(None, help="UTC offset in hours"),
    weekly: bool = typer.Option(False, "--weekly", help="Also load the 7-day forecast"),
    on: Optional[str] = typer.Option(None, "--date", help="Date YYYY-MM-DD"),
):
    """Today's card, optionally followed by the forecast."""
    settings, location = _resolve(lat, lon, tz)
    controller = DashboardController(_build_hub(settings), location, today=_parse_date(on))
    state = asyncio.run(_run_dashboard(controller, weekly))
    if state.view == "error":
        _echo(render_error(state.error or "Something went wrong"))
        raise typer.Exit(code=1)
    _echo(render_today(state.current))
    if state.show_weekly:
        typer.echo("")
        _echo(render_week(state.weekly))
    if state.error:
        typer.echo("")
        _echo(render_error(state.error))


async def _run_dashboard(controller: DashboardController, weekly: bool):
    state = await controller.load_initial()
    if weekly and state.has_data:
        state = await controller.load_weekly()
    return state


if __name__ == "__main__":
    app()
