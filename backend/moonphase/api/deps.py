from __future__ import annotations

from fastapi import HTTPException, Request

from moonphase.config import MoonSettings
from moonphase.hub.moon_hub import MoonHub


def get_hub(request: Request) -> MoonHub:
    hub = getattr(request.app.state, "moon_hub", None)
    if hub is None:
        raise HTTPException(status_code=500, detail="Moon hub not configured")
    return hub


def get_settings(request: Request) -> MoonSettings:
    return getattr(request.app.state, "settings", None) or MoonSettings()
