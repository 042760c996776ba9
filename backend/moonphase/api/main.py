from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moonphase.api.routers import moon
from moonphase.config import MoonSettings
from moonphase.hub.moon_hub import MoonHub


def create_app(hub: Optional[MoonHub] = None, settings: Optional[MoonSettings] = None) -> FastAPI:
    app = FastAPI(title="Moon Phase API", version="0.1.0")
    settings = settings or MoonSettings.from_env()
    app.state.settings = settings
    app.state.moon_hub = hub or MoonHub.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(moon.router, prefix="/api")
    return app


app = create_app()
