from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from moonphase.api.main import create_app
from moonphase.config import MoonSettings
from moonphase.hub.moon_hub import MoonHub
from moonphase.tests.payloads import oneday_payload, phases_payload


class UsnoStub:
    """Fake USNO service; set ``failing_dates`` / ``phases_status`` to inject errors."""

    def __init__(self) -> None:
        self.failing_dates: set[str] = set()
        self.fail_all_days = False
        self.phases_status = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/rstt/oneday"):
            if self.fail_all_days or request.url.params["date"] in self.failing_dates:
                return httpx.Response(200, json={"error": "Date out of range"})
            return httpx.Response(200, json=oneday_payload("First Quarter", 0.5))
        if self.phases_status != 200:
            return httpx.Response(self.phases_status)
        return httpx.Response(
            200,
            json=phases_payload(
                ("Full Moon", 2024, 3, 25, "07:00"),
                ("Last Quarter", 2024, 4, 2, "03:15"),
            ),
        )


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture()
def usno():
    return UsnoStub()


@pytest.fixture()
def api_client(usno):
    settings = MoonSettings(base_url="http://usno.test/api", day_delay=0)
    hub = MoonHub.from_settings(settings, transport=httpx.MockTransport(usno), sleep=_no_sleep)
    app = create_app(hub=hub, settings=settings)
    with TestClient(app) as client:
        yield client
