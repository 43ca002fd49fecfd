"""Shared test fixtures."""

from __future__ import annotations

import httpx
import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from gamp.api.dependencies import get_config, get_transport, new_hit
from gamp.config import AppConfig
from gamp.core.hit import Hit
from gamp.core.models import HitType
from gamp.transport.httpx_transport import HttpxHitTransport


class RecordingHandler:
    """httpx.MockTransport handler that records every request it answers."""

    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)


@pytest.fixture
def config() -> AppConfig:
    config = AppConfig()
    config.tracking.environment_type = "dev"
    config.tracking.staging_tracking_id = "UA-TEST-1"
    config.tracking.production_tracking_id = "UA-PROD-1"
    config.logging.level = "warning"
    return config


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def transport(handler):
    with HttpxHitTransport(transport=httpx.MockTransport(handler)) as t:
        yield t


@pytest.fixture
def app(config, transport) -> FastAPI:
    app = FastAPI()

    @app.get("/page")
    def page(hit: Hit = Depends(new_hit), hit_transport=Depends(get_transport)) -> dict:
        hit.set_hit_type(HitType.PAGEVIEW)
        hit.set_document_location_url("https://example.com/page", title="Example")
        result = hit.send_hit(hit_transport)
        return {"status": result.status.value, "url": result.url}

    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_transport] = lambda: transport
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
