"""Test configuration and fixtures."""
from __future__ import annotations

import json
from typing import AsyncGenerator
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fermwatch.core.config import Settings
from fermwatch.deps import get_app_settings, get_rapt_client
from fermwatch.services.auth import Credentials, TokenProvider
from fermwatch.services.rapt_client import RaptClient
from main import app

AUTH_URL = "https://id.test/connect/token"
API_URL = "https://api.test/api"


class FakeRapt:
    """In-memory stand-in for the RAPT identity service and API."""

    def __init__(self):
        self.devices: list[dict] = []
        self.telemetry: dict[str, list[dict]] = {}
        self.profiles: list[dict] = []
        self.fail_windowed: set[str] = set()
        self.fail_unwindowed: set[str] = set()
        self.fail_devices = False
        self.fail_profiles = False
        self.fail_auth = False
        self.expires_in = 3600
        self.auth_calls = 0
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == AUTH_URL:
            self.auth_calls += 1
            if self.fail_auth:
                return httpx.Response(400, json={"error": "invalid_grant"})
            form = parse_qs(request.content.decode())
            assert form["grant_type"] == ["password"]
            return httpx.Response(
                200, json={"access_token": f"token-{self.auth_calls}", "expires_in": self.expires_in}
            )

        if not request.headers.get("Authorization", "").startswith("Bearer "):
            return httpx.Response(401)

        path = request.url.path
        params = request.url.params
        if path == "/api/Hydrometers/GetHydrometers":
            if self.fail_devices:
                return httpx.Response(500, text="boom")
            return httpx.Response(200, json=self.devices)
        if path == "/api/Hydrometers/GetTelemetry":
            device_id = params["hydrometerId"]
            windowed = "startDate" in params
            if windowed and device_id in self.fail_windowed:
                return httpx.Response(500, text="window not supported")
            if not windowed and device_id in self.fail_unwindowed:
                return httpx.Response(502, text="bad gateway")
            return httpx.Response(200, content=json.dumps(self.telemetry.get(device_id, [])))
        if path == "/api/Profiles/GetProfiles":
            if self.fail_profiles:
                return httpx.Response(503, text="unavailable")
            return httpx.Response(200, json=self.profiles)
        return httpx.Response(404)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def fake_rapt() -> FakeRapt:
    return FakeRapt()


@pytest_asyncio.fixture
async def http_client(fake_rapt: FakeRapt) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_rapt.handler)) as client:
        yield client


@pytest.fixture
def token_provider(http_client: httpx.AsyncClient) -> TokenProvider:
    return TokenProvider(http_client, AUTH_URL, Credentials(username="brewer@example.com", password="secret"))


@pytest.fixture
def rapt_client(http_client: httpx.AsyncClient, token_provider: TokenProvider) -> RaptClient:
    return RaptClient(http_client, API_URL, token_provider)


@pytest_asyncio.fixture
async def client(rapt_client: RaptClient) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client backed by the fake RAPT API."""

    def override_get_settings():
        return Settings(rapt_email="brewer@example.com", rapt_auth_url=AUTH_URL, rapt_api_url=API_URL)

    app.dependency_overrides[get_rapt_client] = lambda: rapt_client
    app.dependency_overrides[get_app_settings] = override_get_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
