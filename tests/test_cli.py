"""Tests for the fermwatch-fetch command."""
import json
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from fermwatch import cli
from fermwatch.core.config import Settings
from tests.conftest import API_URL, AUTH_URL

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture
def patched(fake_rapt):
    fake_rapt.devices = [{"id": "pill-a", "name": "Saison"}]
    fake_rapt.telemetry = {
        "pill-a": [
            {"createdOn": datetime.now(timezone.utc).isoformat(), "gravity": 1012, "temperature": 17, "battery": 50},
        ]
    }
    settings = Settings(_env_file=None, rapt_auth_url=AUTH_URL, rapt_api_url=API_URL, manual_original_gravity=1050)

    def client_factory(**kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(fake_rapt.handler))

    with patch("fermwatch.cli.get_settings", return_value=settings), patch(
        "fermwatch.cli.httpx.AsyncClient", client_factory
    ):
        yield fake_rapt


@pytest.mark.asyncio
async def test_fetch_prints_enriched_devices(patched, capsys):
    await cli._fetch(None, cold_crash=False, status_only=False)

    payload = json.loads(capsys.readouterr().out)
    device = payload["devices"][0]
    assert device["originalGravitySource"] == "manual"
    assert device["telemetry"][0]["abv"] == 4.99
    assert payload["config"]["dangerMax"] == 28.0


@pytest.mark.asyncio
async def test_fetch_status_only(patched, capsys):
    await cli._fetch(12, cold_crash=True, status_only=True)

    readouts = json.loads(capsys.readouterr().out)
    assert readouts[0]["severity"] == "good"
    assert readouts[0]["alerts"] == []
