"""HTTP client for the RAPT hydrometer API."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from fermwatch.core.exceptions import RaptAPIError
from fermwatch.schemas.device import Device, Profile, ProfileSession
from fermwatch.schemas.telemetry import RawSample
from fermwatch.services.auth import TokenProvider

logger = logging.getLogger(__name__)


def to_rfc3339_z(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


class RaptClient:
    """RAPT API calls authenticated with a bearer token from ``TokenProvider``."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, tokens: TokenProvider):
        """Initialize API client.

        Args:
            client: Shared async HTTP client
            base_url: RAPT API base URL (e.g., https://api.rapt.io/api)
            tokens: Provider of valid bearer tokens
        """
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._tokens = tokens

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a JSON document from the API.

        Raises:
            AuthenticationError: if no token can be obtained
            RaptAPIError: on transport errors, non-2xx answers or non-JSON bodies
        """
        token = await self._tokens.get_valid_token()
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise RaptAPIError(f"{path}: {exc}") from exc
        if not response.is_success:
            raise RaptAPIError(f"{path}: HTTP {response.status_code}: {response.text}", response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise RaptAPIError(f"{path}: invalid JSON response", response.status_code) from exc

    # Hydrometers
    async def list_devices(self) -> list[Device]:
        data = await self._get("/Hydrometers/GetHydrometers")
        if not isinstance(data, list):
            raise RaptAPIError("/Hydrometers/GetHydrometers: expected a list of devices")
        try:
            devices = [Device.model_validate(item) for item in data]
        except ValidationError as exc:
            raise RaptAPIError(f"/Hydrometers/GetHydrometers: malformed device: {exc}") from exc
        logger.info("Found %d device(s)", len(devices))
        return devices

    async def get_telemetry(
        self,
        device_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[RawSample]:
        """Fetch raw readings, windowed when both ``start`` and ``end`` are given."""
        params = {"hydrometerId": device_id}
        if start is not None and end is not None:
            params["startDate"] = to_rfc3339_z(start)
            params["endDate"] = to_rfc3339_z(end)
        data = await self._get("/Hydrometers/GetTelemetry", params=params)
        if not data:
            return []
        if not isinstance(data, list):
            raise RaptAPIError("/Hydrometers/GetTelemetry: expected a list of readings")
        samples: list[RawSample] = []
        for item in data:
            try:
                samples.append(RawSample.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed reading for %s: %s", device_id, exc.errors(include_url=False))
        return samples

    # Profiles
    async def get_profiles(self) -> list[Profile]:
        data = await self._get("/Profiles/GetProfiles")
        if not isinstance(data, list):
            raise RaptAPIError("/Profiles/GetProfiles: expected a list of profiles")
        try:
            return [Profile.model_validate(item) for item in data]
        except ValidationError as exc:
            raise RaptAPIError(f"/Profiles/GetProfiles: malformed profile: {exc}") from exc

    async def find_profile_session(self, session_id: str) -> ProfileSession | None:
        for profile in await self.get_profiles():
            for session in profile.sessions:
                if session.id == session_id:
                    return session
        return None
