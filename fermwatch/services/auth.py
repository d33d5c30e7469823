"""Bearer token acquisition for the RAPT identity service."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx

from fermwatch.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
    client_id: str = "rapt-user"


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenProvider:
    """Holds a single cached bearer token and refreshes it when expired.

    Concurrent callers of ``get_valid_token`` share one refresh: a caller that
    waited on the lock while another refreshed takes that fresh token, so only
    the first waiter hits the identity service.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth_url: str,
        credentials: Credentials,
        expiry_margin: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self.auth_url = auth_url
        self._credentials = credentials
        self._expiry_margin = expiry_margin
        self._clock = clock
        self._token: AccessToken | None = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def token(self) -> AccessToken | None:
        return self._token

    async def get_valid_token(self) -> str:
        token = self._token
        if token is not None and token.is_valid(self._clock()):
            return token.token
        generation = self._generation
        async with self._lock:
            token = self._token
            refreshed_meanwhile = token is not None and self._generation != generation
            if not refreshed_meanwhile and (token is None or not token.is_valid(self._clock())):
                token = await self.authenticate()
                self._token = token
                self._generation += 1
            return token.token

    def invalidate(self) -> None:
        self._token = None

    async def authenticate(self) -> AccessToken:
        """Exchange the configured credentials for a bearer token.

        Raises:
            AuthenticationError: on transport failure, a non-2xx answer or a
                response without ``access_token``.
        """
        logger.info("Authenticating with RAPT identity service as %s", self._credentials.username)
        form = {
            "client_id": self._credentials.client_id,
            "grant_type": "password",
            "username": self._credentials.username,
            "password": self._credentials.password,
        }
        try:
            response = await self._client.post(self.auth_url, data=form)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Authentication failed: HTTP %s", exc.response.status_code)
            raise AuthenticationError(f"Authentication failed: HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Authentication failed: %s", exc)
            raise AuthenticationError(f"Authentication failed: {exc}") from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthenticationError("Authentication failed: no access_token in response")
        try:
            expires_in = float(payload.get("expires_in") or 0)
        except (TypeError, ValueError):
            expires_in = 0.0

        logger.info("Authentication successful, token valid for %.0fs", expires_in)
        # the margin never eats more than half of the token lifetime
        lifetime = max(expires_in - min(self._expiry_margin, expires_in / 2), 0.0)
        return AccessToken(token=access_token, expires_at=self._clock() + lifetime)
