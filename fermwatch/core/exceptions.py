"""Errors raised while talking to the RAPT identity service and API."""
from __future__ import annotations


class UpstreamError(Exception):
    """Base error for failures of an external collaborator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(UpstreamError):
    """Raised when the credential/token exchange fails."""


class RaptAPIError(UpstreamError):
    """Raised when a RAPT API call fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
