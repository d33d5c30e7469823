import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fermwatch.core.config import Settings, get_settings
from fermwatch.core.exceptions import UpstreamError
from fermwatch.services.auth import Credentials, TokenProvider
from fermwatch.services.rapt_client import RaptClient

logger = logging.getLogger(__name__)


def build_rapt_client(settings: Settings, http_client: httpx.AsyncClient) -> RaptClient:
    tokens = TokenProvider(
        http_client,
        settings.rapt_auth_url,
        Credentials(
            username=settings.rapt_email,
            password=settings.rapt_api_secret.get_secret_value(),
            client_id=settings.rapt_client_id,
        ),
        expiry_margin=settings.token_expiry_margin_seconds,
    )
    return RaptClient(http_client, settings.rapt_api_url, tokens)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as http_client:
        app.state.rapt_client = build_rapt_client(settings, http_client)
        yield


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Request %s failed: %s", request.url.path, exc.message)
    return JSONResponse(status_code=503, content={"error": exc.message})


def create_base_app() -> FastAPI:
    """
    Build a FastAPI application with shared middleware, settings, and lifespan hooks.
    Routers are included on top of this base instance.
    """
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    return app
