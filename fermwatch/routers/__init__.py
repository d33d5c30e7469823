from fastapi import APIRouter

from . import hydrometers, meta

API_ROUTERS: tuple[APIRouter, ...] = (
    meta.router,
    hydrometers.router,
)

__all__ = ["API_ROUTERS", "hydrometers", "meta"]
