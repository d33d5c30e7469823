import logging

from fastapi import FastAPI

from fermwatch.app_factory import create_base_app
from fermwatch.routers import API_ROUTERS

logging.basicConfig(level=logging.INFO)


def create_app() -> FastAPI:
    app = create_base_app()
    for router in API_ROUTERS:
        app.include_router(router)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return app


app = create_app()
