from fastapi import APIRouter, Depends

from fermwatch.core.config import Settings
from fermwatch.deps import get_app_settings

router = APIRouter(tags=["meta"])


@router.get("/health")
async def healthcheck(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    return {"status": "ok", "app": settings.app_name}
