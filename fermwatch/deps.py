from datetime import timedelta

from fastapi import Depends, HTTPException, Query, Request
from pydantic import ValidationError

from fermwatch.core.config import Settings, get_settings
from fermwatch.schemas.thresholds import ThresholdConfig
from fermwatch.services.enrichment import TelemetryEnricher
from fermwatch.services.rapt_client import RaptClient


def get_app_settings() -> Settings:
    return get_settings()


def get_rapt_client(request: Request) -> RaptClient:
    return request.app.state.rapt_client


def get_enricher(
    client: RaptClient = Depends(get_rapt_client),
    settings: Settings = Depends(get_app_settings),
) -> TelemetryEnricher:
    return TelemetryEnricher(
        client,
        manual_og=settings.manual_original_gravity,
        lookback=timedelta(hours=settings.telemetry_lookback_hours),
    )


def get_default_thresholds(settings: Settings = Depends(get_app_settings)) -> ThresholdConfig:
    return ThresholdConfig.from_settings(settings)


def get_threshold_config(
    danger_min: float | None = Query(None, alias="dangerMin"),
    warning_min: float | None = Query(None, alias="warningMin"),
    warning_max: float | None = Query(None, alias="warningMax"),
    danger_max: float | None = Query(None, alias="dangerMax"),
    defaults: ThresholdConfig = Depends(get_default_thresholds),
) -> ThresholdConfig:
    """Thresholds held by the client, falling back to the configured defaults."""
    overrides = {
        "danger_min": danger_min,
        "warning_min": warning_min,
        "warning_max": warning_max,
        "danger_max": danger_max,
    }
    values = defaults.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ThresholdConfig(**values)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from None
