from datetime import datetime, timedelta, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from fermwatch.deps import get_default_thresholds, get_enricher, get_threshold_config
from fermwatch.schemas.hydrometer import ChartPayload, DeviceReadout, ErrorResponse, HydrometersResponse
from fermwatch.schemas.thresholds import ThresholdConfig
from fermwatch.services.alert_rules import evaluate_device
from fermwatch.services.charts import Theme, build_chart
from fermwatch.services.enrichment import TelemetryEnricher

router = APIRouter(
    prefix="/hydrometers",
    tags=["hydrometers"],
    responses={503: {"model": ErrorResponse, "description": "RAPT service unavailable"}},
)


@router.get("", response_model=HydrometersResponse)
async def list_hydrometers(
    enricher: TelemetryEnricher = Depends(get_enricher),
    config: ThresholdConfig = Depends(get_default_thresholds),
):
    devices = await enricher.enrich_all()
    return HydrometersResponse(devices=devices, config=config)


@router.get("/status", response_model=list[DeviceReadout])
async def hydrometer_status(
    cold_crash: bool = Query(False, alias="coldCrash"),
    enricher: TelemetryEnricher = Depends(get_enricher),
    thresholds: ThresholdConfig = Depends(get_threshold_config),
):
    """Classify the latest reading of every device against the given thresholds."""
    devices = await enricher.enrich_all()
    return [evaluate_device(device, thresholds, cold_crash) for device in devices]


@router.get("/{device_id}/chart", response_model=ChartPayload)
async def hydrometer_chart(
    device_id: str,
    hours: Literal["6", "12", "18", "24", "36", "all"] = "24",
    cold_crash: bool = Query(False, alias="coldCrash"),
    dark: bool = False,
    monochrome: bool = False,
    enricher: TelemetryEnricher = Depends(get_enricher),
    thresholds: ThresholdConfig = Depends(get_threshold_config),
):
    now = datetime.now(timezone.utc)
    window = None if hours == "all" else int(hours)
    if window is None:
        enricher = enricher.with_lookback(None)
    elif enricher.lookback is not None and timedelta(hours=window) > enricher.lookback:
        enricher = enricher.with_lookback(timedelta(hours=window))
    device = await enricher.enrich_one(device_id, now)
    if device is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Device not found")
    return build_chart(device, now, window, thresholds, cold_crash, Theme(dark=dark, monochrome=monochrome))
