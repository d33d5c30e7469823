from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import timedelta

import httpx

from fermwatch.app_factory import build_rapt_client
from fermwatch.core.config import get_settings
from fermwatch.core.exceptions import UpstreamError
from fermwatch.schemas.thresholds import ThresholdConfig
from fermwatch.services.alert_rules import evaluate_device
from fermwatch.services.enrichment import TelemetryEnricher


async def _fetch(lookback_hours: int | None, cold_crash: bool, status_only: bool) -> None:
    settings = get_settings()
    hours = lookback_hours or settings.telemetry_lookback_hours
    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as http_client:
        enricher = TelemetryEnricher(
            build_rapt_client(settings, http_client),
            manual_og=settings.manual_original_gravity,
            lookback=timedelta(hours=hours),
        )
        devices = await enricher.enrich_all()

    thresholds = ThresholdConfig.from_settings(settings)
    if status_only:
        payload = [evaluate_device(d, thresholds, cold_crash).model_dump(mode="json", by_alias=True) for d in devices]
    else:
        payload = {
            "devices": [d.model_dump(mode="json", by_alias=True) for d in devices],
            "config": thresholds.model_dump(mode="json", by_alias=True),
        }
    print(json.dumps(payload, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(prog="fermwatch-fetch", description="Fetch and enrich RAPT hydrometer telemetry")
    parser.add_argument("--hours", type=int, default=None, help="Lookback window in hours")
    parser.add_argument("--cold-crash", action="store_true", help="Suppress low-temperature alerts")
    parser.add_argument("--status", action="store_true", help="Print latest-reading status only")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    try:
        asyncio.run(_fetch(args.hours, args.cold_crash, args.status))
    except UpstreamError as exc:
        raise SystemExit(f"Error fetching data: {exc.message}") from None


if __name__ == "__main__":
    main()
