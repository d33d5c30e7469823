"""Per-device telemetry enrichment: fetch, resolve OG, derive metrics."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from fermwatch.core.exceptions import RaptAPIError
from fermwatch.schemas.device import Device
from fermwatch.schemas.telemetry import RawSample
from fermwatch.services.gravity import resolve_original_gravity
from fermwatch.services.metrics import derive_metrics
from fermwatch.services.rapt_client import RaptClient

log = logging.getLogger(__name__)


class TelemetryEnricher:
    """Builds the enriched device list served to the dashboard.

    Classification is left to display time so threshold changes never need a
    re-fetch.
    """

    def __init__(
        self,
        client: RaptClient,
        manual_og: float | None = None,
        lookback: timedelta | None = timedelta(hours=24),
    ):
        self.client = client
        self.manual_og = manual_og
        self.lookback = lookback

    def with_lookback(self, lookback: timedelta | None) -> "TelemetryEnricher":
        """Same enricher over another window; None fetches the whole history."""
        return TelemetryEnricher(self.client, manual_og=self.manual_og, lookback=lookback)

    async def fetch_telemetry(self, device_id: str, now: datetime) -> list[RawSample]:
        """Windowed fetch first, unwindowed on failure, empty when both fail."""
        if self.lookback is not None:
            try:
                samples = await self.client.get_telemetry(device_id, now - self.lookback, now)
                log.info("Fetched %d telemetry points for %s", len(samples), device_id)
                return samples
            except RaptAPIError as exc:
                log.warning("Windowed telemetry failed for %s (%s), trying unwindowed", device_id, exc)

        try:
            samples = await self.client.get_telemetry(device_id)
            log.info("Fetched %d telemetry points for %s (unwindowed)", len(samples), device_id)
            return samples
        except RaptAPIError as exc:
            log.warning("Both telemetry requests failed for %s: %s", device_id, exc)
            return []

    async def enrich_device(self, device: Device, now: datetime) -> Device:
        raw = await self.fetch_telemetry(device.id, now)
        if not raw:
            log.info("Device %s has no telemetry in range", device.display_name)
            return device.model_copy(update={"telemetry": []})

        resolved = await resolve_original_gravity(
            device, raw, self.client.find_profile_session, self.manual_og
        )
        enriched = derive_metrics(raw, resolved.value)
        return device.model_copy(
            update={
                "telemetry": enriched,
                "original_gravity": resolved.value,
                "original_gravity_source": resolved.source,
            }
        )

    async def enrich_all(self, now: datetime | None = None) -> list[Device]:
        """Enrich every device; a device-list or authentication failure propagates."""
        if now is None:
            now = datetime.now(timezone.utc)
        devices = await self.client.list_devices()
        tasks = [asyncio.ensure_future(self.enrich_device(device, now)) for device in devices]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            raise

    async def enrich_one(self, device_id: str, now: datetime | None = None) -> Device | None:
        if now is None:
            now = datetime.now(timezone.utc)
        devices = await self.client.list_devices()
        device = next((d for d in devices if d.id == device_id), None)
        if device is None:
            return None
        return await self.enrich_device(device, now)
