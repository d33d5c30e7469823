from datetime import datetime, timezone

from pydantic import ConfigDict, field_validator

from fermwatch.schemas.base import CamelModel


class RawSample(CamelModel):
    """One hydrometer reading as returned by the telemetry endpoint."""

    model_config = ConfigDict(frozen=True)

    created_on: datetime
    gravity: float
    temperature: float | None = None
    battery: float | None = None
    rssi: int | None = None

    @field_validator("created_on")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EnrichedSample(RawSample):
    abv: float
    attenuation: float
    gravity_velocity: float | None = None
