from datetime import datetime

from pydantic import Field

from fermwatch.models.enums import OriginalGravitySource
from fermwatch.schemas.base import CamelModel
from fermwatch.schemas.telemetry import EnrichedSample


class ActiveProfileSession(CamelModel):
    id: str | None = None


class ProfileSession(CamelModel):
    id: str
    original_gravity: float | None = None


class Profile(CamelModel):
    id: str | None = None
    name: str | None = None
    sessions: list[ProfileSession] = Field(default_factory=list)


class Device(CamelModel):
    id: str
    name: str | None = None
    active_profile_session: ActiveProfileSession | None = None
    firmware_version: str | None = None
    is_latest_firmware: bool | None = None
    last_activity_time: datetime | None = None
    battery: float | None = None
    rssi: int | None = None
    telemetry: list[EnrichedSample] = Field(default_factory=list)
    original_gravity: float | None = None
    original_gravity_source: OriginalGravitySource | None = None

    @property
    def display_name(self) -> str:
        return self.name or "Unnamed Device"
