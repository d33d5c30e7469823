from pydantic import BaseModel, Field

from fermwatch.models.enums import AlertType, Severity
from fermwatch.schemas.base import CamelModel
from fermwatch.schemas.device import Device
from fermwatch.schemas.thresholds import ThresholdConfig


class HydrometersResponse(CamelModel):
    devices: list[Device]
    config: ThresholdConfig


class ErrorResponse(BaseModel):
    error: str


class AlertOut(CamelModel):
    type: AlertType
    severity: Severity
    message: str


class DeviceReadout(CamelModel):
    """Display-time classification of a device's most recent reading."""

    device_id: str
    name: str
    has_data: bool
    severity: Severity | None = None
    temperature: float | None = None
    battery: float | None = None
    low_battery: bool = False
    alerts: list[AlertOut] = Field(default_factory=list)


class ChartDataset(CamelModel):
    label: str
    data: list[float | None]
    y_axis_id: str
    border_color: str
    point_colors: list[str] | None = None


class ChartPayload(CamelModel):
    device_id: str
    title: str
    labels: list[str]
    datasets: list[ChartDataset]
    temperature_severities: list[Severity | None]
