from typing import TYPE_CHECKING

from pydantic import ConfigDict, model_validator

from fermwatch.schemas.base import CamelModel

if TYPE_CHECKING:
    from fermwatch.core.config import Settings


class ThresholdConfig(CamelModel):
    """Temperature bounds (°C) used to grade readings."""

    model_config = ConfigDict(frozen=True)

    danger_min: float = 18.0
    warning_min: float = 20.0
    warning_max: float = 26.0
    danger_max: float = 28.0

    @model_validator(mode="after")
    def _check_order(self) -> "ThresholdConfig":
        if not (self.danger_min <= self.warning_min <= self.warning_max <= self.danger_max):
            raise ValueError("thresholds must satisfy dangerMin <= warningMin <= warningMax <= dangerMax")
        return self

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ThresholdConfig":
        return cls(
            danger_min=settings.temp_danger_min,
            warning_min=settings.temp_warning_min,
            warning_max=settings.temp_warning_max,
            danger_max=settings.temp_danger_max,
        )
