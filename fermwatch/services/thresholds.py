"""Temperature and battery classification of hydrometer readings."""
from __future__ import annotations

from fermwatch.models.enums import Severity
from fermwatch.schemas.thresholds import ThresholdConfig

LOW_BATTERY_PERCENT = 20.0


def classify_temperature(temperature: float, config: ThresholdConfig, cold_crash_active: bool = False) -> Severity:
    """Grade a temperature against the four-point threshold set.

    While cold crashing, anything below ``danger_min`` counts as good; the
    high side is unaffected.
    """
    if cold_crash_active and temperature < config.danger_min:
        return Severity.GOOD
    if temperature < config.danger_min or temperature > config.danger_max:
        return Severity.DANGER
    if temperature < config.warning_min or temperature > config.warning_max:
        return Severity.WARNING
    return Severity.GOOD


def is_low_battery(battery: float | None) -> bool:
    return battery is not None and battery < LOW_BATTERY_PERCENT


def temperature_warning(temperature: float, config: ThresholdConfig, cold_crash_active: bool = False) -> str | None:
    """Message for a danger-level temperature, None for anything milder."""
    if classify_temperature(temperature, config, cold_crash_active) is not Severity.DANGER:
        return None
    if temperature > config.danger_max:
        margin = temperature - config.danger_max
        return (
            f"High temperature: {temperature:.1f}°C exceeds {config.danger_max:g}°C "
            f"by {margin:.1f}°C"
        )
    margin = config.danger_min - temperature
    return f"Low temperature: {temperature:.1f}°C is below {config.danger_min:g}°C by {margin:.1f}°C"
