"""Display-time alert rules for the latest reading of a hydrometer.

Each rule is a self-contained class that:
1. Checks if it should run (has required data)
2. Evaluates the reading against the current thresholds
3. Returns alerts with reasoning
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fermwatch.models.enums import AlertType, Severity
from fermwatch.schemas.device import Device
from fermwatch.schemas.hydrometer import AlertOut, DeviceReadout
from fermwatch.schemas.telemetry import EnrichedSample
from fermwatch.schemas.thresholds import ThresholdConfig
from fermwatch.services.thresholds import (
    LOW_BATTERY_PERCENT,
    classify_temperature,
    is_low_battery,
    temperature_warning,
)


def latest_sample(device: Device) -> EnrichedSample | None:
    if not device.telemetry:
        return None
    return max(device.telemetry, key=lambda s: s.created_on)


@dataclass
class RuleContext:
    """Context provided to alert rules."""

    device: Device
    latest: EnrichedSample
    thresholds: ThresholdConfig
    cold_crash: bool = False


@dataclass
class RuleResult:
    """Result of running an alert rule."""

    rule_name: str
    executed: bool
    reason: str  # Human-readable explanation
    alerts: list[AlertOut] = field(default_factory=list)


class AlertRule(ABC):
    """Base class for all alert rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for logging and debugging."""

    @abstractmethod
    def can_run(self, ctx: RuleContext) -> bool:
        """Check if rule has all required data to run."""

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> RuleResult:
        """Evaluate rule and return alerts to raise."""


class TemperatureAlertRule(AlertRule):
    """Raises an alert when the latest temperature is in the danger band."""

    @property
    def name(self) -> str:
        return "temperature_monitor"

    def can_run(self, ctx: RuleContext) -> bool:
        return ctx.latest.temperature is not None

    def evaluate(self, ctx: RuleContext) -> RuleResult:
        temp = ctx.latest.temperature
        message = temperature_warning(temp, ctx.thresholds, ctx.cold_crash)
        if message is None:
            severity = classify_temperature(temp, ctx.thresholds, ctx.cold_crash)
            return RuleResult(
                rule_name=self.name,
                executed=True,
                reason=f"Temperature {temp}°C graded {severity.value}",
            )

        alert_type = AlertType.TEMP_HIGH if temp > ctx.thresholds.danger_max else AlertType.TEMP_LOW
        return RuleResult(
            rule_name=self.name,
            executed=True,
            reason=message,
            alerts=[AlertOut(type=alert_type, severity=Severity.DANGER, message=message)],
        )


class BatteryAlertRule(AlertRule):
    """Warns when the hydrometer battery needs charging."""

    @property
    def name(self) -> str:
        return "battery_monitor"

    def can_run(self, ctx: RuleContext) -> bool:
        return ctx.latest.battery is not None

    def evaluate(self, ctx: RuleContext) -> RuleResult:
        battery = ctx.latest.battery
        if not is_low_battery(battery):
            return RuleResult(
                rule_name=self.name,
                executed=True,
                reason=f"Battery {battery:.0f}% is above {LOW_BATTERY_PERCENT:.0f}%",
            )
        return RuleResult(
            rule_name=self.name,
            executed=True,
            reason=f"Battery {battery:.0f}% below {LOW_BATTERY_PERCENT:.0f}%",
            alerts=[
                AlertOut(
                    type=AlertType.BATTERY_LOW,
                    severity=Severity.WARNING,
                    message=f"Low battery: {battery:.0f}%, please charge soon",
                )
            ],
        )


class FirmwareRule(AlertRule):
    """Flags devices whose firmware is behind the latest release."""

    @property
    def name(self) -> str:
        return "firmware_check"

    def can_run(self, ctx: RuleContext) -> bool:
        return ctx.device.is_latest_firmware is not None

    def evaluate(self, ctx: RuleContext) -> RuleResult:
        version = ctx.device.firmware_version or "unknown"
        if ctx.device.is_latest_firmware:
            return RuleResult(rule_name=self.name, executed=True, reason=f"Firmware {version} is current")
        return RuleResult(
            rule_name=self.name,
            executed=True,
            reason=f"Firmware {version} is outdated",
            alerts=[
                AlertOut(
                    type=AlertType.FIRMWARE_OUTDATED,
                    severity=Severity.WARNING,
                    message=f"Firmware update available (running {version})",
                )
            ],
        )


# Registry of all available rules
ALL_RULES: list[AlertRule] = [
    TemperatureAlertRule(),
    BatteryAlertRule(),
    FirmwareRule(),
]


def evaluate_device(device: Device, thresholds: ThresholdConfig, cold_crash: bool = False) -> DeviceReadout:
    latest = latest_sample(device)
    if latest is None:
        return DeviceReadout(device_id=device.id, name=device.display_name, has_data=False)

    ctx = RuleContext(device=device, latest=latest, thresholds=thresholds, cold_crash=cold_crash)
    alerts: list[AlertOut] = []
    for rule in ALL_RULES:
        if rule.can_run(ctx):
            alerts.extend(rule.evaluate(ctx).alerts)

    severity = None
    if latest.temperature is not None:
        severity = classify_temperature(latest.temperature, thresholds, cold_crash)
    return DeviceReadout(
        device_id=device.id,
        name=device.display_name,
        has_data=True,
        severity=severity,
        temperature=latest.temperature,
        battery=latest.battery,
        low_battery=is_low_battery(latest.battery),
        alerts=alerts,
    )
