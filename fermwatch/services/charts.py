"""Chart series for the fermentation dashboard."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from fermwatch.models.enums import Severity
from fermwatch.schemas.device import Device
from fermwatch.schemas.hydrometer import ChartDataset, ChartPayload
from fermwatch.schemas.thresholds import ThresholdConfig
from fermwatch.services.thresholds import classify_temperature

TIME_RANGES_HOURS = (6, 12, 18, 24, 36)

# (light, dark) greys used in monochrome mode
_MONO_SEVERITY = {
    Severity.DANGER: ("rgb(82, 82, 82)", "rgb(212, 212, 212)"),
    Severity.WARNING: ("rgb(115, 115, 115)", "rgb(163, 163, 163)"),
    Severity.GOOD: ("rgb(64, 64, 64)", "rgb(115, 115, 115)"),
}
_COLOR_SEVERITY = {
    Severity.DANGER: "rgb(239, 68, 68)",
    Severity.WARNING: "rgb(249, 115, 22)",
    Severity.GOOD: "rgb(34, 197, 94)",
}


@dataclass(frozen=True)
class Theme:
    dark: bool = False
    monochrome: bool = False

    def line(self, color: str) -> str:
        if self.monochrome:
            return "rgb(163, 163, 163)" if self.dark else "rgb(115, 115, 115)"
        return color

    def severity(self, severity: Severity) -> str:
        if self.monochrome:
            light, dark = _MONO_SEVERITY[severity]
            return dark if self.dark else light
        return _COLOR_SEVERITY[severity]

    def attenuation(self, value: float | None) -> str:
        """Pink to purple as attenuation approaches 100%, a grey ramp in monochrome."""
        progress = min(max((value or 0.0) / 100, 0.0), 1.0)
        if self.monochrome:
            grey = int(212 - progress * 100) if self.dark else int(64 + progress * 100)
            return f"rgb({grey}, {grey}, {grey})"
        r = int(236 - (236 - 167) * progress)
        g = int(72 + (139 - 72) * progress)
        b = int(153 + (250 - 153) * progress)
        return f"rgb({r}, {g}, {b})"


def chart_title(hours: int | None, count: int) -> str:
    span = "All Time" if hours is None else f"Last {hours} Hours"
    return f"Fermentation Metrics - {span} ({count} readings)"


def build_chart(
    device: Device,
    now: datetime,
    hours: int | None,
    thresholds: ThresholdConfig,
    cold_crash: bool = False,
    theme: Theme | None = None,
) -> ChartPayload:
    """Chronological series for ``device`` limited to the last ``hours`` (None for all)."""
    theme = theme or Theme()
    samples = device.telemetry
    if hours is not None:
        cutoff = now - timedelta(hours=hours)
        samples = [s for s in samples if s.created_on >= cutoff]
    samples = sorted(samples, key=lambda s: s.created_on)

    severities: list[Severity | None] = [
        classify_temperature(s.temperature, thresholds, cold_crash) if s.temperature is not None else None
        for s in samples
    ]
    temp_colors = [theme.severity(sev) if sev is not None else theme.line("rgb(34, 197, 94)") for sev in severities]

    datasets = [
        ChartDataset(
            label="Temperature (°C)",
            data=[s.temperature for s in samples],
            y_axis_id="y",
            border_color=theme.line("rgb(34, 197, 94)"),
            point_colors=temp_colors,
        ),
        ChartDataset(
            label="ABV (%)",
            data=[s.abv for s in samples],
            y_axis_id="y1",
            border_color=theme.line("rgb(59, 130, 246)"),
        ),
        ChartDataset(
            label="Attenuation (%)",
            data=[s.attenuation for s in samples],
            y_axis_id="y2",
            border_color=theme.line("rgb(236, 72, 153)"),
            point_colors=[theme.attenuation(s.attenuation) for s in samples],
        ),
        ChartDataset(
            label="Gravity Velocity (ppd)",
            data=[s.gravity_velocity or 0.0 for s in samples],
            y_axis_id="y3",
            border_color=theme.line("rgb(234, 179, 8)"),
        ),
    ]
    return ChartPayload(
        device_id=device.id,
        title=chart_title(hours, len(samples)),
        labels=[s.created_on.strftime("%b %d %H:%M") for s in samples],
        datasets=datasets,
        temperature_severities=severities,
    )
