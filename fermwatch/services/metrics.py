"""ABV, apparent attenuation and gravity velocity from hydrometer readings."""
from __future__ import annotations

from datetime import datetime
from typing import Sequence

from fermwatch.schemas.telemetry import EnrichedSample, RawSample

ABV_FACTOR = 131.25
SECONDS_PER_DAY = 86400.0


def specific_gravity(points: float) -> float:
    """Gravity points (1034) to specific gravity (1.034)."""
    return points / 1000


def abv(og: float, gravity: float) -> float:
    value = (specific_gravity(og) - specific_gravity(gravity)) * ABV_FACTOR
    return round(max(0.0, value), 2)


def attenuation(og: float, gravity: float) -> float:
    """Apparent attenuation in percent; unclamped, 0 when OG is exactly 1.000."""
    og_sg = specific_gravity(og)
    fg_sg = specific_gravity(gravity)
    if og_sg == 1.0:
        return 0.0
    return ((og_sg - fg_sg) / (og_sg - 1.0)) * 100


def _days_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def gravity_velocities(samples: Sequence[RawSample]) -> list[float | None]:
    """Points per day against the chronologically previous reading.

    Result is aligned with ``samples``. The earliest reading, and any reading
    sharing its predecessor's timestamp, has no velocity.
    """
    order = sorted(range(len(samples)), key=lambda i: samples[i].created_on)
    velocities: list[float | None] = [None] * len(samples)
    for prev_idx, idx in zip(order, order[1:]):
        prev, cur = samples[prev_idx], samples[idx]
        days = _days_between(prev.created_on, cur.created_on)
        if days <= 0:
            continue
        velocities[idx] = (cur.gravity - prev.gravity) / days
    return velocities


def derive_metrics(samples: Sequence[RawSample], og: float) -> list[EnrichedSample]:
    velocities = gravity_velocities(samples)
    return [
        EnrichedSample(
            **sample.model_dump(include=set(RawSample.model_fields)),
            abv=abv(og, sample.gravity),
            attenuation=attenuation(og, sample.gravity),
            gravity_velocity=velocity,
        )
        for sample, velocity in zip(samples, velocities)
    ]
