"""Tests for ABV, attenuation and gravity velocity derivation."""
import random
from datetime import datetime, timedelta, timezone

import pytest

from fermwatch.schemas.telemetry import RawSample
from fermwatch.services.metrics import abv, attenuation, derive_metrics, gravity_velocities

T0 = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _sample(hours: float, gravity: float, **extra) -> RawSample:
    return RawSample(created_on=T0 + timedelta(hours=hours), gravity=gravity, **extra)


def test_end_to_end_example_values():
    samples = [_sample(0, 1063), _sample(24, 1010)]
    enriched = derive_metrics(samples, 1063)

    assert enriched[0].abv == 0.0
    assert enriched[0].attenuation == 0.0
    assert enriched[1].abv == 6.96
    assert enriched[1].attenuation == pytest.approx(84.13, abs=0.01)


@pytest.mark.parametrize("og,gravity", [(1050, 1012), (1063, 1010), (1080, 1020), (1040, 1045), (1100, 998)])
def test_attenuation_matches_formula(og, gravity):
    og_sg, fg_sg = og / 1000, gravity / 1000
    expected = ((og_sg - fg_sg) / (og_sg - 1.0)) * 100
    assert attenuation(og, gravity) == pytest.approx(expected)


def test_attenuation_is_not_clamped():
    assert attenuation(1050, 1060) < 0
    assert attenuation(1050, 995) > 100


def test_attenuation_zero_for_degenerate_og():
    assert attenuation(1000, 1000) == 0.0
    assert attenuation(1000, 990) == 0.0


def test_abv_never_negative():
    assert abv(1050, 1052) == 0.0
    for _ in range(200):
        og = random.uniform(990, 1120)
        gravity = random.uniform(990, 1120)
        assert abv(og, gravity) >= 0


def test_abv_rounded_to_two_places():
    value = abv(1055, 1013)
    assert value == round(value, 2)
    assert value == 5.51


def test_derive_preserves_order_and_fields():
    samples = [
        _sample(5, 1030, temperature=19.5, battery=80, rssi=-70),
        _sample(0, 1050, temperature=20.0, battery=81, rssi=-71),
    ]
    enriched = derive_metrics(samples, 1050)

    assert [s.created_on for s in enriched] == [s.created_on for s in samples]
    assert enriched[0].temperature == 19.5
    assert enriched[0].battery == 80
    assert enriched[0].rssi == -70
    assert enriched[1].abv == 0.0


def test_derive_is_pure_and_idempotent():
    samples = [_sample(0, 1060), _sample(12, 1040), _sample(24, 1020)]
    snapshot = [s.model_dump() for s in samples]

    first = derive_metrics(samples, 1060)
    second = derive_metrics(samples, 1060)

    assert first == second
    assert [s.model_dump() for s in samples] == snapshot


def test_derive_empty_series():
    assert derive_metrics([], 1050) == []


def test_gravity_velocity_points_per_day():
    samples = [_sample(0, 1060), _sample(12, 1054), _sample(36, 1042)]
    velocities = gravity_velocities(samples)

    assert velocities[0] is None
    assert velocities[1] == pytest.approx(-12.0)
    assert velocities[2] == pytest.approx(-12.0)


def test_gravity_velocity_uses_chronological_order():
    samples = [_sample(36, 1042), _sample(0, 1060), _sample(12, 1054)]
    velocities = gravity_velocities(samples)

    assert velocities[1] is None
    assert velocities[2] == pytest.approx(-12.0)
    assert velocities[0] == pytest.approx(-12.0)


def test_gravity_velocity_requires_distinct_timestamps():
    assert gravity_velocities([_sample(0, 1050)]) == [None]
    assert gravity_velocities([_sample(0, 1050), _sample(0, 1048)]) == [None, None]
