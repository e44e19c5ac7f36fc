"""Unit tests for the Monte Carlo risk kernel."""

from __future__ import annotations

import math

import pytest

from models.records import SensorReading
from services.generators import generate_sensor_data
from services.risk import LcgRandom, calculate_sensor_risk, process_sensor_batch


def test_lcg_matches_reference_sequence() -> None:
    prng = LcgRandom(ord("H") * 1000)

    assert prng.next() == 207697 / 233280.0
    assert prng.next() == 47414 / 233280.0
    assert prng.seed == 47414


def test_lcg_outputs_stay_in_unit_interval() -> None:
    prng = LcgRandom(ord("s") * 1000)

    values = [prng.next() for _ in range(1000)]

    assert all(0.0 <= value < 1.0 for value in values)


def test_calculate_sensor_risk_is_idempotent() -> None:
    args = ("sensor-7", 31.5, 62.0, 1021.0, 4.5, 2500)

    first = calculate_sensor_risk(*args)
    second = calculate_sensor_risk(*args)

    assert first == second


def test_calculate_sensor_risk_produces_bounded_values() -> None:
    result = calculate_sensor_risk("sensor-0", 79.0, 79.0, 1049.0, 10.0, 3000)

    assert 0.0 <= result.failure_probability <= 1.0
    assert 0 <= result.checksum < 1_000_000
    assert math.isfinite(result.risk_score)


def test_seed_depends_only_on_first_character() -> None:
    left = calculate_sensor_risk("sensor-a", 40.0, 50.0, 1000.0, 3.0, 500)
    right = calculate_sensor_risk("s-other", 40.0, 50.0, 1000.0, 3.0, 500)

    assert left == right


def test_harmonic_correction_applies_on_first_step() -> None:
    reading = SensorReading("x", 25.0, 100.0, 1013.25, 1.0)
    prng = LcgRandom(ord("x") * 1000)
    r = prng.next()
    stress = 1.0 * (1.0 + 0.05) + 0.0 * 1.08
    weibull = 1.0 - math.exp(-math.pow(stress / (100.0 + r * 20.0), 1.5 + r * 0.3))
    expected = math.pow(stress, 1.8) * math.log(1.0 + weibull)
    failure = weibull if weibull > (2.5 + r * 0.5) / 10.0 else 0.0
    for j in range(1, 11):
        expected += math.sin(j * stress) * math.cos(j * failure) / j

    result = calculate_sensor_risk(
        reading.device_id,
        reading.temperature,
        reading.humidity,
        reading.pressure,
        reading.vibration,
        1,
    )

    assert result.risk_score == pytest.approx(expected, rel=1e-12)
    assert result.failure_probability == pytest.approx(failure)


def test_process_sensor_batch_averages_results() -> None:
    readings = generate_sensor_data(4, "sensor-w0")
    per_sensor = [
        calculate_sensor_risk(
            r.device_id, r.temperature, r.humidity, r.pressure, r.vibration, 200
        )
        for r in readings
    ]

    batch = process_sensor_batch(readings, 200)

    assert batch.sensors == 4
    assert batch.avg_risk == pytest.approx(sum(r.risk_score for r in per_sensor) / 4)
    assert batch.avg_failure_probability == pytest.approx(
        sum(r.failure_probability for r in per_sensor) / 4
    )
    assert batch.checksum == sum(r.checksum for r in per_sensor) % 1_000_000_000


def test_process_sensor_batch_handles_empty_input() -> None:
    batch = process_sensor_batch([], 100)

    assert batch.sensors == 0
    assert batch.avg_risk == 0.0
    assert batch.checksum == 0


def test_calculate_sensor_risk_matches_recorded_reference() -> None:
    result = calculate_sensor_risk("sensor-w0-3", 43.2, 51.7, 1001.9, 5.6, 5000)

    assert result.checksum == 895174
    assert result.risk_score == pytest.approx(0.0025790348516614406, rel=1e-12)
    assert result.failure_probability == 0.0
