"""Monte Carlo failure-risk simulation for synthetic sensor readings."""

from __future__ import annotations

import math
from typing import Sequence

from models.records import RiskBatchResult, RiskResult, SensorReading

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

RISK_CHECKSUM_MODULUS = 1_000_000
BATCH_CHECKSUM_MODULUS = 1_000_000_000

_HARMONIC_INTERVAL = 1000
_HARMONIC_TERMS = 10


class LcgRandom:
    """Linear-congruential generator; checksums depend on its exact sequence."""

    def __init__(self, seed: int = 12345) -> None:
        self.seed = seed

    def next(self) -> float:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / float(LCG_MODULUS)


def calculate_sensor_risk(
    device_id: str,
    temperature: float,
    humidity: float,
    pressure: float,
    vibration: float,
    iterations: int = 50_000,
) -> RiskResult:
    """Simulate ``iterations`` stress steps and return the averaged risk.

    The generator is reseeded from the first character of ``device_id`` on
    every call, so identical inputs always produce identical results.
    """
    prng = LcgRandom(ord(device_id[0]) * 1000)
    risk_score = 0.0
    failure_probability = 0.0

    for i in range(iterations):
        temp_stress = math.exp((temperature - 25.0) / 15.0) * (1.0 + 0.1 * math.sin(i * 0.01))
        humidity_stress = math.pow(humidity / 100.0, 2.0) * (1.0 + 0.05 * math.cos(i * 0.02))
        pressure_stress = abs(pressure - 1013.25) / 50.0 * (1.0 + 0.03 * math.sin(i * 0.015))
        vibration_stress = math.sqrt(vibration) * (1.0 + 0.08 * math.cos(i * 0.008))

        random_factor = prng.next()
        stress = temp_stress * humidity_stress + pressure_stress * vibration_stress
        failure_threshold = 2.5 + random_factor * 0.5

        # Weibull failure model
        shape = 1.5 + random_factor * 0.3
        scale = 100.0 + random_factor * 20.0
        weibull_prob = 1.0 - math.exp(-math.pow(stress / scale, shape))

        if weibull_prob > failure_threshold / 10.0:
            failure_probability += weibull_prob

        risk_score += math.pow(stress, 1.8) * math.log(1.0 + weibull_prob)

        if i % _HARMONIC_INTERVAL == 0:
            for j in range(1, _HARMONIC_TERMS + 1):
                risk_score += math.sin(j * stress) * math.cos(j * failure_probability) / j

    return RiskResult(
        risk_score=risk_score / iterations,
        failure_probability=failure_probability / iterations,
        checksum=math.floor(risk_score * 1_000_000) % RISK_CHECKSUM_MODULUS,
    )


def process_sensor_batch(readings: Sequence[SensorReading], iterations: int) -> RiskBatchResult:
    """Run the simulation over every reading and average the results."""
    total_risk = 0.0
    total_failure = 0.0
    checksum = 0

    for reading in readings:
        result = calculate_sensor_risk(
            reading.device_id,
            reading.temperature,
            reading.humidity,
            reading.pressure,
            reading.vibration,
            iterations,
        )
        total_risk += result.risk_score
        total_failure += result.failure_probability
        checksum = (checksum + result.checksum) % BATCH_CHECKSUM_MODULUS

    count = len(readings)
    if not count:
        return RiskBatchResult(sensors=0, avg_risk=0.0, avg_failure_probability=0.0, checksum=0)
    return RiskBatchResult(
        sensors=count,
        avg_risk=total_risk / count,
        avg_failure_probability=total_failure / count,
        checksum=checksum,
    )
