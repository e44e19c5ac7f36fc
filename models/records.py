"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A single synthetic sensor reading fed to the risk simulation."""

    device_id: str
    temperature: float
    humidity: float
    pressure: float
    vibration: float


@dataclass(frozen=True, slots=True)
class RiskResult:
    """Outcome of one Monte Carlo run for a single reading."""

    risk_score: float
    failure_probability: float
    checksum: int


@dataclass(frozen=True, slots=True)
class RiskBatchResult:
    sensors: int
    avg_risk: float
    avg_failure_probability: float
    checksum: int


@dataclass(slots=True)
class DeviceAggregate:
    """Running counters for one device id within a single batch."""

    count: int = 0
    alarm_count: int = 0
    checksum_sum: int = 0


@dataclass(frozen=True, slots=True)
class TelemetryBatchResult:
    records: int
    distinct_devices: int
    alarm_count: int
    checksum_total: int
