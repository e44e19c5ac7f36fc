"""Deterministic synthetic input for both benchmarks."""

from __future__ import annotations

import json
import math
import time
from typing import Callable, List

from models.records import SensorReading

PAYLOAD_SIZE = 64
_PAYLOAD = "x" * PAYLOAD_SIZE

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_sensor_data(count: int, device_prefix: str = "sensor") -> List[SensorReading]:
    """Build ``count`` readings whose values depend only on their index."""
    readings: List[SensorReading] = []
    for i in range(count):
        readings.append(
            SensorReading(
                device_id=f"{device_prefix}-{i}",
                temperature=20 + (i % 60) + math.sin(i * 0.1) * 5,
                humidity=40 + (i % 40) + math.cos(i * 0.05) * 10,
                pressure=1000 + (i % 50) + math.sin(i * 0.02) * 15,
                vibration=1 + (i % 10) + math.cos(i * 0.03) * 2,
            )
        )
    return readings


def generate_telemetry_record(index: int, devices: int, clock: Clock = wall_clock_ms) -> str:
    """Encode one telemetry record as a compact single-line JSON object.

    Key order is fixed (deviceId, ts, temp, status, payload) since checksums
    are computed over the encoded text.
    """
    temp = index % 120
    status = "ALARM" if temp > 95 and index % 7 == 0 else "OK"
    record = {
        "deviceId": f"dev-{index % devices}",
        "ts": clock(),
        "temp": temp,
        "status": status,
        "payload": _PAYLOAD,
    }
    return json.dumps(record, separators=(",", ":"))


def generate_telemetry_batch(
    start: int, count: int, devices: int, clock: Clock = wall_clock_ms
) -> List[str]:
    return [generate_telemetry_record(start + i, devices, clock) for i in range(count)]
