from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class RiskConfig:
    sensors: int
    iterations: int
    workers: int
    warmup_rounds: int
    executor: str


@dataclass(frozen=True)
class TelemetryConfig:
    total: int
    batch: int
    devices: int
    workers: int
    executor: str


def load_risk_config(
    sensors: Optional[int] = None,
    iterations: Optional[int] = None,
    workers: Optional[int] = None,
    warmup_rounds: Optional[int] = None,
    executor: Optional[str] = None,
) -> RiskConfig:
    settings = get_settings()
    return RiskConfig(
        sensors=settings.sensors if sensors is None else sensors,
        iterations=settings.iterations if iterations is None else iterations,
        workers=settings.workers if workers is None else workers,
        warmup_rounds=settings.warmup_rounds if warmup_rounds is None else warmup_rounds,
        executor=executor or settings.executor,
    )


def load_telemetry_config(
    total: Optional[int] = None,
    batch: Optional[int] = None,
    devices: Optional[int] = None,
    workers: Optional[int] = None,
    executor: Optional[str] = None,
) -> TelemetryConfig:
    settings = get_settings()
    return TelemetryConfig(
        total=settings.total if total is None else total,
        batch=settings.batch if batch is None else batch,
        devices=settings.devices if devices is None else devices,
        workers=settings.workers if workers is None else workers,
        executor=executor or settings.executor,
    )
