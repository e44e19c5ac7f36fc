from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_SENSORS_ENV = "BENCH_SENSORS"
_ITERATIONS_ENV = "BENCH_ITERATIONS"
_TOTAL_ENV = "BENCH_TOTAL"
_BATCH_ENV = "BENCH_BATCH"
_DEVICES_ENV = "BENCH_DEVICES"
_WORKER_COUNT_ENV = "BENCH_WORKERS"
_WARMUP_ROUNDS_ENV = "BENCH_WARMUP_ROUNDS"
_EXECUTOR_ENV = "BENCH_EXECUTOR"
_LOG_LEVEL_ENV = "LOG_LEVEL"

EXECUTOR_KINDS = ("thread", "process")


@dataclass(frozen=True)
class Settings:
    sensors: int
    iterations: int
    total: int
    batch: int
    devices: int
    workers: int
    warmup_rounds: int
    executor: str
    log_level: str


def default_worker_count() -> int:
    return os.cpu_count() or 1


def _read_int_env(name: str, default: int, minimum: int = 1) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().replace("_", "")
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _read_executor(default: str) -> str:
    value = os.getenv(_EXECUTOR_ENV)
    if value is None:
        return default
    candidate = value.strip().lower()
    return candidate if candidate in EXECUTOR_KINDS else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        sensors=_read_int_env(_SENSORS_ENV, 100),
        iterations=_read_int_env(_ITERATIONS_ENV, 50_000),
        total=_read_int_env(_TOTAL_ENV, 1_000_000),
        batch=_read_int_env(_BATCH_ENV, 10_000),
        devices=_read_int_env(_DEVICES_ENV, 1_000),
        workers=_read_int_env(_WORKER_COUNT_ENV, default_worker_count()),
        warmup_rounds=_read_int_env(_WARMUP_ROUNDS_ENV, 3, minimum=0),
        executor=_read_executor("thread"),
        log_level=_read_log_level("INFO"),
    )
