"""Fan-out/fan-in orchestration for the benchmark pipelines."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from models.records import RiskBatchResult, TelemetryBatchResult
from models.schemas import RiskSummary, RunPhase, TelemetrySummary
from services.aggregator import TelemetryAggregator
from services.generators import (
    Clock,
    generate_sensor_data,
    generate_telemetry_batch,
    wall_clock_ms,
)
from services.risk import BATCH_CHECKSUM_MODULUS, process_sensor_batch

logger = logging.getLogger(__name__)

WARMUP_SENSORS = 10
WARMUP_ITERATIONS = 1000
WARMUP_PREFIX = "warmup"

T = TypeVar("T")


@dataclass(frozen=True)
class RiskRun:
    workers: int
    sensors: int
    iterations: int
    tasks: int
    elapsed_ms: float
    avg_risk: float
    avg_failure_probability: float
    checksum: int

    def to_summary(self) -> RiskSummary:
        return RiskSummary(
            workers=self.workers,
            sensors=self.sensors,
            iterations=self.iterations,
            ms=round(self.elapsed_ms, 1),
            ops_per_sec=throughput(self.sensors, self.elapsed_ms),
            avg_risk=round(self.avg_risk, 6),
            checksum=self.checksum,
        )


@dataclass(frozen=True)
class TelemetryRun:
    workers: int
    total: int
    batch: int
    tasks: int
    elapsed_ms: float
    distinct_devices: int
    alarm_count: int
    checksum: int

    def to_summary(self) -> TelemetrySummary:
        return TelemetrySummary(
            workers=self.workers,
            total=self.total,
            ms=round(self.elapsed_ms, 1),
            rps=throughput(self.total, self.elapsed_ms),
            checksum=self.checksum,
        )


def throughput(count: int, elapsed_ms: float) -> int:
    if elapsed_ms <= 0:
        return 0
    return round(count / (elapsed_ms / 1000.0))


def split_evenly(count: int, parts: int) -> List[int]:
    """Divide ``count`` into ``parts`` sizes; the first ``count % parts`` get one extra."""
    if parts < 1:
        raise ValueError("parts must be at least 1.")
    base, remainder = divmod(count, parts)
    return [base + (1 if index < remainder else 0) for index in range(parts)]


def chunk_ranges(total: int, batch: int) -> List[Tuple[int, int]]:
    """Return contiguous ``(start, size)`` chunks covering ``range(total)``."""
    if batch < 1:
        raise ValueError("batch must be at least 1.")
    return [(start, min(batch, total - start)) for start in range(0, total, batch)]


def _risk_task(sensor_count: int, prefix: str, iterations: int) -> RiskBatchResult:
    readings = generate_sensor_data(sensor_count, prefix)
    return process_sensor_batch(readings, iterations)


def _telemetry_task(
    aggregator: TelemetryAggregator, start: int, count: int, devices: int, clock: Clock
) -> TelemetryBatchResult:
    records = generate_telemetry_batch(start, count, devices, clock)
    return aggregator.aggregate(records)


def fold_risk_results(results: Iterable[RiskBatchResult]) -> Tuple[int, float, float, int]:
    """Combine batch results into (sensors, avg risk, avg failure, checksum)."""
    sensors = 0
    weighted_risk = 0.0
    weighted_failure = 0.0
    checksum = 0
    for result in results:
        sensors += result.sensors
        weighted_risk += result.avg_risk * result.sensors
        weighted_failure += result.avg_failure_probability * result.sensors
        checksum = (checksum + result.checksum) % BATCH_CHECKSUM_MODULUS
    if not sensors:
        return 0, 0.0, 0.0, checksum
    return sensors, weighted_risk / sensors, weighted_failure / sensors, checksum


def fold_telemetry_results(results: Iterable[TelemetryBatchResult]) -> Tuple[int, int, int, int]:
    """Combine batch results into (records, devices, alarms, checksum)."""
    records = devices = alarms = checksum = 0
    for result in results:
        records += result.records
        devices += result.distinct_devices
        alarms += result.alarm_count
        checksum += result.checksum_total
    return records, devices, alarms, checksum


class BenchmarkRunner:
    """Owns the fixed-size pool and drives both benchmark pipelines."""

    def __init__(
        self,
        workers: int,
        executor_kind: str = "thread",
        aggregator: Optional[TelemetryAggregator] = None,
        clock: Clock = wall_clock_ms,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1.")
        self.workers = workers
        self.executor_kind = executor_kind
        self.aggregator = aggregator or TelemetryAggregator()
        self.clock = clock
        self.executor = self._build_executor(executor_kind, workers)
        self.phase = RunPhase.idle

    def __enter__(self) -> "BenchmarkRunner":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        """Release the pool, dropping any tasks that have not started."""
        self.executor.shutdown(wait=True, cancel_futures=True)

    def warm_up(self, rounds: int) -> None:
        """Run small unpooled risk batches and discard the output."""
        if rounds <= 0:
            return
        self._enter(RunPhase.warming, "risk")
        logger.info("Warming up risk kernel", extra={"tasks": rounds})
        readings = generate_sensor_data(WARMUP_SENSORS, WARMUP_PREFIX)
        for _ in range(rounds):
            process_sensor_batch(readings, WARMUP_ITERATIONS)
        logger.info("Warmup complete, starting benchmark")

    def run_risk(self, sensors: int, iterations: int, warmup_rounds: int = 0) -> RiskRun:
        self.warm_up(warmup_rounds)

        start_time = time.perf_counter()
        futures: List[Future[RiskBatchResult]] = []
        for worker_index, sensor_count in enumerate(split_evenly(sensors, self.workers)):
            if not sensor_count:
                continue
            futures.append(
                self.executor.submit(
                    _risk_task, sensor_count, f"sensor-w{worker_index}", iterations
                )
            )
        self._enter(RunPhase.dispatched, "risk", tasks=len(futures))

        results = self._collect(futures, "risk")
        total_sensors, avg_risk, avg_failure, checksum = fold_risk_results(results)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._enter(RunPhase.reduced, "risk", records=total_sensors, elapsed_ms=round(elapsed_ms, 1))

        return RiskRun(
            workers=self.workers,
            sensors=total_sensors,
            iterations=iterations,
            tasks=len(futures),
            elapsed_ms=elapsed_ms,
            avg_risk=avg_risk,
            avg_failure_probability=avg_failure,
            checksum=checksum,
        )

    def run_telemetry(self, total: int, batch: int, devices: int) -> TelemetryRun:
        start_time = time.perf_counter()
        futures: List[Future[TelemetryBatchResult]] = []
        for start, size in chunk_ranges(total, batch):
            futures.append(
                self.executor.submit(
                    _telemetry_task, self.aggregator, start, size, devices, self.clock
                )
            )
        self._enter(RunPhase.dispatched, "telemetry", tasks=len(futures))

        results = self._collect(futures, "telemetry")
        records, distinct_devices, alarms, checksum = fold_telemetry_results(results)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._enter(RunPhase.reduced, "telemetry", records=records, elapsed_ms=round(elapsed_ms, 1))

        return TelemetryRun(
            workers=self.workers,
            total=records,
            batch=batch,
            tasks=len(futures),
            elapsed_ms=elapsed_ms,
            distinct_devices=distinct_devices,
            alarm_count=alarms,
            checksum=checksum,
        )

    def mark_reported(self, pipeline: str) -> None:
        self._enter(RunPhase.reported, pipeline)

    def _collect(self, futures: Sequence[Future[T]], pipeline: str) -> List[T]:
        """Block until every task finishes; the first failure aborts the run."""
        self._enter(RunPhase.awaiting, pipeline, tasks=len(futures))
        try:
            return [future.result() for future in futures]
        except Exception:
            for future in futures:
                future.cancel()
            raise

    def _enter(self, phase: RunPhase, pipeline: str, **context: object) -> None:
        self.phase = phase
        logger.debug(
            "Run phase %s",
            phase.value,
            extra={"pipeline": pipeline, "phase": phase.value, "workers": self.workers, **context},
        )

    @staticmethod
    def _build_executor(kind: str, workers: int) -> Executor:
        if kind == "thread":
            return ThreadPoolExecutor(max_workers=workers)
        if kind == "process":
            return ProcessPoolExecutor(max_workers=workers)
        raise ValueError(f"Unknown executor kind {kind!r}.")
