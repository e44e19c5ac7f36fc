from __future__ import annotations

from enum import Enum
from typing import Optional

import typer

from cli.config import load_risk_config, load_telemetry_config
from cli.render import emit_summary, render_risk_details, render_telemetry_details
from logging_config import configure_logging
from services.aggregator import MalformedRecordError
from services.processor import BenchmarkRunner
from settings import EXECUTOR_KINDS


ExecutorKind = Enum("ExecutorKind", {kind: kind for kind in EXECUTOR_KINDS}, type=str)

app = typer.Typer(
    help="Synthetic IoT throughput benchmarks: Monte Carlo risk and telemetry ingestion.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Diagnostic log level on stderr (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("risk")
def risk_command(
    sensors: Optional[int] = typer.Option(
        None, "--sensors", min=0, help="Number of synthetic sensors (BENCH_SENSORS, default 100)."
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        min=1,
        help="Monte Carlo steps per sensor (BENCH_ITERATIONS, default 50000).",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Pool size (BENCH_WORKERS, default CPU count)."
    ),
    warmup_rounds: Optional[int] = typer.Option(
        None,
        "--warmup-rounds",
        min=0,
        help="Unpooled warmup passes before timing; 0 disables (BENCH_WARMUP_ROUNDS, default 3).",
    ),
    executor: Optional[ExecutorKind] = typer.Option(
        None, "--executor", help="Pool flavour (BENCH_EXECUTOR, default thread)."
    ),
    details: bool = typer.Option(False, "--details", help="Render run details on stderr."),
) -> None:
    """Run the Monte Carlo sensor risk benchmark."""
    config = load_risk_config(
        sensors=sensors,
        iterations=iterations,
        workers=workers,
        warmup_rounds=warmup_rounds,
        executor=executor.value if executor else None,
    )
    with BenchmarkRunner(workers=config.workers, executor_kind=config.executor) as runner:
        run = runner.run_risk(
            sensors=config.sensors,
            iterations=config.iterations,
            warmup_rounds=config.warmup_rounds,
        )
        emit_summary(run.to_summary())
        runner.mark_reported("risk")
    if details:
        render_risk_details(run)


@app.command("telemetry")
def telemetry_command(
    total: Optional[int] = typer.Option(
        None, "--total", min=0, help="Records to generate (BENCH_TOTAL, default 1000000)."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Pool size (BENCH_WORKERS, default CPU count)."
    ),
    batch: Optional[int] = typer.Option(
        None, "--batch", min=1, help="Records per task (BENCH_BATCH, default 10000)."
    ),
    devices: Optional[int] = typer.Option(
        None, "--devices", min=1, help="Distinct device ids (BENCH_DEVICES, default 1000)."
    ),
    executor: Optional[ExecutorKind] = typer.Option(
        None, "--executor", help="Pool flavour (BENCH_EXECUTOR, default thread)."
    ),
    details: bool = typer.Option(False, "--details", help="Render run details on stderr."),
) -> None:
    """Run the telemetry JSON ingestion benchmark."""
    config = load_telemetry_config(
        total=total,
        batch=batch,
        devices=devices,
        workers=workers,
        executor=executor.value if executor else None,
    )
    with BenchmarkRunner(workers=config.workers, executor_kind=config.executor) as runner:
        try:
            run = runner.run_telemetry(
                total=config.total, batch=config.batch, devices=config.devices
            )
        except MalformedRecordError as exc:
            typer.secho(f"Telemetry run aborted: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        emit_summary(run.to_summary())
        runner.mark_reported("telemetry")
    if details:
        render_telemetry_details(run)
