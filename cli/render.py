from __future__ import annotations

from typing import Any, Iterable

import typer
from pydantic import BaseModel

from services.processor import RiskRun, TelemetryRun


def emit_summary(summary: BaseModel) -> None:
    """Write the single JSON summary line to stdout."""
    typer.echo(summary.model_dump_json())


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True, err=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}", err=True)


def render_risk_details(run: RiskRun) -> None:
    echo_heading("Risk Run")
    echo_key_values(
        [
            ("workers", run.workers),
            ("tasks", run.tasks),
            ("sensors", run.sensors),
            ("iterations", run.iterations),
            ("elapsed_ms", f"{run.elapsed_ms:.1f}"),
            ("avg_risk", f"{run.avg_risk:.6f}"),
            ("avg_failure_probability", f"{run.avg_failure_probability:.6f}"),
            ("checksum", run.checksum),
        ]
    )


def render_telemetry_details(run: TelemetryRun) -> None:
    echo_heading("Telemetry Run")
    echo_key_values(
        [
            ("workers", run.workers),
            ("tasks", run.tasks),
            ("total", run.total),
            ("batch", run.batch),
            ("elapsed_ms", f"{run.elapsed_ms:.1f}"),
            ("distinct_devices", run.distinct_devices),
            ("alarm_count", run.alarm_count),
            ("checksum", run.checksum),
        ]
    )
