"""Pydantic schemas for telemetry records and the benchmark summary lines."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError

LANG = "python"


class TelemetryRecord(BaseModel):
    """Decoded form of one telemetry JSON line; unknown keys such as ``payload`` are dropped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    device_id: StrictStr = Field(..., alias="deviceId")
    ts: int
    temp: float = Field(..., allow_inf_nan=False)
    status: StrictStr

    @field_validator("ts", "temp", mode="before")
    @classmethod
    def require_json_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("number_type", "Input should be a JSON number")
        return value

    @field_validator("ts")
    @classmethod
    def reject_zero_ts(cls, value: int) -> int:
        if value == 0:
            raise PydanticCustomError("zero_ts", "ts must be non-zero")
        return value


class RunPhase(str, Enum):
    """Lifecycle states a benchmark run moves through."""

    idle = "idle"
    warming = "warming"
    dispatched = "dispatched"
    awaiting = "awaiting"
    reduced = "reduced"
    reported = "reported"


class RiskSummary(BaseModel):
    """Summary line emitted by the Monte Carlo risk benchmark."""

    lang: str = LANG
    type: str = "algorithmic"
    workers: int = Field(..., ge=1)
    sensors: int = Field(..., ge=0)
    iterations: int = Field(..., ge=1)
    ms: float = Field(..., ge=0, description="Elapsed wall time, one decimal place.")
    ops_per_sec: int = Field(..., ge=0)
    avg_risk: float
    checksum: int = Field(..., ge=0)


class TelemetrySummary(BaseModel):
    """Summary line emitted by the telemetry ingestion benchmark."""

    lang: str = LANG
    workers: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    ms: float = Field(..., ge=0, description="Elapsed wall time, one decimal place.")
    rps: int = Field(..., ge=0)
    checksum: int = Field(..., ge=0)
