"""Aggregation logic for telemetry records."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple

from pydantic import ValidationError

from models.records import DeviceAggregate, TelemetryBatchResult
from models.schemas import TelemetryRecord
from services.checksum import fnv1a32

logger = logging.getLogger(__name__)

ALARM_STATUS = "ALARM"
ALARM_TEMPERATURE = 95


class MalformedRecordError(ValueError):
    """Raised when a telemetry record cannot be decoded or validated."""

    def __init__(self, position: int, reason: str) -> None:
        super().__init__(f"Malformed telemetry record at position {position}: {reason}")
        self.position = position
        self.reason = reason


def is_alarm(temp: float, status: str) -> bool:
    return temp > ALARM_TEMPERATURE or status == ALARM_STATUS


def describe_validation_error(exc: ValidationError) -> str:
    """Reduce a pydantic error to a short reason such as ``missing deviceId``."""
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    kind = error["type"]
    if not loc:
        return "invalid JSON" if kind == "json_invalid" else "record is not a JSON object"
    field = loc[0]
    if kind == "missing":
        return f"missing {field}"
    if kind == "zero_ts":
        return "zero ts"
    return f"invalid {field}"


class TelemetryAggregator:
    """Pure per-batch aggregation; a single bad record fails the whole batch."""

    def aggregate(self, records: Iterable[str]) -> TelemetryBatchResult:
        devices: Dict[str, DeviceAggregate] = {}
        alarm_count = 0
        record_count = 0

        for position, raw in enumerate(records):
            record_count += 1
            encoded, record = self._decode(position, raw)

            alarm = is_alarm(record.temp, record.status)
            if alarm:
                alarm_count += 1

            aggregate = devices.get(record.device_id)
            if aggregate is None:
                aggregate = devices[record.device_id] = DeviceAggregate()
            aggregate.count += 1
            if alarm:
                aggregate.alarm_count += 1
            aggregate.checksum_sum += fnv1a32(encoded)

        return TelemetryBatchResult(
            records=record_count,
            distinct_devices=len(devices),
            alarm_count=alarm_count,
            checksum_total=sum(item.checksum_sum for item in devices.values()),
        )

    def _decode(self, position: int, raw: str) -> Tuple[bytes, TelemetryRecord]:
        """Validate the exact UTF-8 bytes that are later hashed."""
        try:
            encoded = raw.encode("utf-8")
        except UnicodeEncodeError as exc:
            self._reject(position, "invalid UTF-8")
            raise MalformedRecordError(position, "invalid UTF-8") from exc

        try:
            record = TelemetryRecord.model_validate_json(encoded)
        except ValidationError as exc:
            reason = describe_validation_error(exc)
            self._reject(position, reason)
            raise MalformedRecordError(position, reason) from exc
        return encoded, record

    @staticmethod
    def _reject(position: int, reason: str) -> None:
        logger.warning(
            "Rejecting telemetry batch at record %s: %s",
            position,
            reason,
            extra={"position": position, "reason": reason},
        )
