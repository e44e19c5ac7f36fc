"""Unit tests for the telemetry aggregation logic."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from models.schemas import TelemetryRecord
from services.aggregator import MalformedRecordError, TelemetryAggregator, is_alarm
from services.checksum import fnv1a32


def _record(device_id: str = "dev-1", ts: int = 1_700_000_000_000, temp: int = 20, status: str = "OK") -> str:
    """Helper to build compact telemetry lines."""

    return json.dumps(
        {"deviceId": device_id, "ts": ts, "temp": temp, "status": status, "payload": "x" * 64},
        separators=(",", ":"),
    )


def test_fnv1a32_reference_values() -> None:
    assert fnv1a32(b"") == 0x811C9DC5
    assert fnv1a32(b"a") == 0xE40C292C
    assert fnv1a32(b"foobar") == 0xBF9CF968


def test_fnv1a32_stays_within_32_bits() -> None:
    assert 0 <= fnv1a32(b"\xff" * 1024) <= 0xFFFFFFFF


@pytest.mark.parametrize(
    ("temp", "status", "expected"),
    [
        (96, "OK", True),
        (50, "ALARM", True),
        (50, "OK", False),
        (95, "OK", False),
    ],
)
def test_alarm_classification(temp: int, status: str, expected: bool) -> None:
    assert is_alarm(temp, status) is expected


def test_aggregate_empty_iterable_returns_zero_result() -> None:
    result = TelemetryAggregator().aggregate([])

    assert result.records == 0
    assert result.distinct_devices == 0
    assert result.alarm_count == 0
    assert result.checksum_total == 0


def test_aggregate_counts_devices_alarms_and_checksums() -> None:
    records = [
        _record("dev-a", temp=96),
        _record("dev-b", temp=50, status="ALARM"),
        _record("dev-a", temp=50),
    ]

    result = TelemetryAggregator().aggregate(records)

    assert result.records == 3
    assert result.distinct_devices == 2
    assert result.alarm_count == 2
    assert result.checksum_total == sum(fnv1a32(raw.encode("utf-8")) for raw in records)


def test_checksum_uses_raw_text_not_reserialization() -> None:
    spaced = '{ "deviceId": "dev-1", "ts": 5, "temp": 1, "status": "OK" }'

    result = TelemetryAggregator().aggregate([spaced])

    assert result.checksum_total == fnv1a32(spaced.encode("utf-8"))


def test_unknown_fields_are_ignored() -> None:
    raw = '{"deviceId":"dev-1","extra":{"nested":[1,2]},"ts":5,"temp":1,"status":"OK"}'

    result = TelemetryAggregator().aggregate([raw])

    assert result.distinct_devices == 1
    assert result.alarm_count == 0


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ('{"ts":5,"temp":1,"status":"OK"}', "missing deviceId"),
        ('{"deviceId":"d","temp":1,"status":"OK"}', "missing ts"),
        ('{"deviceId":"d","ts":0,"temp":1,"status":"OK"}', "zero ts"),
        ('{"deviceId":"d","ts":5,"status":"OK"}', "missing temp"),
        ('{"deviceId":"d","ts":5,"temp":1}', "missing status"),
        ('{"deviceId":"d","ts":true,"temp":1,"status":"OK"}', "invalid ts"),
        ('{"deviceId":"d","ts":5,"temp":"hot","status":"OK"}', "invalid temp"),
        ('{"deviceId":7,"ts":5,"temp":1,"status":"OK"}', "invalid deviceId"),
        ("[1, 2]", "record is not a JSON object"),
        ('{"deviceId":', "invalid JSON"),
    ],
)
def test_malformed_record_fails_whole_batch(raw: str, reason: str) -> None:
    records = [_record(), raw, _record()]

    with pytest.raises(MalformedRecordError) as excinfo:
        TelemetryAggregator().aggregate(records)

    assert excinfo.value.position == 1
    assert excinfo.value.reason == reason


def test_invalid_json_chains_validation_error() -> None:
    with pytest.raises(MalformedRecordError) as excinfo:
        TelemetryAggregator().aggregate(["not json"])

    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_rejection_is_logged_with_context(caplog) -> None:
    with caplog.at_level(logging.WARNING), pytest.raises(MalformedRecordError):
        TelemetryAggregator().aggregate([_record(), _record(device_id=None)])  # type: ignore[arg-type]

    records = [record for record in caplog.records if record.name == "services.aggregator"]
    assert records
    assert getattr(records[0], "reason", None) == "missing deviceId"
    assert getattr(records[0], "position", None) == 1


def test_integral_float_timestamp_is_accepted() -> None:
    raw = '{"deviceId":"dev-1","ts":1700000000000.0,"temp":20,"status":"OK"}'

    result = TelemetryAggregator().aggregate([raw])

    assert result.records == 1
    assert result.distinct_devices == 1
    assert result.checksum_total == fnv1a32(raw.encode("utf-8"))


def test_lone_surrogate_is_reported_as_malformed() -> None:
    raw = '{"deviceId":"dev-\ud800","ts":5,"temp":1,"status":"OK"}'

    with pytest.raises(MalformedRecordError) as excinfo:
        TelemetryAggregator().aggregate([_record(), raw])

    assert excinfo.value.position == 1
    assert excinfo.value.reason == "invalid UTF-8"
    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_temperature_is_rejected(literal: str) -> None:
    raw = '{"deviceId":"d","ts":5,"temp":%s,"status":"OK"}' % literal

    with pytest.raises(MalformedRecordError) as excinfo:
        TelemetryAggregator().aggregate([raw])

    assert excinfo.value.reason in {"invalid temp", "invalid JSON"}


def test_telemetry_record_reads_wire_keys_and_drops_unknown_fields() -> None:
    record = TelemetryRecord.model_validate_json(_record("dev-9", ts=42, temp=96, status="OK"))

    assert record.device_id == "dev-9"
    assert record.ts == 42
    assert record.temp == 96.0
    assert record.status == "OK"
    assert "payload" not in record.model_dump()
