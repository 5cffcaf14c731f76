"""
Ingestion service: validate one sensor sample and append it to the log.

The sensor unit sends every metric as a query-string parameter. All
parameters are validated before anything is written; when any parameter is
missing or invalid, every problem is reported and nothing is appended.
Validated values are formatted to their fixed precision, encoded into one
log line and appended under the store's exclusive lock.

CHANGELOG:
- 2026-10-13: Report every invalid field instead of the first one
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from station.src.codec import LineCodec, format_number, format_timestamp
from station.src.metrics import MetricDef
from station.src.store import LogStore

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(slots=True)
class IngestResult:
    """Outcome of one ingestion attempt.

    Attributes:
        ok: True when the reading was appended.
        timestamp: Log timestamp of the appended reading.
        data: Metric key -> formatted value as stored.
        errors: Every validation problem, when ``ok`` is False.
    """

    ok: bool
    timestamp: str | None = None
    data: dict[str, str | int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def _parse_value(metric: MetricDef, raw: str) -> float | int | None:
    """Parse *raw* per the metric kind, or return None when invalid."""
    text = raw.strip()
    if metric.kind == "int":
        return int(text) if _INT_RE.fullmatch(text) else None
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def validate_params(
    params: Mapping[str, str],
    metrics: tuple[MetricDef, ...],
) -> tuple[dict[str, float | int], list[str]]:
    """Validate raw parameters against the metric table.

    Args:
        params: Parameter name -> raw text (e.g. a query string).
        metrics: Ordered metric table defining required parameters.

    Returns:
        ``(values, errors)``. ``values`` holds every metric that parsed;
        ``errors`` lists one message per missing, malformed or
        out-of-range parameter, in metric order. Unknown parameters are
        ignored.
    """
    values: dict[str, float | int] = {}
    errors: list[str] = []

    for metric in metrics:
        raw = params.get(metric.key)
        if raw is None:
            errors.append(f"Missing parameter: {metric.key}")
            continue

        value = _parse_value(metric, raw)
        if value is None:
            errors.append(f"Invalid value for {metric.key}: {raw}")
            continue

        if metric.valid_range is not None:
            lo, hi = metric.valid_range
            if not (lo <= value <= hi):
                errors.append(f"{metric.key} out of range ({lo} to {hi}): {value}")
                continue

        values[metric.key] = value

    return values, errors


def ingest_reading(
    params: Mapping[str, str],
    *,
    codec: LineCodec,
    store: LogStore,
    now: datetime,
    tz: timezone,
) -> IngestResult:
    """Validate *params*, encode them and append one line to *store*.

    Args:
        params: Raw parameters from the sensor unit.
        codec: Codec defining metric order and precision.
        store: Destination log store.
        now: Capture time (injected so the function has no clock access).
        tz: Fixed local timezone for the log timestamp.

    Returns:
        IngestResult with ``ok=False`` and every validation error when the
        parameters are rejected; nothing is written in that case.

    Raises:
        LogWriteError: If the append fails. Nothing is reported as stored.
    """
    values, errors = validate_params(params, codec.metrics)
    if errors:
        logger.warning(
            "Rejected reading with %d invalid field(s): %s",
            len(errors),
            errors,
        )
        return IngestResult(ok=False, errors=errors)

    timestamp = format_timestamp(now, tz)
    reading = codec.build_reading(timestamp, values)
    store.append(codec.encode(reading))

    data: dict[str, str | int] = {}
    for metric in codec.metrics:
        value = values[metric.key]
        if metric.kind == "int":
            data[metric.key] = int(value)
        else:
            data[metric.key] = format_number(metric, value)

    logger.info("Logged reading at %s", timestamp)
    return IngestResult(ok=True, timestamp=timestamp, data=data)
