"""
Line codec for the append-only station log.

Encodes one reading into a single human-readable log line and decodes log
lines back into structured readings. A line looks like::

    2026-10-18 14:05:00 - Temp: 23.50 °C - Humidity: 60.12 % - UV Index: 5.0

Encoding is a pure function of the ordered metric table in
:mod:`station.src.metrics` and each metric's fixed precision, so stored text
is canonical. Decoding is purely textual and tolerant: it never raises for
malformed input and keeps labels it does not know, so lines written by
older or newer metric tables remain readable without migration.

Every decoded value keeps two representations: the trimmed ``display`` text
exactly as stored (unit included) and ``numeric``, the first signed decimal
token found in that text.

CHANGELOG:
- 2026-10-14: Map known labels to stable metric keys on decode
- 2026-10-11: Initial creation

TODO:
- None
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from station.src.metrics import METRICS, MetricDef

SEPARATOR = " - "
"""Segment separator between the timestamp and each metric."""

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_NUMERIC_RE = re.compile(r"-?\d+(?:\.\d+)?")


class MissingMetricError(ValueError):
    """Raised when a reading lacks one or more metrics required for encoding."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing metrics: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MetricValue:
    """One measurement in its display and parsed numeric forms.

    Attributes:
        display: Text exactly as stored in the log, unit suffix included.
        numeric: First signed decimal found in ``display``, or ``None``.
    """

    display: str
    numeric: float | None = None

    @classmethod
    def from_display(cls, display: str) -> MetricValue:
        """Build a MetricValue, parsing ``numeric`` out of ``display``."""
        return cls(display=display, numeric=extract_numeric(display))


@dataclass(slots=True)
class Reading:
    """A timestamped set of metric values (one log line).

    Attributes:
        timestamp: Capture time text in ``TIMESTAMP_FORMAT``.
        metrics: Metric key -> value, in log segment order.
    """

    timestamp: str
    metrics: dict[str, MetricValue] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def extract_numeric(text: str | None) -> float | None:
    """Return the first signed decimal substring of *text* as a float.

    Only plain ``-?digits(.digits)?`` tokens are recognised; exponents and
    leading ``+`` signs are not. Returns ``None`` when no token is found.
    """
    if not text:
        return None
    match = _NUMERIC_RE.search(text)
    if match is None:
        return None
    return float(match.group(0))


def format_number(metric: MetricDef, value: float | int) -> str:
    """Render *value* with the metric's fixed precision.

    Integer metrics are rendered without a fractional part. Float metrics
    always carry exactly ``metric.decimals`` decimals.
    """
    if metric.decimals is None:
        return str(int(value))
    text = f"{float(value):.{metric.decimals}f}"
    # Avoid "-0.00" for values that round to zero.
    if float(text) == 0.0:
        text = text.lstrip("-")
    return text


def format_display(metric: MetricDef, value: float | int) -> str:
    """Render *value* with its unit suffix, e.g. ``"23.50 °C"``."""
    number = format_number(metric, value)
    return f"{number} {metric.unit}" if metric.unit else number


def station_timezone(utc_offset_hours: float) -> timezone:
    """Return the fixed-offset timezone used for log timestamps."""
    return timezone(timedelta(hours=utc_offset_hours))


def format_timestamp(moment: datetime, tz: timezone) -> str:
    """Render *moment* as local log time text with second precision."""
    return moment.astimezone(tz).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str, tz: timezone) -> datetime | None:
    """Parse log timestamp text into an aware datetime in *tz*.

    Returns ``None`` for text that is not a valid log timestamp.
    """
    try:
        return datetime.strptime(text.strip(), TIMESTAMP_FORMAT).replace(tzinfo=tz)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class LineCodec:
    """Encode readings into log lines and decode log lines into readings.

    Args:
        metrics: Ordered metric table. Segment order in encoded lines
            follows this order. Defaults to the station table.
    """

    def __init__(self, metrics: tuple[MetricDef, ...] = METRICS) -> None:
        self._metrics = metrics
        self._by_label = {m.label: m for m in metrics}

    @property
    def metrics(self) -> tuple[MetricDef, ...]:
        """The ordered metric table this codec encodes with."""
        return self._metrics

    def build_reading(
        self,
        timestamp: str,
        values: Mapping[str, float | int],
    ) -> Reading:
        """Format raw numbers into a canonical Reading.

        Precision is applied here, before encoding, so the numeric carried
        by each MetricValue is the rounded magnitude actually stored.

        Args:
            timestamp: Capture time text.
            values: Metric key -> raw number. Must cover every metric.

        Raises:
            MissingMetricError: Listing every metric key absent from
                *values*.
        """
        missing = [m.key for m in self._metrics if m.key not in values]
        if missing:
            raise MissingMetricError(missing)

        metrics: dict[str, MetricValue] = {}
        for metric in self._metrics:
            metrics[metric.key] = MetricValue.from_display(
                format_display(metric, values[metric.key])
            )
        return Reading(timestamp=timestamp, metrics=metrics)

    def encode(self, reading: Reading) -> str:
        """Encode *reading* as one log line (without trailing newline).

        Segments are written in metric table order regardless of the order
        of ``reading.metrics``.

        Raises:
            MissingMetricError: If any metric of the table is absent.
        """
        missing = [m.key for m in self._metrics if m.key not in reading.metrics]
        if missing:
            raise MissingMetricError(missing)

        segments = [reading.timestamp]
        for metric in self._metrics:
            segments.append(f"{metric.label}: {reading.metrics[metric.key].display}")
        return SEPARATOR.join(segments)

    def decode(self, line: str) -> Reading | None:
        """Decode one log line.

        Returns ``None`` for a blank line or a line with fewer than two
        segments. Segments without a colon are skipped. Known labels are
        mapped to their metric key; unknown labels are kept as-is.
        """
        line = line.strip()
        if not line:
            return None

        tokens = line.split(SEPARATOR)
        if len(tokens) < 2:
            return None

        reading = Reading(timestamp=tokens[0].strip())
        for token in tokens[1:]:
            token = token.strip()
            if not token or ":" not in token:
                continue
            label, value_text = token.split(":", 1)
            label = label.strip()
            value_text = value_text.strip()
            metric = self._by_label.get(label)
            key = metric.key if metric is not None else label
            reading.metrics[key] = MetricValue.from_display(value_text)
        return reading
