"""
Aggregation of fetched station rows into chart series and the latest table.

Input rows are the flat mappings served by ``GET /v1/readings?format=json``
(newest-first, ``timestamp`` + ``<key>`` + optional ``<key>_num``).

Series are built oldest-first from the newest ``limit`` rows. Every key
gets exactly one point per row considered, so sibling series from the same
window stay index-aligned: a missing or unparseable value becomes NaN and
an unparseable timestamp gives a point without an instant (and a NaN
value) rather than a dropped point.

CHANGELOG:
- 2026-10-16: Keep one point per row so series stay aligned
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from station.src.codec import extract_numeric, parse_timestamp

NUMERIC_SUFFIX = "_num"
TIMESTAMP_KEY = "timestamp"
TIMESTAMP_HEADER = "Time Stamp"

Row = Mapping[str, object]


# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    """One chart point.

    Attributes:
        instant: Aware capture time, or ``None`` if the row timestamp was
            unparseable.
        value: Numeric value, NaN when absent or unparseable.
    """

    instant: datetime | None
    value: float


@dataclass(slots=True)
class TableView:
    """The latest-readings table.

    Attributes:
        columns: Row keys in display order (``timestamp`` first).
        headers: Column header text, aligned with ``columns``.
        rows: Cell text per row, newest first; empty string when a row
            lacks a column.
    """

    columns: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _as_float(value: object) -> float | None:
    """Return *value* as a finite float, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = extract_numeric(value)
        if number is None:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def numeric_value(row: Row, key: str) -> float:
    """Return the numeric value of *key* in *row*, or NaN.

    Prefers ``<key>_num``; otherwise re-parses the display text.
    """
    number = _as_float(row.get(key + NUMERIC_SUFFIX))
    if number is None:
        number = _as_float(row.get(key))
    return math.nan if number is None else number


def row_instant(row: Row, tz: timezone) -> datetime | None:
    """Parse the row's ``timestamp`` into an aware datetime in *tz*."""
    text = row.get(TIMESTAMP_KEY)
    if not isinstance(text, str):
        return None
    return parse_timestamp(text, tz)


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------


def build_series(
    rows: Sequence[Row],
    metric_keys: Iterable[str],
    limit: int,
    tz: timezone,
) -> dict[str, list[SeriesPoint]]:
    """Build oldest-first chart series for *metric_keys*.

    Args:
        rows: Newest-first rows as served by the station.
        metric_keys: Keys to build series for.
        limit: Maximum number of newest rows to consider.
        tz: Fixed timezone the station timestamps are expressed in.

    Returns:
        Key -> points. Every series has exactly ``min(limit, len(rows))``
        points, index-aligned with its siblings.
    """
    window = list(rows[: max(0, limit)])
    window.reverse()
    instants = [row_instant(row, tz) for row in window]

    series: dict[str, list[SeriesPoint]] = {}
    for key in metric_keys:
        points: list[SeriesPoint] = []
        for row, instant in zip(window, instants):
            value = numeric_value(row, key) if instant is not None else math.nan
            points.append(SeriesPoint(instant=instant, value=value))
        series[key] = points
    return series


def apply_trailing_window(
    now: datetime, span: timedelta = timedelta(hours=24)
) -> tuple[datetime, datetime]:
    """Return the fixed ``(now - span, now)`` x-axis range.

    The range does not depend on the data, so the axis never auto-scales
    to the points actually present.
    """
    return now - span, now


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


def table_columns(rows: Iterable[Row]) -> list[str]:
    """Return ``timestamp`` then display keys in first-seen order."""
    seen: dict[str, None] = {TIMESTAMP_KEY: None}
    for row in rows:
        for key in row:
            if key.endswith(NUMERIC_SUFFIX):
                continue
            seen.setdefault(key, None)
    return list(seen)


def build_table(rows: Sequence[Row], limit: int) -> TableView:
    """Build the latest-readings table from the newest *limit* rows.

    Numeric companion keys are never shown. Absent cells are empty
    strings; rows are never padded to *limit*.
    """
    window = list(rows[: max(0, limit)])
    columns = table_columns(window)
    headers = [TIMESTAMP_HEADER if c == TIMESTAMP_KEY else c for c in columns]
    cells = [
        ["" if row.get(c) is None else str(row.get(c)) for c in columns]
        for row in window
    ]
    return TableView(columns=columns, headers=headers, rows=cells)
