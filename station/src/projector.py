"""
Row projection from decoded readings to the dashboard wire format.

Each reading is flattened into one mapping carrying ``timestamp``, the
display text under ``<key>`` and, when a number could be parsed, the numeric
value under ``<key>_num``. Rows stay newest-first. Keys are ordered by their
first appearance across the whole window so consumers can derive a stable
column set.

This projection is the only representation of stored data exposed to
clients, either as JSON or as the HTML table-row fallback.

CHANGELOG:
- 2026-10-13: Add HTML table-row fallback
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import html
from collections.abc import Iterable

from station.src.codec import Reading

NUMERIC_SUFFIX = "_num"

EMPTY_HTML_ROW = (
    "<tr><td colspan='2' style='text-align:center; color:#6c757d;'>"
    "No data available or unreadable log.</td></tr>"
)


def column_keys(rows: Iterable[Reading]) -> list[str]:
    """Return metric keys in first-seen order across *rows*."""
    seen: dict[str, None] = {}
    for reading in rows:
        for key in reading.metrics:
            seen.setdefault(key, None)
    return list(seen)


def project(rows: list[Reading]) -> list[dict[str, str | float]]:
    """Flatten newest-first readings into wire rows.

    Args:
        rows: Decoded readings, newest first.

    Returns:
        One dict per reading, same order. ``<key>_num`` is present only
        when a numeric value was parsed from the display text.
    """
    keys = column_keys(rows)
    projected: list[dict[str, str | float]] = []
    for reading in rows:
        row: dict[str, str | float] = {"timestamp": reading.timestamp}
        for key in keys:
            value = reading.metrics.get(key)
            if value is None:
                continue
            row[key] = value.display
            if value.numeric is not None:
                row[key + NUMERIC_SUFFIX] = value.numeric
        projected.append(row)
    return projected


def render_html(rows: list[dict[str, str | float]]) -> str:
    """Render projected rows as escaped ``<tr>`` elements.

    Each row has the timestamp cell and one cell joining ``key: display``
    pairs with ``" | "``. Numeric companions are omitted.
    """
    if not rows:
        return EMPTY_HTML_ROW

    out: list[str] = []
    for row in rows:
        ts = html.escape(str(row["timestamp"]), quote=True)
        values = [
            html.escape(f"{key}: {value}", quote=True)
            for key, value in row.items()
            if key != "timestamp" and not key.endswith(NUMERIC_SUFFIX)
        ]
        out.append(f"<tr><td>{ts}</td><td>{' | '.join(values)}</td></tr>")
    return "".join(out)
