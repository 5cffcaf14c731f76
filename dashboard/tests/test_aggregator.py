"""
Unit tests for the dashboard aggregator.

Tests verify:
- Series are oldest-first and limited to the newest ``limit`` rows.
- Sibling series stay index-aligned: missing values are NaN, never dropped.
- ``<key>_num`` is preferred; display text is re-parsed as a fallback.
- Unparseable timestamps give points with no instant and a NaN value.
- The trailing window is fixed to ``(now - span, now)``.
- The table shows ``timestamp`` first, hides ``_num`` keys, never pads.

CHANGELOG:
- 2026-10-16: Cover series alignment with missing keys
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from dashboard.src.aggregator import (
    apply_trailing_window,
    build_series,
    build_table,
    numeric_value,
)
from dashboard.tests.conftest import make_row
from station.src.codec import station_timezone

_TZ = station_timezone(8.0)


class TestNumericValue:
    """numeric_value prefers the numeric companion."""

    def test_prefers_numeric_companion(self) -> None:
        assert numeric_value({"temp": "99 °C", "temp_num": 21.5}, "temp") == 21.5

    def test_falls_back_to_display(self) -> None:
        assert numeric_value({"temp": "-3.25 °C"}, "temp") == -3.25

    def test_missing_is_nan(self) -> None:
        assert math.isnan(numeric_value({}, "temp"))

    def test_unparseable_is_nan(self) -> None:
        assert math.isnan(numeric_value({"temp": "offline"}, "temp"))

    def test_non_numeric_companion_falls_back(self) -> None:
        row = {"temp": "20.00 °C", "temp_num": "garbage"}
        assert numeric_value(row, "temp") == 20.0


class TestBuildSeries:
    """build_series returns aligned oldest-first points."""

    def test_oldest_first(self, rows: list) -> None:
        series = build_series(rows, ["temp"], 10, _TZ)
        assert [p.value for p in series["temp"]] == [22.0, 23.0, 24.0]
        instants = [p.instant for p in series["temp"]]
        assert instants == sorted(instants)
        assert instants[0] == datetime(2026, 10, 18, 14, 0, tzinfo=_TZ)

    def test_limit_takes_newest_rows(self, rows: list) -> None:
        series = build_series(rows, ["temp"], 2, _TZ)
        assert [p.value for p in series["temp"]] == [23.0, 24.0]

    def test_series_stay_aligned_when_key_missing(self) -> None:
        window = [
            make_row("2026-10-18 14:02:00", temp=3.0, press=1000.0),
            make_row("2026-10-18 14:01:00", temp=2.0),
            make_row("2026-10-18 14:00:00", temp=1.0, press=1001.0),
        ]
        series = build_series(window, ["temp", "press"], 10, _TZ)

        assert len(series["temp"]) == len(series["press"]) == 3
        press = [p.value for p in series["press"]]
        assert press[0] == 1001.0
        assert math.isnan(press[1])
        assert press[2] == 1000.0
        assert [p.instant for p in series["temp"]] == [
            p.instant for p in series["press"]
        ]

    def test_bad_timestamp_gives_empty_point(self) -> None:
        window = [
            make_row("2026-10-18 14:01:00", temp=2.0),
            make_row("not a time", temp=1.0),
        ]
        points = build_series(window, ["temp"], 10, _TZ)["temp"]

        assert len(points) == 2
        assert points[0].instant is None
        assert math.isnan(points[0].value)
        assert points[1].value == 2.0

    def test_empty_rows(self) -> None:
        assert build_series([], ["temp"], 10, _TZ) == {"temp": []}

    def test_zero_limit(self, rows: list) -> None:
        assert build_series(rows, ["temp"], 0, _TZ) == {"temp": []}


class TestTrailingWindow:
    """The x-axis range is fixed and independent of the data."""

    def test_default_span_is_24_hours(self) -> None:
        now = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
        assert apply_trailing_window(now) == (now - timedelta(hours=24), now)

    def test_custom_span(self) -> None:
        now = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
        start, end = apply_trailing_window(now, timedelta(hours=6))
        assert end - start == timedelta(hours=6)


class TestBuildTable:
    """build_table shows the newest rows as text."""

    def test_columns_and_headers(self, rows: list) -> None:
        table = build_table(rows, 3)
        assert table.columns[0] == "timestamp"
        assert table.headers[0] == "Time Stamp"
        assert not any(c.endswith("_num") for c in table.columns)
        assert table.columns[1:] == table.headers[1:]

    def test_limit_and_order(self, rows: list) -> None:
        table = build_table(rows, 2)
        assert [r[0] for r in table.rows] == [
            "2026-10-18 14:02:00",
            "2026-10-18 14:01:00",
        ]

    def test_never_padded(self, rows: list) -> None:
        assert len(build_table(rows[:1], 3).rows) == 1

    def test_absent_cells_are_empty(self) -> None:
        window = [
            {"timestamp": "t2", "temp": "1.00 °C"},
            {"timestamp": "t1", "uv": "2.0"},
        ]
        table = build_table(window, 3)
        assert table.columns == ["timestamp", "temp", "uv"]
        assert table.rows == [["t2", "1.00 °C", ""], ["t1", "", "2.0"]]

    def test_empty(self) -> None:
        table = build_table([], 3)
        assert table.rows == []
        assert table.columns == ["timestamp"]
