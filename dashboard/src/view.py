"""
Dashboard view model built from one fetched row window.

A DashboardView carries everything a renderer needs for one refresh: the
latest-readings table, one chart per configured group (index-aligned
series plus the fixed trailing x-axis range), the derived indicators from
the newest row and a status or error message. ``to_dict`` produces a
JSON-safe mapping where NaN values and missing instants become ``null``.

CHANGELOG:
- 2026-10-16: Add explicit error view
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta

from dashboard.src.aggregator import (
    Row,
    SeriesPoint,
    TableView,
    apply_trailing_window,
    build_series,
    build_table,
)
from dashboard.src.config import DashboardSettings
from dashboard.src.indicators import (
    BatteryCharge,
    BatteryPolicy,
    CompassHeading,
    PowerFlow,
    battery_from_row,
    compass_heading,
    power_flow,
)
from station.src.codec import station_timezone

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"


@dataclass(slots=True)
class ChartView:
    """One chart: a group of aligned series on a fixed x-axis range."""

    name: str
    x_range: tuple[datetime, datetime]
    series: dict[str, list[SeriesPoint]] = field(default_factory=dict)


@dataclass(slots=True)
class DashboardView:
    """Everything rendered in one refresh cycle."""

    status: str
    generated_at: datetime
    message: str = ""
    table: TableView = field(default_factory=TableView)
    charts: list[ChartView] = field(default_factory=list)
    compass: CompassHeading | None = None
    battery: BatteryCharge | None = None
    power: PowerFlow | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation."""
        return {
            "status": self.status,
            "generated_at": self.generated_at.isoformat(),
            "message": self.message,
            "table": asdict(self.table),
            "charts": [_chart_dict(chart) for chart in self.charts],
            "compass": asdict(self.compass) if self.compass else None,
            "battery": asdict(self.battery) if self.battery else None,
            "power": asdict(self.power) if self.power else None,
        }


def _chart_dict(chart: ChartView) -> dict[str, object]:
    start, end = chart.x_range
    return {
        "name": chart.name,
        "x_range": [start.isoformat(), end.isoformat()],
        "series": {
            key: [
                [
                    p.instant.isoformat() if p.instant is not None else None,
                    None if math.isnan(p.value) else p.value,
                ]
                for p in points
            ]
            for key, points in chart.series.items()
        },
    }


def build_view(
    rows: Sequence[Row],
    *,
    settings: DashboardSettings,
    now: datetime,
) -> DashboardView:
    """Build the dashboard view for one fetched window.

    Args:
        rows: Newest-first rows from the station.
        settings: Row limits, chart groups, indicator keys and thresholds.
        now: Aware current time; anchors the trailing chart window.

    Returns:
        DashboardView with status ``ok``, or ``empty`` when *rows* is empty
        (table and charts are then empty and indicators are omitted).
    """
    tz = station_timezone(settings.utc_offset_hours)
    x_range = apply_trailing_window(
        now.astimezone(tz), timedelta(hours=settings.chart_span_hours)
    )

    charts = [
        ChartView(
            name=name,
            x_range=x_range,
            series=build_series(rows, keys, settings.chart_max_rows, tz),
        )
        for name, keys in settings.chart_groups.items()
    ]
    table = build_table(rows, settings.table_max_rows)

    if not rows:
        return DashboardView(
            status=STATUS_EMPTY,
            generated_at=now,
            message="No data available",
            table=table,
            charts=charts,
        )

    newest = rows[0]
    policy = BatteryPolicy(high=settings.battery_high, medium=settings.battery_medium)
    return DashboardView(
        status=STATUS_OK,
        generated_at=now,
        message=f"Latest reading {newest.get('timestamp', '')}",
        table=table,
        charts=charts,
        compass=compass_heading(newest, settings.wind_direction_key),
        battery=battery_from_row(newest, settings.battery_voltage_key, policy),
        power=power_flow(
            newest,
            settings.solar_power_key,
            settings.battery_power_key,
            settings.system_power_key,
        ),
    )


def error_view(message: str, *, now: datetime) -> DashboardView:
    """Return the explicit error view shown when a cycle fails."""
    return DashboardView(status=STATUS_ERROR, generated_at=now, message=message)
