"""
Shared test fixtures for dashboard tests.

Cleans every DASHBOARD_* environment variable before each test and provides
a small newest-first window of projected station rows.

CHANGELOG:
- 2026-10-15: Initial creation
"""

from __future__ import annotations

from pathlib import Path

import pytest

# All DashboardSettings environment variable names, used for cleanup.
_ALL_DASHBOARD_ENV_VARS = (
    "DASHBOARD_STATION_BASE_URL",
    "DASHBOARD_TABLE_MAX_ROWS",
    "DASHBOARD_CHART_MAX_ROWS",
    "DASHBOARD_FETCH_INTERVAL_S",
    "DASHBOARD_FETCH_TIMEOUT_S",
    "DASHBOARD_CHART_SPAN_HOURS",
    "DASHBOARD_UTC_OFFSET_HOURS",
    "DASHBOARD_SNAPSHOT_PATH",
    "DASHBOARD_CHART_GROUPS",
    "DASHBOARD_WIND_DIRECTION_KEY",
    "DASHBOARD_BATTERY_VOLTAGE_KEY",
    "DASHBOARD_SOLAR_POWER_KEY",
    "DASHBOARD_BATTERY_POWER_KEY",
    "DASHBOARD_SYSTEM_POWER_KEY",
    "DASHBOARD_BATTERY_HIGH",
    "DASHBOARD_BATTERY_MEDIUM",
    "DASHBOARD_LOG_LEVEL",
)


def make_row(ts: str, **values: float) -> dict[str, object]:
    """Build a projected row with display text and numeric companions."""
    row: dict[str, object] = {"timestamp": ts}
    for key, value in values.items():
        row[key] = f"{value:.2f}"
        row[f"{key}_num"] = value
    return row


@pytest.fixture(autouse=True)
def _clean_dashboard_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove all dashboard env vars and isolate from .env files."""
    for var in _ALL_DASHBOARD_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def rows() -> list[dict[str, object]]:
    """Three newest-first rows, one minute apart."""
    return [
        make_row(
            "2026-10-18 14:02:00",
            temp=24.0, wdir=270.0, sysvolt=3.6, solpwr=1.5, batpwr=-0.2, syspwr=0.6,
        ),
        make_row(
            "2026-10-18 14:01:00",
            temp=23.0, wdir=180.0, sysvolt=3.5, solpwr=1.0, batpwr=0.1, syspwr=0.5,
        ),
        make_row(
            "2026-10-18 14:00:00",
            temp=22.0, wdir=90.0, sysvolt=3.4, solpwr=0.0, batpwr=0.3, syspwr=0.4,
        ),
    ]
