"""
Shared test fixtures for station tests.

Cleans every STATION_* environment variable before each test, points the
log at a per-test temporary file and provides a TestClient whose lifespan
runs against that file.

CHANGELOG:
- 2026-10-12: Initial creation
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from station.src.metrics import METRICS

# All StationSettings environment variable names, used for cleanup.
_ALL_STATION_ENV_VARS = (
    "STATION_LOG_PATH",
    "STATION_UTC_OFFSET_HOURS",
    "STATION_DEFAULT_MAX_ROWS",
    "STATION_MAX_ROWS_CAP",
    "STATION_READ_CHUNK_SIZE",
    "STATION_HOST",
    "STATION_PORT",
    "STATION_LOG_LEVEL",
)

SAMPLE_VALUES: dict[str, float | int] = {
    "temp": 23.5,
    "humid": 60.12,
    "press": 1008.25,
    "gas": 12.3,
    "uv": 5,
    "wspd": 3.21,
    "wdir": 270,
    "raindet": 0,
    "rainamt": 0.4,
    "solvolt": 6.12,
    "solcurr": 201.5,
    "solpwr": 12.345,
    "batvolt": 3.91,
    "batcurr": -45.2,
    "batpwr": -0.177,
    "sysvolt": 3.6,
    "syscurr": 120.04,
    "syspwr": 0.6,
}
"""One complete, valid set of raw metric values."""


@pytest.fixture(autouse=True)
def _clean_station_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove all station env vars and isolate from .env files."""
    for var in _ALL_STATION_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def sample_values() -> dict[str, float | int]:
    """Return a fresh copy of a complete, valid metric value set."""
    assert set(SAMPLE_VALUES) == {m.key for m in METRICS}
    return dict(SAMPLE_VALUES)


@pytest.fixture()
def sample_params() -> dict[str, str]:
    """Return SAMPLE_VALUES as query-string parameters."""
    return {key: str(value) for key, value in SAMPLE_VALUES.items()}


@pytest.fixture()
def log_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point STATION_LOG_PATH at a per-test log file (not created)."""
    path = tmp_path / "logs" / "sensor_log.txt"
    monkeypatch.setenv("STATION_LOG_PATH", str(path))
    return path


@pytest.fixture()
def client(log_path: Path) -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient with lifespan events triggered."""
    from station.src.api.main import app

    with TestClient(app) as test_client:
        yield test_client
