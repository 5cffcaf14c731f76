"""
FastAPI application entry point for the weather station API.

Builds the shared LineCodec and LogStore from StationSettings at startup and
stores them on ``app.state`` for route handlers. Registers the ingestion,
readings and health routers.

Run with ``weather-station`` (see :func:`main`), which installs structured
JSON logging and serves the app with uvicorn.

CHANGELOG:
- 2026-10-14: Add structured JSON logging and uvicorn entrypoint
- 2026-10-13: Register readings router
- 2026-10-12: Initial creation
"""

import json
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI

from station.src.api.health import router as health_router
from station.src.api.ingest import router as ingest_router
from station.src.api.readings import router as readings_router
from station.src.codec import LineCodec, station_timezone
from station.src.config import StationSettings
from station.src.metrics import SCHEMA_VERSION
from station.src.store import LogStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class _JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger (stderr)."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load settings and build the log store.

    Raises:
        pydantic.ValidationError: If the environment configuration is
            invalid. The app refuses to start.
    """
    settings = StationSettings()
    codec = LineCodec()
    app.state.settings = settings
    app.state.codec = codec
    app.state.tz = station_timezone(settings.utc_offset_hours)
    app.state.store = LogStore(
        settings.log_path,
        codec,
        chunk_size=settings.read_chunk_size,
    )

    logger.info(
        "Weather station API ready: log_path=%s, utc_offset_hours=%s, "
        "default_max_rows=%s, max_rows_cap=%s, schema_version=%s",
        settings.log_path,
        settings.utc_offset_hours,
        settings.default_max_rows,
        settings.max_rows_cap,
        SCHEMA_VERSION,
    )
    yield
    logger.info("Weather station API shutting down")


app = FastAPI(
    title="Weather Station API",
    description="Sensor log ingestion and recent-readings queries.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(ingest_router)
app.include_router(readings_router)


@app.get("/")
async def root() -> dict:
    """Root health check endpoint.

    Returns:
        dict: JSON object with application status.
    """
    return {"status": "ok"}


def main() -> None:
    """Synchronous entrypoint: configure logging and serve with uvicorn."""
    import uvicorn

    settings = StationSettings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
