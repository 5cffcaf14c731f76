"""
Dashboard daemon entrypoint.

Loads DashboardSettings, builds the readings fetcher and snapshot writer,
and runs the RefreshScheduler until SIGTERM/SIGINT. Structured JSON logging
is used for all events, and a config summary is logged at startup.

CHANGELOG:
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import json
import logging
import signal
import sys
from datetime import UTC, datetime

from dashboard.src.config import DashboardSettings
from dashboard.src.fetcher import ReadingsFetcher
from dashboard.src.scheduler import RefreshScheduler
from dashboard.src.snapshot import SnapshotWriter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the dashboard daemon.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

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

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_config_summary(settings: DashboardSettings) -> None:
    """Log a config summary at startup."""
    logger.info(
        "Dashboard starting with config: "
        "station_base_url=%s, fetch_interval_s=%s, fetch_timeout_s=%s, "
        "table_max_rows=%s, chart_max_rows=%s, chart_span_hours=%s, "
        "utc_offset_hours=%s, snapshot_path=%s, chart_groups=%s, "
        "battery_thresholds=%s/%s",
        settings.station_base_url,
        settings.fetch_interval_s,
        settings.fetch_timeout_s,
        settings.table_max_rows,
        settings.chart_max_rows,
        settings.chart_span_hours,
        settings.utc_offset_hours,
        settings.snapshot_path,
        sorted(settings.chart_groups),
        settings.battery_high,
        settings.battery_medium,
    )


def build_scheduler(settings: DashboardSettings) -> RefreshScheduler:
    """Wire the fetcher and snapshot writer into a scheduler."""
    fetcher = ReadingsFetcher(
        settings.station_base_url,
        max_rows=max(settings.table_max_rows, settings.chart_max_rows),
        timeout_s=settings.fetch_timeout_s,
    )
    return RefreshScheduler(
        fetcher=fetcher,
        renderer=SnapshotWriter(settings.snapshot_path),
        settings=settings,
    )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def async_main() -> None:
    """Async entrypoint: load config, build components, run the scheduler.

    Sets up SIGTERM/SIGINT handlers to trigger graceful shutdown.
    """
    settings = DashboardSettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: _handle_signal(shutdown_event),
        )

    scheduler = build_scheduler(settings)
    await scheduler.run(shutdown_event)
    logger.info("Shutdown complete after %d cycles", scheduler.cycles)


def _handle_signal(shutdown_event: asyncio.Event) -> None:
    """Handle SIGTERM/SIGINT by setting the shutdown event."""
    logger.info("Received shutdown signal, initiating graceful shutdown")
    shutdown_event.set()


def main() -> None:
    """Synchronous entrypoint for the dashboard daemon."""
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
