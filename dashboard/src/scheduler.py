"""
Fixed-cadence refresh scheduler for the dashboard.

Each cycle fetches the newest station rows, builds the dashboard view and
renders it. Cycles are strictly sequential: a cycle always runs to
completion before the next starts.

The period is measured from the schedule, not from the end of a cycle, so
a 10 s period yields ticks at t, t+10, t+20, ... regardless of how long
each cycle takes. A cycle that overruns its slot makes the next one start
right after it; the schedule is then re-anchored at that point instead of
bursting through the missed ticks.

Failures never escape a cycle: a failed fetch or view build renders an
explicit error view, and a failed render is logged. The loop keeps going
until the shutdown event is set.

CHANGELOG:
- 2026-10-16: Measure the period from the schedule instead of cycle end
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from dashboard.src.config import DashboardSettings
from dashboard.src.fetcher import FetchError
from dashboard.src.view import DashboardView, build_view, error_view

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self) -> list[dict[str, object]]: ...


class Renderer(Protocol):
    def render(self, view: DashboardView) -> None: ...


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class RefreshScheduler:
    """Runs fetch -> build -> render cycles on a fixed period.

    Args:
        fetcher: Source of newest-first rows.
        renderer: Sink for each built view.
        settings: Dashboard settings (period, limits, indicator keys).
        clock: Returns the aware current time; injectable for tests.
        timer: Monotonic seconds used for the schedule. Defaults to the
            running event loop clock.
    """

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        renderer: Renderer,
        settings: DashboardSettings,
        clock: Callable[[], datetime] = _utc_now,
        timer: Callable[[], float] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._renderer = renderer
        self._settings = settings
        self._clock = clock
        self._timer = timer
        self._cycles = 0

    @property
    def cycles(self) -> int:
        """Number of completed cycles."""
        return self._cycles

    async def run_once(self) -> DashboardView:
        """Execute a single fetch-build-render cycle.

        Catches all exceptions so that the caller's loop is never broken.

        Returns:
            The view that was rendered (an error view on failure).
        """
        now = self._clock()
        try:
            rows = await self._fetcher.fetch()
            view = build_view(rows, settings=self._settings, now=now)
            logger.info("Refresh: %d rows, status=%s", len(rows), view.status)
        except FetchError as exc:
            logger.warning("Refresh fetch failed: %s", exc)
            view = error_view(f"Failed to load data: {exc}", now=now)
        except Exception:
            logger.error("Refresh cycle error", exc_info=True)
            view = error_view("Failed to build dashboard", now=now)

        try:
            self._renderer.render(view)
        except Exception:
            logger.warning("Failed to render dashboard", exc_info=True)

        self._cycles += 1
        return view

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Run cycles on the fixed period until *shutdown_event* is set.

        Args:
            shutdown_event: Event to signal graceful shutdown. A running
                cycle is allowed to finish.
        """
        interval = self._settings.fetch_interval_s
        timer = self._timer or asyncio.get_running_loop().time
        next_tick = timer()
        logger.info("Refresh loop started (interval=%ss)", interval)

        while not shutdown_event.is_set():
            await self.run_once()

            next_tick += interval
            now = timer()
            delay = next_tick - now
            if delay <= 0:
                logger.warning(
                    "Refresh cycle overran its %ss slot by %.2fs", interval, -delay
                )
                next_tick = now
                continue

            await self._wait(shutdown_event, delay)

        logger.info("Refresh loop stopped")

    async def _wait(self, shutdown_event: asyncio.Event, delay: float) -> None:
        """Sleep up to *delay* seconds, returning early on shutdown."""
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(shutdown_event.wait(), timeout=delay)
