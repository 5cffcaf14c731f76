"""
HTTP fetcher for recent station readings.

Issues ``GET {station_base_url}/v1/readings?format=json&max=N`` with
``Cache-Control: no-store`` so intermediaries never serve a stale window.
The HTTP timeout bounds every fetch; a timeout, connection error, non-200
status or a payload that is not a list of objects raises FetchError.

CHANGELOG:
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when recent readings cannot be fetched or are malformed."""


class ReadingsFetcher:
    """Fetches the newest readings from the station API.

    Args:
        base_url: Station base URL, e.g. ``http://station.local:8000``.
        max_rows: Rows requested per fetch.
        timeout_s: HTTP timeout in seconds for the whole request.

    Usage::

        fetcher = ReadingsFetcher("http://localhost:8000", max_rows=6000)
        rows = await fetcher.fetch()
    """

    def __init__(self, base_url: str, max_rows: int, timeout_s: float = 8.0) -> None:
        self._url = f"{base_url.rstrip('/')}/v1/readings"
        self._max_rows = max_rows
        self._timeout_s = timeout_s

    @property
    def url(self) -> str:
        """Full readings endpoint URL."""
        return self._url

    async def fetch(self) -> list[dict[str, object]]:
        """Fetch the newest rows, newest-first.

        Returns:
            Rows exactly as served (possibly empty).

        Raises:
            FetchError: On timeout, connection failure, non-200 status or
                an unexpected payload shape.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                response = await client.get(
                    self._url,
                    params={"format": "json", "max": self._max_rows},
                    headers={"Cache-Control": "no-store"},
                )
        except httpx.HTTPError as exc:
            raise FetchError(f"Request to {self._url} failed: {exc}") from exc

        if response.status_code != 200:
            raise FetchError(f"Station returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError("Station returned invalid JSON") from exc

        if not isinstance(payload, list) or not all(
            isinstance(row, dict) for row in payload
        ):
            raise FetchError("Station returned an unexpected payload shape")

        logger.debug("Fetched %d rows from %s", len(payload), self._url)
        return payload
