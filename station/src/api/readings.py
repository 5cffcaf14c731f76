"""
GET /v1/readings endpoint serving the most recent log rows.

Reads the last ``max`` valid readings (newest-first) from the log store and
returns them as projected JSON rows (``format=json``) or as HTML table rows
(any other format). Responses are never cached by clients or proxies.

CHANGELOG:
- 2026-10-13: Cap requested row count via STATION_MAX_ROWS_CAP
- 2026-10-12: Initial creation

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, Response

from station.src.api.deps import SettingsDep, StoreDep
from station.src.projector import project, render_html

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["readings"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}


@router.get("/readings")
async def readings(
    settings: SettingsDep,
    store: StoreDep,
    max_rows: Annotated[
        int | None,
        Query(alias="max", description="Number of most recent rows to return."),
    ] = None,
    output_format: Annotated[
        str,
        Query(alias="format", description="json, or anything else for HTML rows."),
    ] = "html",
) -> Response:
    """Return the most recent readings, newest-first.

    Args:
        settings: Station settings (default and maximum row counts).
        store: Shared log store.
        max_rows: Requested row count; floored at 1, capped at
            ``max_rows_cap``. Defaults to ``default_max_rows``.
        output_format: ``json`` for projected rows, otherwise HTML.

    Returns:
        JSON array of flat row mappings, or HTML ``<tr>`` rows. A missing
        or unreadable log yields an empty array / a "no data" row.
    """
    limit = settings.default_max_rows if max_rows is None else max_rows
    limit = min(max(1, limit), settings.max_rows_cap)

    window = await run_in_threadpool(store.read_last, limit)
    rows = project(window.rows)

    logger.debug(
        "Readings query: limit=%d rows=%d skipped=%d strategy=%s",
        limit,
        len(rows),
        window.skipped,
        window.strategy,
    )

    if output_format.lower() == "json":
        return JSONResponse(content=rows, headers=NO_CACHE_HEADERS)
    return HTMLResponse(content=render_html(rows), headers=NO_CACHE_HEADERS)
