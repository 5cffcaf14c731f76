"""
GET /v1/ingest endpoint receiving one sample from the sensor unit.

The sensor unit issues a plain GET with every metric as a query parameter
(``?temp=23.5&humid=60.12&...``). The whole parameter set is validated;
on success one line is appended to the log.

Responses:
- 200 ``{"ok": true, "message", "timestamp", "data"}``
- 400 ``{"ok": false, "errors": [...]}`` listing every missing/invalid field
- 500 ``{"ok": false, "error": "Failed to write to log file"}``

CHANGELOG:
- 2026-10-12: Initial creation

TODO:
- None
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from station.src.api.deps import CodecDep, StoreDep
from station.src.services.ingestion import ingest_reading
from station.src.store import LogWriteError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["ingest"])


# ---------------------------------------------------------------------------
# Pydantic response models
# ---------------------------------------------------------------------------


class IngestResponse(BaseModel):
    """Successful ingestion response."""

    ok: bool = True
    message: str = "Data received and logged"
    timestamp: str
    data: dict[str, str | int]


class IngestRejected(BaseModel):
    """Validation failure listing every offending parameter."""

    ok: bool = False
    errors: list[str]


class IngestFailed(BaseModel):
    """Write failure response."""

    ok: bool = False
    error: str


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------


@router.get(
    "/ingest",
    response_model=IngestResponse,
    responses={400: {"model": IngestRejected}, 500: {"model": IngestFailed}},
)
async def ingest(request: Request, codec: CodecDep, store: StoreDep):
    """Validate one reading from the query string and append it to the log.

    Args:
        request: The incoming request; its query parameters are the metrics.
        codec: Shared line codec.
        store: Shared log store.

    Returns:
        IngestResponse on success, or a JSONResponse with status 400 (every
        validation error) or 500 (log write failure).
    """
    params = dict(request.query_params)
    try:
        result = await run_in_threadpool(
            ingest_reading,
            params,
            codec=codec,
            store=store,
            now=datetime.now(tz=UTC),
            tz=request.app.state.tz,
        )
    except LogWriteError:
        return JSONResponse(
            status_code=500,
            content=IngestFailed(error="Failed to write to log file").model_dump(),
        )

    if not result.ok:
        return JSONResponse(
            status_code=400,
            content=IngestRejected(errors=result.errors).model_dump(),
        )

    return IngestResponse(timestamp=result.timestamp, data=result.data)
