"""
Health check endpoint for the station API.

Provides a simple GET /health endpoint that returns {"status": "ok"} with
HTTP 200, plus whether the sensor log exists yet. Intended for container
health checks and internal monitoring.

CHANGELOG:
- 2026-10-14: Report log file presence
- 2026-10-12: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from station.src.api.deps import StoreDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(store: StoreDep) -> dict[str, str | bool]:
    """Return a simple health status.

    Returns:
        dict: ``{"status": "ok", "log_present": bool}``.
    """
    return {"status": "ok", "log_present": store.path.is_file()}
