"""
FastAPI dependency injection providers.

Exposes the settings, codec and log store built at startup (stored on
``app.state`` by the lifespan handler) for use with ``Depends()``.

CHANGELOG:
- 2026-10-12: Initial creation
"""

from typing import Annotated

from fastapi import Depends, Request

from station.src.codec import LineCodec
from station.src.config import StationSettings
from station.src.store import LogStore


def get_settings(request: Request) -> StationSettings:
    """Return the StationSettings loaded at startup."""
    return request.app.state.settings


def get_codec(request: Request) -> LineCodec:
    """Return the shared LineCodec."""
    return request.app.state.codec


def get_store(request: Request) -> LogStore:
    """Return the shared LogStore."""
    return request.app.state.store


# Type aliases for route handler signatures, e.g.
#   async def my_route(store: StoreDep): ...
SettingsDep = Annotated[StationSettings, Depends(get_settings)]
CodecDep = Annotated[LineCodec, Depends(get_codec)]
StoreDep = Annotated[LogStore, Depends(get_store)]
