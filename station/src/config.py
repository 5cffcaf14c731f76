"""
Station service configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every variable is prefixed with ``STATION_`` (e.g. ``STATION_LOG_PATH``).
Invalid values fail at startup.

CHANGELOG:
- 2026-10-13: Add read chunk size and row cap
- 2026-10-11: Initial creation

TODO:
- None
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class StationSettings(BaseSettings):
    """Station service configuration.

    Attributes:
        log_path: Path of the append-only sensor log file.
        utc_offset_hours: Fixed local UTC offset used for log timestamps.
        default_max_rows: Rows returned by the query endpoint when ``max``
            is not given.
        max_rows_cap: Upper bound on ``max`` accepted by the query endpoint.
        read_chunk_size: Bytes per backward read step.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
        log_level: Root logging level name.
    """

    log_path: str = "sensor_log.txt"
    utc_offset_hours: float = 8.0
    default_max_rows: int = 10
    max_rows_cap: int = 20000
    read_chunk_size: int = 8192
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _default_rows_within_cap(self) -> "StationSettings":
        """Reject a default row count above the row cap."""
        if self.default_max_rows > self.max_rows_cap:
            raise ValueError(
                "STATION_DEFAULT_MAX_ROWS must not exceed STATION_MAX_ROWS_CAP"
            )
        return self

    @field_validator("utc_offset_hours")
    @classmethod
    def utc_offset_must_be_valid(cls, v: float) -> float:
        """Validate the offset is a real timezone offset (-24h, +24h)."""
        if not -24 < v < 24:
            raise ValueError("STATION_UTC_OFFSET_HOURS must be between -24 and 24")
        return v

    @field_validator("default_max_rows", "max_rows_cap")
    @classmethod
    def row_counts_must_be_positive(cls, v: int) -> int:
        """Validate row counts are at least 1."""
        if v < 1:
            raise ValueError("Row counts must be >= 1")
        return v

    @field_validator("read_chunk_size")
    @classmethod
    def chunk_size_must_be_reasonable(cls, v: int) -> int:
        """Validate the backward read chunk is between 64 B and 16 MiB."""
        if v < 64 or v > 16 * 1024 * 1024:
            raise ValueError("STATION_READ_CHUNK_SIZE must be >= 64 and <= 16777216")
        return v

    @field_validator("port")
    @classmethod
    def port_must_be_valid(cls, v: int) -> int:
        """Validate TCP port is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("STATION_PORT must be between 1 and 65535")
        return v

    model_config = {
        "env_prefix": "STATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
