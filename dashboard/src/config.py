"""
Dashboard configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every variable is prefixed with ``DASHBOARD_`` (e.g.
``DASHBOARD_STATION_BASE_URL``). Structured values such as chart groups are
given as JSON. Invalid values fail at startup.

CHANGELOG:
- 2026-10-16: Make battery band thresholds configurable
- 2026-10-15: Initial creation

TODO:
- None
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


def _default_chart_groups() -> dict[str, list[str]]:
    return {
        "environment": ["press", "wspd", "raindet"],
        "power": ["solpwr", "syspwr"],
        "temperature": ["temp"],
        "voltage": ["sysvolt"],
    }


class DashboardSettings(BaseSettings):
    """Dashboard client configuration.

    Attributes:
        station_base_url: Base URL of the station API (``http(s)://...``).
        table_max_rows: Rows shown in the latest-readings table.
        chart_max_rows: Rows considered for chart series.
        fetch_interval_s: Seconds between refresh cycles.
        fetch_timeout_s: HTTP timeout per fetch; bounds every cycle.
        chart_span_hours: Width of the trailing chart x-axis window.
        utc_offset_hours: Fixed UTC offset the station timestamps are in.
        snapshot_path: Where the rendered dashboard JSON is written.
        chart_groups: Chart name -> ordered metric keys.
        wind_direction_key: Metric feeding the compass indicator.
        battery_voltage_key: Metric feeding the battery indicator.
        solar_power_key: Metric for the solar -> controller edge.
        battery_power_key: Metric for the battery -> load edge.
        system_power_key: Metric for the controller -> load edge.
        battery_high: Percent above which the battery band is ``full``.
        battery_medium: Percent above which the battery band is ``medium``.
        log_level: Root logging level name.
    """

    station_base_url: str = "http://localhost:8000"
    table_max_rows: int = 3
    chart_max_rows: int = 6000
    fetch_interval_s: float = 10.0
    fetch_timeout_s: float = 8.0
    chart_span_hours: float = 24.0
    utc_offset_hours: float = 8.0
    snapshot_path: str = "dashboard.json"
    chart_groups: dict[str, list[str]] = Field(default_factory=_default_chart_groups)
    wind_direction_key: str = "wdir"
    battery_voltage_key: str = "sysvolt"
    solar_power_key: str = "solpwr"
    battery_power_key: str = "batpwr"
    system_power_key: str = "syspwr"
    battery_high: float = 70.0
    battery_medium: float = 40.0
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _battery_bands_ordered(self) -> "DashboardSettings":
        """Reject a medium threshold that is not below the high threshold."""
        if not self.battery_medium < self.battery_high:
            raise ValueError(
                "DASHBOARD_BATTERY_MEDIUM must be below DASHBOARD_BATTERY_HIGH"
            )
        return self

    @field_validator("station_base_url")
    @classmethod
    def station_base_url_must_be_http(cls, v: str) -> str:
        """Validate the station URL scheme and drop any trailing slash."""
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(
                f"DASHBOARD_STATION_BASE_URL must be http(s) (got: '{v[:20]}...')"
            )
        return v.rstrip("/")

    @field_validator("table_max_rows", "chart_max_rows")
    @classmethod
    def row_counts_must_be_positive(cls, v: int) -> int:
        """Validate row counts are at least 1."""
        if v < 1:
            raise ValueError("Row counts must be >= 1")
        return v

    @field_validator("fetch_interval_s", "fetch_timeout_s", "chart_span_hours")
    @classmethod
    def durations_must_be_positive(cls, v: float) -> float:
        """Validate durations are strictly positive."""
        if v <= 0:
            raise ValueError("Durations must be > 0")
        return v

    @field_validator("utc_offset_hours")
    @classmethod
    def utc_offset_must_be_valid(cls, v: float) -> float:
        """Validate the offset is a real timezone offset (-24h, +24h)."""
        if not -24 < v < 24:
            raise ValueError("DASHBOARD_UTC_OFFSET_HOURS must be between -24 and 24")
        return v

    @field_validator("battery_high", "battery_medium")
    @classmethod
    def battery_threshold_must_be_percent(cls, v: float) -> float:
        """Validate battery thresholds lie within 0..100."""
        if not 0 <= v <= 100:
            raise ValueError("Battery thresholds must be between 0 and 100")
        return v

    model_config = {
        "env_prefix": "DASHBOARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
