"""
Weather station metric table -- single source of truth for the log format.

Defines every metric the sensor unit reports: the stable key used on the
ingestion query string and in projected rows, the label written into the
log line, the unit suffix, the fixed decimal precision and an optional
valid range checked at ingestion.

The order of ``METRICS`` is the order segments are written in a log line.
Changing the order, a label or a precision changes the on-disk encoding, so
any such change must bump ``SCHEMA_VERSION``.

CHANGELOG:
- 2026-10-12: Add solar/battery/system power metrics
- 2026-10-11: Initial creation

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass

SCHEMA_VERSION = 2
"""Version of the ordered metric table below."""


# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MetricDef:
    """Definition of a single station metric.

    Attributes:
        key: Stable identifier (query parameter name, projected row key).
        label: Text written before the colon in the log line.
        unit: Unit suffix appended after the value. Empty for unitless
            metrics (e.g. UV index).
        decimals: Fixed number of decimals for float metrics, ``None`` for
            integer metrics.
        valid_range: Optional inclusive ``(min, max)`` accepted at
            ingestion. ``None`` when no range check applies.
    """

    key: str
    label: str
    unit: str
    decimals: int | None = 2
    valid_range: tuple[float, float] | None = None

    @property
    def kind(self) -> str:
        """Return ``"int"`` for integer metrics, ``"float"`` otherwise."""
        return "int" if self.decimals is None else "float"


# ---------------------------------------------------------------------------
# Metric table (log segment order)
# ---------------------------------------------------------------------------

METRICS: tuple[MetricDef, ...] = (
    # Environment
    MetricDef("temp", "Temp", "°C", 2),
    MetricDef("humid", "Humidity", "%", 2, valid_range=(0.0, 100.0)),
    MetricDef("press", "Pressure", "hPa", 2),
    MetricDef("gas", "Gas", "kΩ", 2),
    MetricDef("uv", "UV Index", "", 1),
    # Wind & rain
    MetricDef("wspd", "Wind Speed", "m/s", 2),
    MetricDef("wdir", "Wind Direction", "°", 2),
    MetricDef("raindet", "Rain Detector", "", None, valid_range=(0, 1)),
    MetricDef("rainamt", "Rain Amount", "mm", 1),
    # Solar panel
    MetricDef("solvolt", "Solar Voltage", "V", 2),
    MetricDef("solcurr", "Solar Current", "mA", 2),
    MetricDef("solpwr", "Solar Power", "W", 3),
    # Battery
    MetricDef("batvolt", "Battery Voltage", "V", 2),
    MetricDef("batcurr", "Battery Current", "mA", 2),
    MetricDef("batpwr", "Battery Power", "W", 3),
    # System load
    MetricDef("sysvolt", "System Voltage", "V", 2),
    MetricDef("syscurr", "System Current", "mA", 2),
    MetricDef("syspwr", "System Power", "W", 3),
)

METRICS_BY_KEY: dict[str, MetricDef] = {m.key: m for m in METRICS}
"""Lookup: metric key -> MetricDef."""

METRICS_BY_LABEL: dict[str, MetricDef] = {m.label: m for m in METRICS}
"""Lookup: log label -> MetricDef."""


def _check_unique(metrics: tuple[MetricDef, ...]) -> None:
    """Raise ValueError if two metrics share a key or a label."""
    keys = [m.key for m in metrics]
    labels = [m.label for m in metrics]
    if len(set(keys)) != len(keys):
        raise ValueError(f"Duplicate metric key in table: {keys}")
    if len(set(labels)) != len(labels):
        raise ValueError(f"Duplicate metric label in table: {labels}")
    for metric in metrics:
        # Labels containing the segment separator or a colon cannot be decoded.
        if ":" in metric.label or " - " in metric.label:
            raise ValueError(f"Metric label {metric.label!r} is not encodable")


_check_unique(METRICS)
