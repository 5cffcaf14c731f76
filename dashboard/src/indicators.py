"""
Derived indicators computed from the newest station row.

- Compass heading from the wind direction.
- Battery charge percent and band from a voltage, linear between
  ``BATTERY_EMPTY_V`` and ``BATTERY_FULL_V`` and clamped to 0..100.
- Power-flow edges between solar, controller, battery and load; an edge is
  active only for a finite, strictly positive power.

All functions are pure and take plain values or a single projected row.

CHANGELOG:
- 2026-10-16: Battery band thresholds come from BatteryPolicy
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dashboard.src.aggregator import Row, numeric_value

BATTERY_EMPTY_V = 2.7
BATTERY_FULL_V = 4.5

BAND_FULL = "full"
BAND_MEDIUM = "medium"
BAND_LOW = "low"


# ---------------------------------------------------------------------------
# Compass
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CompassHeading:
    """Wind direction for the compass needle.

    Attributes:
        degrees: Heading as reported; not wrapped or clamped.
        label: Display text, e.g. ``"270.00°"``.
    """

    degrees: float
    label: str


def compass_heading(row: Row, key: str = "wdir") -> CompassHeading | None:
    """Return the heading for *row*, or None when absent or non-finite."""
    degrees = numeric_value(row, key)
    if math.isnan(degrees):
        return None
    return CompassHeading(degrees=degrees, label=f"{degrees:.2f}°")


# ---------------------------------------------------------------------------
# Battery
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BatteryPolicy:
    """Percent thresholds for the battery bands.

    A percent strictly above ``high`` is ``full``, strictly above ``medium``
    is ``medium``, anything else is ``low``.
    """

    high: float = 70.0
    medium: float = 40.0


@dataclass(frozen=True, slots=True)
class BatteryCharge:
    """Battery indicator state.

    Attributes:
        voltage: Input voltage.
        percent: Estimated charge, clamped to 0..100.
        band: ``full``, ``medium`` or ``low``.
        text: Display text, e.g. ``"50% (3.60V)"``.
    """

    voltage: float
    percent: float
    band: str
    text: str


def battery_charge(
    voltage: float, policy: BatteryPolicy | None = None
) -> BatteryCharge:
    """Map a battery voltage to a charge percent and band.

    Args:
        voltage: Measured voltage. Non-finite input reads as 0 V.
        policy: Band thresholds; defaults to ``BatteryPolicy()``.
    """
    if policy is None:
        policy = BatteryPolicy()
    if not math.isfinite(voltage):
        voltage = 0.0

    percent = (voltage - BATTERY_EMPTY_V) / (BATTERY_FULL_V - BATTERY_EMPTY_V) * 100
    percent = min(100.0, max(0.0, percent))

    if percent > policy.high:
        band = BAND_FULL
    elif percent > policy.medium:
        band = BAND_MEDIUM
    else:
        band = BAND_LOW

    return BatteryCharge(
        voltage=voltage,
        percent=percent,
        band=band,
        text=f"{round(percent)}% ({voltage:.2f}V)",
    )


def battery_from_row(
    row: Row,
    key: str = "sysvolt",
    policy: BatteryPolicy | None = None,
) -> BatteryCharge | None:
    """Return the battery indicator for *row*.

    Returns None when *key* is absent from the row. A present but
    unparseable voltage reads as 0 V.
    """
    if key not in row and key + "_num" not in row:
        return None
    voltage = numeric_value(row, key)
    return battery_charge(0.0 if math.isnan(voltage) else voltage, policy)


# ---------------------------------------------------------------------------
# Power flow
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PowerFlow:
    """Active state of each power-flow edge."""

    solar_to_controller: bool
    battery_to_load: bool
    controller_to_load: bool


def _active(power: float) -> bool:
    return math.isfinite(power) and power > 0


def power_flow(
    row: Row,
    solar_key: str = "solpwr",
    battery_key: str = "batpwr",
    system_key: str = "syspwr",
) -> PowerFlow:
    """Derive power-flow edges from the power readings of *row*."""
    return PowerFlow(
        solar_to_controller=_active(numeric_value(row, solar_key)),
        battery_to_load=_active(numeric_value(row, battery_key)),
        controller_to_load=_active(numeric_value(row, system_key)),
    )
