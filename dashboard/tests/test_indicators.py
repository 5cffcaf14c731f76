"""
Unit tests for the derived indicators.

Tests verify:
- Battery percent is linear between 2.7 V and 4.5 V and clamped to 0..100.
- Bands follow the configured thresholds (strictly above).
- A present but unparseable voltage reads as 0 V; an absent key is None.
- Compass heading is omitted for missing or non-finite directions.
- Power-flow edges are active only for finite, strictly positive power.

CHANGELOG:
- 2026-10-16: Cover configurable battery thresholds
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math

import pytest

from dashboard.src.indicators import (
    BAND_FULL,
    BAND_LOW,
    BAND_MEDIUM,
    BatteryPolicy,
    battery_charge,
    battery_from_row,
    compass_heading,
    power_flow,
)


class TestBatteryCharge:
    """battery_charge maps voltage to percent and band."""

    def test_midpoint(self) -> None:
        charge = battery_charge(3.6)
        assert charge.percent == pytest.approx(50.0)
        assert charge.band == BAND_MEDIUM
        assert charge.text == "50% (3.60V)"

    def test_clamped_low(self) -> None:
        charge = battery_charge(2.0)
        assert charge.percent == 0.0
        assert charge.band == BAND_LOW

    def test_clamped_high(self) -> None:
        charge = battery_charge(5.0)
        assert charge.percent == 100.0
        assert charge.band == BAND_FULL

    def test_bounds(self) -> None:
        assert battery_charge(2.7).percent == pytest.approx(0.0)
        assert battery_charge(4.5).percent == pytest.approx(100.0)

    def test_non_finite_reads_as_zero_volts(self) -> None:
        charge = battery_charge(math.nan)
        assert charge.voltage == 0.0
        assert charge.percent == 0.0

    def test_thresholds_are_strict(self) -> None:
        policy = BatteryPolicy(high=100.0, medium=0.0)
        assert battery_charge(4.5, policy).band == BAND_MEDIUM
        assert battery_charge(2.7, policy).band == BAND_LOW

    def test_custom_policy(self) -> None:
        policy = BatteryPolicy(high=50.0, medium=30.0)
        assert battery_charge(3.7, policy).band == BAND_FULL
        assert battery_charge(3.4, policy).band == BAND_MEDIUM
        assert battery_charge(3.0, policy).band == BAND_LOW


class TestBatteryFromRow:
    """battery_from_row reads the configured voltage key."""

    def test_reads_numeric_companion(self) -> None:
        charge = battery_from_row({"sysvolt": "3.60 V", "sysvolt_num": 3.6})
        assert charge is not None
        assert charge.percent == pytest.approx(50.0)

    def test_absent_key_is_none(self) -> None:
        assert battery_from_row({"temp": "1"}) is None

    def test_unparseable_voltage_reads_as_zero(self) -> None:
        charge = battery_from_row({"sysvolt": "offline"})
        assert charge is not None
        assert charge.voltage == 0.0
        assert charge.band == BAND_LOW

    def test_custom_key(self) -> None:
        charge = battery_from_row({"batvolt_num": 4.5}, key="batvolt")
        assert charge is not None
        assert charge.percent == pytest.approx(100.0)


class TestCompassHeading:
    """compass_heading reads the wind direction."""

    def test_heading(self) -> None:
        heading = compass_heading({"wdir": "270.00 °", "wdir_num": 270.0})
        assert heading is not None
        assert heading.degrees == 270.0
        assert heading.label == "270.00°"

    def test_not_clamped(self) -> None:
        heading = compass_heading({"wdir_num": 400.0})
        assert heading is not None
        assert heading.degrees == 400.0

    def test_missing(self) -> None:
        assert compass_heading({}) is None

    def test_non_finite(self) -> None:
        assert compass_heading({"wdir_num": math.inf}) is None


class TestPowerFlow:
    """power_flow activates edges for positive power only."""

    def test_positive_values_active(self) -> None:
        flow = power_flow({"solpwr_num": 1.2, "batpwr_num": 0.1, "syspwr_num": 0.6})
        assert flow.solar_to_controller is True
        assert flow.battery_to_load is True
        assert flow.controller_to_load is True

    @pytest.mark.parametrize("value", [0.0, -0.5, math.nan, math.inf])
    def test_non_positive_or_non_finite_inactive(self, value: float) -> None:
        flow = power_flow({"solpwr_num": value})
        assert flow.solar_to_controller is False

    def test_missing_keys_inactive(self) -> None:
        flow = power_flow({})
        assert not (
            flow.solar_to_controller or flow.battery_to_load or flow.controller_to_load
        )
