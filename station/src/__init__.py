"""
Weather station service package.

Receives telemetry samples from the remote sensor unit, appends them to a
flat human-readable log and serves the most recent readings to the
dashboard.

CHANGELOG:
- 2026-10-11: Initial creation

TODO:
- None
"""
