"""
Weather station dashboard package.

Polls the station readings endpoint on a fixed cadence, turns each
newest-first row window into chart series, a latest-rows table and derived
indicators (compass heading, battery charge, power flow), and renders the
result as a JSON snapshot.

CHANGELOG:
- 2026-10-15: Initial creation

TODO:
- None
"""
