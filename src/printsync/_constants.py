"""Endpoint paths and default timings for the printer control daemon."""

from __future__ import annotations

DEFAULT_BASE_URL = "http://localhost:8000"

API_PREFIX = "/api/printer"
STATUS_ENDPOINT = f"{API_PREFIX}/status"
MCU_STATUS_ENDPOINT = f"{API_PREFIX}/mcu-status"

#: Passive status poll cadence while a UI is attached (seconds).
DEFAULT_POLL_INTERVAL: float = 3.0
DEFAULT_REQUEST_TIMEOUT: float = 5.0

DEFAULT_EMERGENCY_STOP_DELAY: float = 0.5
DEFAULT_EMERGENCY_STOP_TIMEOUT: float = 10.0
DEFAULT_RESTART_DELAY: float = 1.0
DEFAULT_RESTART_TIMEOUT: float = 30.0
DEFAULT_HOME_DELAY: float = 1.0
DEFAULT_HOME_TIMEOUT: float = 60.0

#: A snapshot older than this is reported as stale (seconds).
DEFAULT_STALE_AFTER: float = 10.0

ZERO_DURATION = "00:00:00"
