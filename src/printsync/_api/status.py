"""Status endpoints.

Endpoints:
  - /api/printer/status (print stats, toolhead, extruder)
  - /api/printer/mcu-status (firmware host health)
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from printsync._api._envelope import unwrap_envelope
from printsync._constants import MCU_STATUS_ENDPOINT, STATUS_ENDPOINT
from printsync._transport import Transport
from printsync.exceptions import PrinterPayloadError
from printsync.models.mcu import McuStatusFragment
from printsync.models.status import PrinterStatusFragment

_logger = logging.getLogger(__name__)


async def fetch_printer_status(transport: Transport) -> PrinterStatusFragment:
    """Fetch and parse the print/motion/temperature fragment."""
    body = await transport.get_json(STATUS_ENDPOINT)
    data = unwrap_envelope(STATUS_ENDPOINT, body)
    try:
        fragment = PrinterStatusFragment.from_data(data)
    except (ValidationError, ValueError) as exc:
        raise PrinterPayloadError(f"Malformed status from {STATUS_ENDPOINT}: {exc}", endpoint=STATUS_ENDPOINT) from exc
    _logger.debug(
        "Status: state=%s durations=%s",
        fragment.print_stats.state if fragment.print_stats else None,
        fragment.has_durations,
    )
    return fragment


async def fetch_mcu_status(transport: Transport) -> McuStatusFragment:
    """Fetch and parse the MCU health fragment."""
    body = await transport.get_json(MCU_STATUS_ENDPOINT)
    data = unwrap_envelope(MCU_STATUS_ENDPOINT, body)
    try:
        fragment = McuStatusFragment.from_data(data)
    except (ValidationError, ValueError) as exc:
        raise PrinterPayloadError(
            f"Malformed MCU status from {MCU_STATUS_ENDPOINT}: {exc}",
            endpoint=MCU_STATUS_ENDPOINT,
        ) from exc
    _logger.debug("MCU status: state=%s", fragment.state)
    return fragment
