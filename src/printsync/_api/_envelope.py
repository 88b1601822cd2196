"""Response envelope handling.

Every daemon endpoint answers with ``{success, message, data?, timestamp}``.
"""

from __future__ import annotations

from typing import Any

from printsync.exceptions import PrinterApiError, PrinterPayloadError


def unwrap_envelope(endpoint: str, body: Any) -> dict[str, Any]:
    """Return the ``data`` member of a successful envelope.

    Raises
    ------
    PrinterApiError
        If the daemon reported ``success: false``.
    PrinterPayloadError
        If the body is not an envelope or carries no ``data`` object.
    """
    if not isinstance(body, dict) or "success" not in body:
        raise PrinterPayloadError(f"{endpoint} returned a body without an envelope", endpoint=endpoint)
    if not body.get("success"):
        message = body.get("message") or "request failed"
        raise PrinterApiError(f"{endpoint} failed: {message}", endpoint=endpoint)
    data = body.get("data")
    if not isinstance(data, dict):
        raise PrinterPayloadError(f"{endpoint} returned no data", endpoint=endpoint)
    return data
