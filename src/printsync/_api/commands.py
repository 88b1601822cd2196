"""Fire-and-confirm command endpoints.

The response only says whether the daemon accepted the request; the
resulting device state must be read back through the status endpoints.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from printsync._transport import Transport
from printsync.exceptions import PrinterCommandRejectedError, PrinterPayloadError, PrinterTransportError
from printsync.models.command import CommandAck, CommandKind

_logger = logging.getLogger(__name__)

# Client errors that may succeed when repeated.
_RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


async def send_command(transport: Transport, kind: CommandKind) -> CommandAck:
    """POST a command and return its acknowledgement.

    Raises
    ------
    PrinterCommandRejectedError
        If the daemon answered ``success: false`` or refused the request
        with a 4xx status.
    PrinterPayloadError
        If the body is not a ``{success, message}`` object.
    PrinterTransportError
        On network failure, a 5xx status, 408 or 429.
    """
    endpoint = kind.endpoint
    try:
        body = await transport.post_json(endpoint)
    except PrinterTransportError as exc:
        status = exc.status_code
        if status is not None and 400 <= status < 500 and status not in _RETRYABLE_CLIENT_STATUSES:
            raise PrinterCommandRejectedError(f"{kind.label} rejected: {exc}", endpoint=endpoint) from exc
        raise
    if not isinstance(body, dict):
        raise PrinterPayloadError(f"{endpoint} returned a non-object body", endpoint=endpoint)
    try:
        ack = CommandAck.model_validate(body)
    except ValidationError as exc:
        raise PrinterPayloadError(f"Malformed acknowledgement from {endpoint}: {exc}", endpoint=endpoint) from exc

    if not ack.success:
        raise PrinterCommandRejectedError(
            f"{kind.label} rejected: {ack.message or 'no reason given'}",
            endpoint=endpoint,
        )
    _logger.debug("%s accepted: %s", kind.label, ack.message)
    return ack
