"""Request/response boundary to the printer control daemon."""

from __future__ import annotations

from printsync._api import commands as _commands_api
from printsync._api import status as _status_api
from printsync._transport import Transport
from printsync.models.command import CommandAck, CommandKind
from printsync.models.mcu import McuStatusFragment
from printsync.models.status import PrinterStatusFragment


class CommandGateway:
    """Binds the endpoint functions to one transport.

    The poller and the confirmation loop depend on this class rather than
    on the transport, so tests can swap either side.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def fetch_status(self) -> PrinterStatusFragment:
        return await _status_api.fetch_printer_status(self._transport)

    async def fetch_mcu_status(self) -> McuStatusFragment:
        return await _status_api.fetch_mcu_status(self._transport)

    async def send(self, kind: CommandKind) -> CommandAck:
        return await _commands_api.send_command(self._transport, kind)
