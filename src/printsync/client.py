"""High-level async client for a printer control daemon."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from printsync._transport import HttpTransport, Transport
from printsync.config import PrinterConfig
from printsync.confirm import TERMINAL_PREDICATES, ConfirmedCommand
from printsync.exceptions import PrinterError
from printsync.gateway import CommandGateway
from printsync.models.command import CommandKind, CommandOutcome
from printsync.models.snapshot import Snapshot
from printsync.poller import PollHandle, Poller, PollerState, PollResult
from printsync.state.store import SnapshotListener, SnapshotStore

_logger = logging.getLogger(__name__)


class PrinterClient:
    """Async client keeping one synchronized view of a printer.

    Usage::

        async with PrinterClient(PrinterConfig.from_env()) as client:
            unsubscribe = client.subscribe(render)
            client.start_polling()
            outcome = await client.emergency_stop()
    """

    def __init__(
        self,
        config: PrinterConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        self._config = config or PrinterConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self.store = store or SnapshotStore()
        self._poller: Poller | None = None
        self._commands: ConfirmedCommand | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PrinterClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        gateway = CommandGateway(self._transport)
        self._poller = Poller(self.store, gateway, interval=self._config.poll_interval)
        self._commands = ConfirmedCommand(gateway, self._poller, self.store)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._poller is not None:
            await self._poller.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None
        self._poller = None
        self._commands = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_poller(self) -> Poller:
        if self._poller is None:
            raise PrinterError("Client not initialized. Use 'async with PrinterClient(...) as client:'")
        return self._poller

    def _require_commands(self) -> ConfirmedCommand:
        if self._commands is None:
            raise PrinterError("Client not initialized. Use 'async with PrinterClient(...) as client:'")
        return self._commands

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self.store.get()

    @property
    def is_connected(self) -> bool:
        return self.store.get().connectivity

    @property
    def is_stale(self) -> bool:
        """Whether the newest device data is older than ``config.stale_after``."""
        return self.store.is_stale(self._config.stale_after)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot; returns an unsubscribe callable."""
        return self.store.subscribe(listener)

    def reset(self) -> Snapshot:
        return self.store.reset()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    @property
    def polling_state(self) -> PollerState:
        if self._poller is None:
            return PollerState.IDLE
        return self._poller.state

    def start_polling(self, interval: float | None = None) -> PollHandle:
        return self._require_poller().start(interval)

    async def stop_polling(self) -> None:
        await self._require_poller().stop()

    async def refresh(self) -> PollResult:
        """Poll status and MCU health once, outside the periodic schedule."""
        return await self._require_poller().poll_once()

    async def refresh_mcu(self) -> PollResult:
        """Poll only the MCU health endpoint."""
        return await self._require_poller().poll_once(status=False)

    # ------------------------------------------------------------------
    # Confirmed commands
    # ------------------------------------------------------------------

    async def run_command(self, kind: CommandKind) -> CommandOutcome:
        """Issue ``kind`` and confirm it with the default predicate and timings."""
        commands = self._require_commands()
        _logger.info("%s requested", kind.label)
        return await commands.run(kind, TERMINAL_PREDICATES[kind], self._config.confirm_options(kind))

    async def emergency_stop(self) -> CommandOutcome:
        """Stop the printer; confirmed once the MCU reports shutdown or standby."""
        return await self.run_command(CommandKind.EMERGENCY_STOP)

    async def restart_firmware(self) -> CommandOutcome:
        """Restart the firmware; confirmed once the MCU has left shutdown."""
        return await self.run_command(CommandKind.RESTART_FIRMWARE)

    async def home_xy(self) -> CommandOutcome:
        return await self.run_command(CommandKind.HOME_XY)

    async def home_z(self) -> CommandOutcome:
        return await self.run_command(CommandKind.HOME_Z)
