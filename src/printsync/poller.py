"""Periodic status polling.

The poller owns the only timer that reads device status. Command
confirmation reuses :meth:`Poller.poll_once` instead of running its own.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from dataclasses import dataclass

from printsync._constants import DEFAULT_POLL_INTERVAL
from printsync.exceptions import PrinterError
from printsync.gateway import CommandGateway
from printsync.models.mcu import McuStatusFragment
from printsync.models.status import PrinterStatusFragment
from printsync.state.store import SnapshotStore
from printsync.state.updates import ConnectivityUpdate, McuUpdate, SnapshotUpdate, StatusUpdate

_logger = logging.getLogger(__name__)


class PollerState(enum.StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(slots=True, frozen=True)
class PollResult:
    """What one poll fetched.

    ``errors`` holds one entry per failed fetch; the fragments that did
    arrive have already been merged.
    """

    status: PrinterStatusFragment | None = None
    mcu: McuStatusFragment | None = None
    errors: tuple[PrinterError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


class PollHandle:
    """Handle for a running poll task, returned by :meth:`Poller.start`."""

    def __init__(self, task: asyncio.Task[None], interval: float) -> None:
        self._task = task
        self.interval = interval

    @property
    def running(self) -> bool:
        return not self._task.done()

    async def cancel(self) -> None:
        """Cancel the task and wait until it has finished."""
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task


class Poller:
    """Fetches status on a fixed period and merges it into the store."""

    def __init__(
        self,
        store: SnapshotStore,
        gateway: CommandGateway,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._store = store
        self._gateway = gateway
        self._interval = interval
        self._lock = asyncio.Lock()
        self._handle: PollHandle | None = None

    @property
    def state(self) -> PollerState:
        if self._handle is not None and self._handle.running:
            return PollerState.RUNNING
        return PollerState.IDLE

    def start(self, interval: float | None = None) -> PollHandle:
        """Start polling; returns the existing handle if already running."""
        if self._handle is not None and self._handle.running:
            return self._handle
        period = self._interval if interval is None else interval
        if period <= 0:
            raise ValueError("interval must be positive")
        task = asyncio.get_running_loop().create_task(self._run(period), name="printsync-poller")
        self._handle = PollHandle(task, period)
        _logger.info("Status polling started every %.1fs", period)
        return self._handle

    async def stop(self) -> None:
        """Stop polling.

        When this returns the poll task has finished: no pending tick and no
        in-flight passive fetch can touch the store afterwards.
        """
        handle = self._handle
        self._handle = None
        if handle is None:
            return
        await handle.cancel()
        _logger.info("Status polling stopped")

    async def poll_once(self, *, status: bool = True, mcu: bool = True) -> PollResult:
        """Fetch the requested fragments and merge whatever arrived.

        Calls are serialized: a call issued while another is in flight waits
        for it, so its (newer) data is always merged last. ``connectivity``
        is set from this attempt alone.
        """
        async with self._lock:
            return await self._fetch_and_merge(status=status, mcu=mcu)

    async def _fetch_and_merge(self, *, status: bool, mcu: bool) -> PollResult:
        if not (status or mcu):
            raise ValueError("poll_once needs at least one of status or mcu")
        names: list[str] = []
        calls = []
        if status:
            names.append("status")
            calls.append(self._gateway.fetch_status())
        if mcu:
            names.append("mcu")
            calls.append(self._gateway.fetch_mcu_status())

        results = await asyncio.gather(*calls, return_exceptions=True)

        status_fragment: PrinterStatusFragment | None = None
        mcu_fragment: McuStatusFragment | None = None
        errors: list[PrinterError] = []
        for name, result in zip(names, results, strict=True):
            if isinstance(result, PrinterError):
                _logger.warning("Polling %s failed: %s", name, result)
                errors.append(result)
            elif isinstance(result, BaseException):
                raise result
            elif name == "status":
                status_fragment = result
            else:
                mcu_fragment = result

        updates: list[SnapshotUpdate] = []
        if status_fragment is not None:
            updates.append(StatusUpdate(fragment=status_fragment))
        if mcu_fragment is not None:
            updates.append(McuUpdate(fragment=mcu_fragment))
        updates.append(ConnectivityUpdate(connected=not errors))
        self._store.apply(*updates)

        return PollResult(
            status=status_fragment,
            mcu=mcu_fragment,
            errors=tuple(errors),
        )

    async def _run(self, interval: float) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            await self._tick()
            next_tick += interval
            now = loop.time()
            if now >= next_tick:
                missed = int((now - next_tick) // interval) + 1
                _logger.debug("Poll overran the interval; skipping %d tick(s)", missed)
                next_tick += missed * interval
            await asyncio.sleep(next_tick - now)

    async def _tick(self) -> None:
        if self._lock.locked():
            _logger.debug("Previous poll still in flight; skipping tick")
            return
        try:
            await self.poll_once()
        except Exception:
            _logger.warning("Status poll raised unexpectedly", exc_info=True)
