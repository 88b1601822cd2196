"""Confirm-by-polling command loop.

A command's HTTP acknowledgement says nothing about the printer's state,
so each command is confirmed against freshly polled status:

    ATTEMPTING -> CONFIRMING -> (TERMINAL | ATTEMPTING ...)

ending in TERMINAL, TIMED_OUT or REJECTED. The deadline is fixed when the
loop starts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from printsync.exceptions import PrinterCommandRejectedError, PrinterError
from printsync.gateway import CommandGateway
from printsync.models.command import CommandKind, CommandOutcome, ConfirmationState, ConfirmOptions
from printsync.models.mcu import McuState
from printsync.models.snapshot import Snapshot
from printsync.poller import Poller, PollResult
from printsync.state.store import SnapshotStore

_logger = logging.getLogger(__name__)

TerminalPredicate = Callable[[Snapshot], bool]


def emergency_stop_confirmed(snapshot: Snapshot) -> bool:
    return snapshot.mcu.state in {McuState.SHUTDOWN, McuState.STANDBY}


def firmware_restarted(snapshot: Snapshot) -> bool:
    """The firmware has left the shutdown state, whatever it moved to."""
    return snapshot.mcu.state is not McuState.SHUTDOWN


def axes_homed(axes: str) -> TerminalPredicate:
    """Predicate that holds once every letter in ``axes`` is reported homed."""
    wanted = frozenset(axes.lower())

    def _homed(snapshot: Snapshot) -> bool:
        return wanted <= frozenset(snapshot.homed_axes.lower())

    return _homed


TERMINAL_PREDICATES: dict[CommandKind, TerminalPredicate] = {
    CommandKind.EMERGENCY_STOP: emergency_stop_confirmed,
    CommandKind.RESTART_FIRMWARE: firmware_restarted,
    CommandKind.HOME_XY: axes_homed("xy"),
    CommandKind.HOME_Z: axes_homed("z"),
}

#: Kinds whose predicate reads the MCU fragment; the others read /status.
MCU_CONFIRMED_KINDS: frozenset[CommandKind] = frozenset({CommandKind.EMERGENCY_STOP, CommandKind.RESTART_FIRMWARE})


def has_fresh_evidence(kind: CommandKind, result: PollResult) -> bool:
    """Whether ``result`` merged the fragment that ``kind``'s predicate reads.

    A failed fetch leaves the previous values in the snapshot, and those
    must never confirm a command.
    """
    if kind in MCU_CONFIRMED_KINDS:
        return result.mcu is not None
    return result.status is not None


class ConfirmedCommand:
    """Runs confirmation loops, at most one per :class:`CommandKind`.

    A second :meth:`run` for a kind whose loop is still active joins that
    loop and receives the same outcome instead of starting another one.
    """

    def __init__(self, gateway: CommandGateway, poller: Poller, store: SnapshotStore) -> None:
        self._gateway = gateway
        self._poller = poller
        self._store = store
        self._active: dict[CommandKind, asyncio.Task[CommandOutcome]] = {}

    def is_active(self, kind: CommandKind) -> bool:
        task = self._active.get(kind)
        return task is not None and not task.done()

    async def run(
        self,
        kind: CommandKind,
        is_terminal: TerminalPredicate,
        options: ConfirmOptions,
    ) -> CommandOutcome:
        """Issue ``kind`` until ``is_terminal`` holds or ``options.timeout`` expires.

        Transport failures while issuing are logged and retried. A definitive
        rejection from the daemon ends the loop with a REJECTED outcome. A
        timeout ends it with a TIMED_OUT outcome whose ``success`` is false.
        ``is_terminal`` is only consulted after a poll that merged the
        fragment it reads, see :func:`has_fresh_evidence`.
        """
        active = self._active.get(kind)
        if active is not None and not active.done():
            _logger.info("%s already being confirmed; joining the active loop", kind.label)
            return await asyncio.shield(active)

        task = asyncio.get_running_loop().create_task(
            self._confirm(kind, is_terminal, options),
            name=f"printsync-confirm-{kind.value}",
        )
        self._active[kind] = task
        task.add_done_callback(lambda done, k=kind: self._forget(k, done))
        # Cancelling a caller never cancels the loop.
        return await asyncio.shield(task)

    def _forget(self, kind: CommandKind, task: asyncio.Task[CommandOutcome]) -> None:
        if self._active.get(kind) is task:
            del self._active[kind]

    async def _confirm(
        self,
        kind: CommandKind,
        is_terminal: TerminalPredicate,
        options: ConfirmOptions,
    ) -> CommandOutcome:
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + options.timeout
        state = ConfirmationState.ATTEMPTING
        attempts = 0
        polls = 0
        acknowledged = False

        def _outcome(final: ConfirmationState, message: str) -> CommandOutcome:
            return CommandOutcome(
                kind=kind,
                state=final,
                success=final is ConfirmationState.TERMINAL,
                message=message,
                attempts=attempts,
                polls=polls,
                elapsed=loop.time() - started,
                snapshot=self._store.get(),
            )

        try:
            async with asyncio.timeout_at(deadline):
                while True:
                    if options.resend or not acknowledged:
                        state = ConfirmationState.ATTEMPTING
                        attempts += 1
                        try:
                            await self._gateway.send(kind)
                            acknowledged = True
                        except PrinterCommandRejectedError as exc:
                            _logger.warning("%s rejected by the printer: %s", kind.label, exc)
                            return _outcome(ConfirmationState.REJECTED, str(exc))
                        except PrinterError as exc:
                            _logger.warning("%s attempt %d failed: %s", kind.label, attempts, exc)

                    state = ConfirmationState.CONFIRMING
                    await asyncio.sleep(options.poll_delay)
                    result = await self._poller.poll_once()
                    polls += 1
                    if has_fresh_evidence(kind, result) and is_terminal(self._store.get()):
                        _logger.info("%s confirmed after %d status check(s)", kind.label, polls)
                        return _outcome(
                            ConfirmationState.TERMINAL,
                            f"{kind.label} confirmed",
                        )
                    _logger.debug(
                        "%s not confirmed yet (check %d, mcu=%s)",
                        kind.label,
                        polls,
                        self._store.get().mcu.state,
                    )
        except TimeoutError:
            _logger.warning(
                "%s did not confirm within %.1fs (stopped while %s)",
                kind.label,
                options.timeout,
                state,
            )
            return _outcome(
                ConfirmationState.TIMED_OUT,
                f"{kind.label} was not confirmed within {options.timeout:.1f}s",
            )
