"""In-memory snapshot store.

This is the only component allowed to replace the current snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from printsync.models.snapshot import Snapshot
from printsync.state.merge import apply as merge_update
from printsync.state.merge import stamp_last_updated
from printsync.state.updates import ResetUpdate, SnapshotUpdate

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SnapshotStore:
    """Holds the current :class:`Snapshot` and notifies subscribers.

    Mutations run synchronously on the caller's event loop; listeners are
    called in subscription order with the new snapshot. A failing listener
    is logged and skipped.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        initial: Snapshot | None = None,
    ) -> None:
        self._clock = clock
        self._snapshot = initial if initial is not None else Snapshot.initial()
        self._listeners: list[SnapshotListener] = []

    def get(self) -> Snapshot:
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def update(self, mutator: Callable[[Snapshot], Snapshot]) -> Snapshot:
        """Replace the snapshot with ``mutator(current)``.

        ``last_updated`` is stamped by the store and never moves backwards.
        """
        current = self._snapshot
        candidate = mutator(current)
        stamped = stamp_last_updated(current.last_updated, self._clock())
        return self._commit(candidate.model_copy(update={"last_updated": stamped}))

    def apply(self, *updates: SnapshotUpdate) -> Snapshot:
        """Fold one or more tagged updates and notify once."""
        if not updates:
            return self._snapshot
        now = self._clock()
        snapshot = self._snapshot
        for update in updates:
            snapshot = merge_update(snapshot, update, now=now)
        return self._commit(snapshot)

    def reset(self) -> Snapshot:
        """Discard the current view and return to the initial state."""
        _logger.debug("Resetting printer snapshot")
        return self.apply(ResetUpdate())

    def is_stale(self, max_age: float) -> bool:
        """True if no device data arrived yet or the newest is older than ``max_age`` seconds.

        Failed polls only flip ``connectivity`` and do not make the data fresher.
        """
        age = self._snapshot.data_age(self._clock())
        return age is None or age > timedelta(seconds=max_age)

    def _commit(self, snapshot: Snapshot) -> Snapshot:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.warning("Snapshot listener %r failed", listener, exc_info=True)
        return snapshot
