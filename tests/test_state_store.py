from __future__ import annotations

from datetime import UTC, datetime, timedelta

from _fakes import status_data
from printsync.models.snapshot import Snapshot
from printsync.models.status import PrinterStatusFragment, PrintState
from printsync.state.store import SnapshotStore
from printsync.state.updates import ConnectivityUpdate, StatusUpdate


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _status_update() -> StatusUpdate:
    return StatusUpdate(fragment=PrinterStatusFragment.from_data(status_data()))


def test_new_store_holds_initial_snapshot() -> None:
    store = SnapshotStore()

    assert store.get() == Snapshot.initial()


def test_listeners_receive_every_new_snapshot_in_order() -> None:
    store = SnapshotStore(clock=_Clock())
    seen: list[tuple[str, bool]] = []
    store.subscribe(lambda snap: seen.append(("first", snap.connectivity)))
    store.subscribe(lambda snap: seen.append(("second", snap.connectivity)))

    store.apply(ConnectivityUpdate(connected=True))

    assert seen == [("first", True), ("second", True)]


def test_failing_listener_does_not_block_others_or_the_commit() -> None:
    store = SnapshotStore(clock=_Clock())
    received: list[Snapshot] = []

    def _broken(_snapshot: Snapshot) -> None:
        raise RuntimeError("listener bug")

    store.subscribe(_broken)
    store.subscribe(received.append)

    result = store.apply(_status_update())

    assert received == [result]
    assert store.get().print_state is PrintState.PRINTING


def test_unsubscribe_stops_notifications_and_is_idempotent() -> None:
    store = SnapshotStore(clock=_Clock())
    received: list[Snapshot] = []
    unsubscribe = store.subscribe(received.append)

    store.apply(ConnectivityUpdate(connected=True))
    unsubscribe()
    unsubscribe()
    store.apply(ConnectivityUpdate(connected=False))

    assert len(received) == 1


def test_apply_batches_updates_into_one_notification() -> None:
    store = SnapshotStore(clock=_Clock())
    received: list[Snapshot] = []
    store.subscribe(received.append)

    store.apply(_status_update(), ConnectivityUpdate(connected=True))

    assert len(received) == 1
    assert received[0].connectivity is True
    assert received[0].progress_percent == 75.0


def test_apply_without_updates_is_a_no_op() -> None:
    store = SnapshotStore(clock=_Clock())
    received: list[Snapshot] = []
    store.subscribe(received.append)

    assert store.apply() is store.get()
    assert received == []


def test_update_stamps_last_updated_monotonically() -> None:
    clock = _Clock()
    store = SnapshotStore(clock=clock)

    first = store.update(lambda snap: snap.model_copy(update={"filename": "a.gcode"}))
    clock.advance(-30)
    second = store.update(lambda snap: snap.model_copy(update={"filename": "b.gcode"}))

    assert second.filename == "b.gcode"
    assert second.last_updated == first.last_updated


def test_update_overrides_a_mutator_supplied_timestamp() -> None:
    clock = _Clock()
    store = SnapshotStore(clock=clock)
    bogus = clock.now - timedelta(days=1)

    snapshot = store.update(lambda snap: snap.model_copy(update={"last_updated": bogus}))

    assert snapshot.last_updated == clock.now


def test_reset_discards_fields_and_notifies() -> None:
    store = SnapshotStore(clock=_Clock())
    store.apply(_status_update(), ConnectivityUpdate(connected=True))
    received: list[Snapshot] = []
    store.subscribe(received.append)

    snapshot = store.reset()

    assert snapshot == Snapshot.initial()
    assert received == [Snapshot.initial()]


def test_is_stale_tracks_data_age() -> None:
    clock = _Clock()
    store = SnapshotStore(clock=clock)

    assert store.is_stale(10.0)

    store.apply(_status_update())
    clock.advance(5)
    assert not store.is_stale(10.0)

    clock.advance(6)
    assert store.is_stale(10.0)


def test_initial_snapshot_can_be_seeded() -> None:
    seeded = Snapshot(filename="resume.gcode")

    store = SnapshotStore(initial=seeded)

    assert store.get().filename == "resume.gcode"


def test_connectivity_flips_do_not_refresh_data_age() -> None:
    clock = _Clock()
    store = SnapshotStore(clock=clock)
    store.apply(_status_update(), ConnectivityUpdate(connected=True))

    for _ in range(5):
        clock.advance(3)
        store.apply(ConnectivityUpdate(connected=False))

    assert store.get().last_updated == clock.now
    assert store.is_stale(10.0)
