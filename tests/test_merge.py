from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from _fakes import mcu_data, status_data
from printsync.models.mcu import McuState, McuStatusFragment
from printsync.models.snapshot import Snapshot
from printsync.models.status import PrinterStatusFragment, PrintState
from printsync.state.merge import apply, format_duration, progress_percent
from printsync.state.updates import ConnectivityUpdate, McuUpdate, ResetUpdate, StatusUpdate


def _dt(second: int = 0) -> datetime:
    return datetime(2026, 1, 1, 12, 0, second, tzinfo=UTC)


def _status(**kwargs) -> StatusUpdate:
    return StatusUpdate(fragment=PrinterStatusFragment.from_data(status_data(**kwargs)))


def test_format_duration() -> None:
    assert format_duration(125) == "00:02:05"
    assert format_duration(3661) == "01:01:01"
    assert format_duration(0) == "00:00:00"
    assert format_duration(59.9) == "00:00:59"
    assert format_duration(-5) == "00:00:00"
    assert format_duration(100 * 3600) == "100:00:00"


def test_progress_percent_requires_positive_total() -> None:
    assert progress_percent(4500, 6000) == 75.0
    assert progress_percent(10, 0) is None


def test_status_fragment_populates_snapshot() -> None:
    snapshot = apply(Snapshot.initial(), _status(position=[1.0, 2.0, 3.0, 4.0], homed_axes="xyz"), now=_dt())

    assert snapshot.print_state is PrintState.PRINTING
    assert snapshot.filename == "benchy.gcode"
    assert snapshot.progress_percent == 75.0
    assert snapshot.elapsed_time == "01:15:00"
    assert snapshot.estimated_remaining == "00:25:00"
    assert (snapshot.position.x, snapshot.position.y, snapshot.position.z, snapshot.position.e) == (1.0, 2.0, 3.0, 4.0)
    assert snapshot.homed_axes == "xyz"
    assert snapshot.extruder.current == 210.5
    assert snapshot.extruder.target == 215.0
    assert snapshot.last_updated == _dt()


def test_zero_total_duration_leaves_derived_fields_unchanged() -> None:
    first = apply(Snapshot.initial(), _status(print_duration=4500, total_duration=6000), now=_dt(0))
    second = apply(first, _status(print_duration=10, total_duration=0), now=_dt(1))

    assert second.progress_percent == 75.0
    assert second.elapsed_time == "01:15:00"
    assert second.estimated_remaining == "00:25:00"


def test_missing_duration_counters_leave_derived_fields_unchanged() -> None:
    first = apply(Snapshot.initial(), _status(), now=_dt(0))
    second = apply(first, _status(print_duration=None), now=_dt(1))

    assert second.progress_percent == first.progress_percent
    assert second.elapsed_time == first.elapsed_time


def test_fragment_omitting_fields_keeps_previous_values() -> None:
    full = apply(Snapshot.initial(), _status(), now=_dt(0))
    partial = PrinterStatusFragment.model_validate({"extruder": {"temperature": 190.0}})

    merged = apply(full, StatusUpdate(fragment=partial), now=_dt(1))

    assert merged.extruder.current == 190.0
    assert merged.extruder.target == full.extruder.target
    assert merged.position == full.position
    assert merged.print_state == full.print_state
    assert merged.filename == full.filename
    assert merged.progress_percent == full.progress_percent


def test_empty_fragment_only_refreshes_timestamps() -> None:
    full = apply(Snapshot.initial(), _status(), now=_dt(0))
    stamps = {"last_updated", "last_received"}

    merged = apply(full, StatusUpdate(fragment=PrinterStatusFragment()), now=_dt(5))

    assert merged.model_dump(exclude=stamps) == full.model_dump(exclude=stamps)
    assert merged.last_updated == _dt(5)
    assert merged.last_received == _dt(5)


def test_mcu_fragment_updates_only_mcu_fields() -> None:
    before = apply(Snapshot.initial(), _status(), now=_dt(0))
    fragment = McuStatusFragment.from_data(mcu_data("shutdown"))

    after = apply(before, McuUpdate(fragment=fragment), now=_dt(1))

    assert after.mcu.state is McuState.SHUTDOWN
    assert after.mcu.hostname == "voron"
    assert after.mcu.process_id == 1234
    assert after.position == before.position
    assert after.print_state == before.print_state


def test_partial_mcu_fragment_keeps_identification() -> None:
    first = apply(Snapshot.initial(), McuUpdate(fragment=McuStatusFragment.from_data(mcu_data())), now=_dt(0))

    second = apply(first, McuUpdate(fragment=McuStatusFragment(state=McuState.STARTUP)), now=_dt(1))

    assert second.mcu.state is McuState.STARTUP
    assert second.mcu.software_version == "v0.12.0"


def test_numeric_values_are_copied_verbatim() -> None:
    snapshot = apply(
        Snapshot.initial(),
        _status(position=[-5.0, 1e9, -0.0, 3.25], temperature=-273.0, target=9999.0),
        now=_dt(),
    )

    assert snapshot.position.x == -5.0
    assert snapshot.position.y == 1e9
    assert snapshot.extruder.current == -273.0
    assert snapshot.extruder.target == 9999.0


def test_connectivity_update_keeps_fields_and_stamps() -> None:
    online = apply(Snapshot.initial(), _status(), now=_dt(0))

    offline = apply(online, ConnectivityUpdate(connected=False), now=_dt(3))

    assert offline.connectivity is False
    assert offline.position == online.position
    assert offline.last_updated == _dt(3)
    assert offline.last_received == _dt(0)


def test_last_updated_never_moves_backwards() -> None:
    stamps = [_dt(10), _dt(5), _dt(12), _dt(12) - timedelta(hours=1)]
    snapshot = Snapshot.initial()
    previous = None
    for stamp in stamps:
        snapshot = apply(snapshot, ConnectivityUpdate(connected=True), now=stamp)
        assert snapshot.last_updated is not None
        if previous is not None:
            assert snapshot.last_updated >= previous
        previous = snapshot.last_updated

    assert snapshot.last_updated == _dt(12)


def test_reset_returns_initial_snapshot() -> None:
    snapshot = apply(Snapshot.initial(), _status(), now=_dt())

    assert apply(snapshot, ResetUpdate(), now=_dt(1)) == Snapshot.initial()


def test_unknown_update_type_is_rejected() -> None:
    with pytest.raises(AssertionError):
        apply(Snapshot.initial(), object(), now=_dt())  # type: ignore[arg-type]


def test_initial_snapshot_defaults() -> None:
    snapshot = Snapshot.initial()

    assert snapshot.print_state is PrintState.UNKNOWN
    assert snapshot.mcu.state is McuState.READY
    assert snapshot.connectivity is False
    assert snapshot.last_updated is None
    assert snapshot.elapsed_time == "00:00:00"
    assert (snapshot.position.x, snapshot.position.y, snapshot.position.z, snapshot.position.e) == (0, 0, 0, 0)


def test_mcu_fragment_refreshes_last_received() -> None:
    snapshot = apply(Snapshot.initial(), ConnectivityUpdate(connected=True), now=_dt(0))
    assert snapshot.last_received is None

    snapshot = apply(snapshot, McuUpdate(fragment=McuStatusFragment.from_data(mcu_data())), now=_dt(4))

    assert snapshot.last_received == _dt(4)
