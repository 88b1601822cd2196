"""Pure fragment merge.

``apply`` folds one tagged update into a snapshot and returns the new
snapshot. Fields a fragment does not carry keep their previous value;
carried values are copied verbatim.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, assert_never

from printsync.models.mcu import McuStatusFragment
from printsync.models.snapshot import ExtruderTemperature, McuInfo, Position, Snapshot
from printsync.models.status import PrinterStatusFragment
from printsync.state.updates import ConnectivityUpdate, McuUpdate, ResetUpdate, SnapshotUpdate, StatusUpdate

_MCU_FIELDS: tuple[str, ...] = tuple(name for name in McuInfo.model_fields if name != "state")


def format_duration(seconds: float) -> str:
    """Format a number of seconds as zero-padded ``HH:MM:SS``.

    Fractions are floored and negative values are shown as zero.
    Hours are not wrapped.
    """
    total = max(0, math.floor(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def progress_percent(print_duration: float, total_duration: float) -> float | None:
    """Percentage of the print done, ``None`` when the total is not positive."""
    if total_duration <= 0:
        return None
    return 100 * print_duration / total_duration


def _merge_status(snapshot: Snapshot, fragment: PrinterStatusFragment) -> dict[str, Any]:
    changes: dict[str, Any] = {}

    stats = fragment.print_stats
    if stats is not None:
        if stats.state is not None:
            changes["print_state"] = stats.state
        if stats.filename is not None:
            changes["filename"] = stats.filename
        if stats.filament_used is not None:
            changes["filament_used"] = stats.filament_used
        if stats.print_duration is not None and stats.total_duration is not None:
            percent = progress_percent(stats.print_duration, stats.total_duration)
            if percent is not None:
                changes["progress_percent"] = percent
                changes["elapsed_time"] = format_duration(stats.print_duration)
                changes["estimated_remaining"] = format_duration(stats.total_duration - stats.print_duration)

    toolhead = fragment.toolhead
    if toolhead is not None:
        if toolhead.position is not None:
            x, y, z, e = toolhead.position
            changes["position"] = Position.model_construct(x=x, y=y, z=z, e=e)
        if toolhead.homed_axes is not None:
            changes["homed_axes"] = toolhead.homed_axes

    extruder = fragment.extruder
    if extruder is not None:
        current = snapshot.extruder
        changes["extruder"] = ExtruderTemperature.model_construct(
            current=current.current if extruder.temperature is None else extruder.temperature,
            target=current.target if extruder.target is None else extruder.target,
            power=current.power if extruder.power is None else extruder.power,
        )

    return changes


def _merge_mcu(snapshot: Snapshot, fragment: McuStatusFragment) -> dict[str, Any]:
    carried = {name: getattr(fragment, name) for name in _MCU_FIELDS if getattr(fragment, name) is not None}
    if fragment.state is not None:
        carried["state"] = fragment.state
    if not carried:
        return {}
    return {"mcu": snapshot.mcu.model_copy(update=carried)}


def stamp_last_updated(previous: datetime | None, now: datetime) -> datetime:
    # Never move last_updated backwards, even if the wall clock does.
    if previous is not None and previous > now:
        return previous
    return now


def apply(snapshot: Snapshot, update: SnapshotUpdate, *, now: datetime) -> Snapshot:
    """Return ``snapshot`` with ``update`` folded in.

    Every accepted update refreshes ``last_updated``. Status and MCU
    fragments also refresh ``last_received``. A reset returns the initial
    snapshot, which has never been updated.
    """
    if isinstance(update, ResetUpdate):
        return Snapshot.initial()

    if isinstance(update, StatusUpdate):
        changes = _merge_status(snapshot, update.fragment)
        changes["last_received"] = stamp_last_updated(snapshot.last_received, now)
    elif isinstance(update, McuUpdate):
        changes = _merge_mcu(snapshot, update.fragment)
        changes["last_received"] = stamp_last_updated(snapshot.last_received, now)
    elif isinstance(update, ConnectivityUpdate):
        changes = {"connectivity": update.connected}
    else:
        assert_never(update)

    changes["last_updated"] = stamp_last_updated(snapshot.last_updated, now)
    return snapshot.model_copy(update=changes)
