"""Typed models for daemon payloads and the merged snapshot."""

from printsync.models._base import PrinterBaseModel, PrinterEnum
from printsync.models.command import (
    CommandAck,
    CommandKind,
    CommandOutcome,
    ConfirmationState,
    ConfirmOptions,
)
from printsync.models.mcu import McuState, McuStatusFragment
from printsync.models.snapshot import ExtruderTemperature, McuInfo, Position, Snapshot
from printsync.models.status import Extruder, PrinterStatusFragment, PrintState, PrintStats, Toolhead

__all__ = [
    "CommandAck",
    "CommandKind",
    "CommandOutcome",
    "ConfirmOptions",
    "ConfirmationState",
    "Extruder",
    "ExtruderTemperature",
    "McuInfo",
    "McuState",
    "McuStatusFragment",
    "Position",
    "PrintState",
    "PrintStats",
    "PrinterBaseModel",
    "PrinterEnum",
    "PrinterStatusFragment",
    "Snapshot",
    "Toolhead",
]
