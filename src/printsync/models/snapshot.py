"""The merged device view."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict

from printsync._constants import ZERO_DURATION
from printsync.models.mcu import McuState
from printsync.models.status import PrintState


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    e: float = 0.0


class ExtruderTemperature(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: float = 0.0
    target: float = 0.0
    power: float = 0.0


class McuInfo(BaseModel):
    """MCU state plus identification fields (opaque to the core)."""

    model_config = ConfigDict(frozen=True)

    state: McuState = McuState.READY
    state_message: str = ""
    hostname: str = ""
    klipper_path: str = ""
    python_path: str = ""
    process_id: int = 0
    user_id: int = 0
    group_id: int = 0
    log_file: str = ""
    config_file: str = ""
    software_version: str = ""
    cpu_info: str = ""


class Snapshot(BaseModel):
    """Single, immutable view of the printer.

    New snapshots are derived with ``model_copy(update=...)`` by the
    merger; values copied that way are not re-validated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    print_state: PrintState = PrintState.UNKNOWN
    filename: str = ""
    filament_used: float = 0.0
    progress_percent: float = 0.0
    elapsed_time: str = ZERO_DURATION
    estimated_remaining: str = ZERO_DURATION
    position: Position = Position()
    homed_axes: str = ""
    extruder: ExtruderTemperature = ExtruderTemperature()
    mcu: McuInfo = McuInfo()
    connectivity: bool = False
    last_updated: datetime | None = None
    #: When a status or MCU fragment last arrived; connectivity flips do not count.
    last_received: datetime | None = None

    @classmethod
    def initial(cls) -> Snapshot:
        """The state a fresh session starts from."""
        return cls()

    def age(self, now: datetime) -> timedelta | None:
        """Time since the last accepted mutation, ``None`` if never updated."""
        if self.last_updated is None:
            return None
        return now - self.last_updated

    def data_age(self, now: datetime) -> timedelta | None:
        """Time since device data last arrived, ``None`` if it never did."""
        if self.last_received is None:
            return None
        return now - self.last_received
