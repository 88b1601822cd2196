"""Tagged snapshot updates.

Every mutation of the snapshot is expressed as one of these variants and
routed through :func:`printsync.state.merge.apply`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from printsync.models.mcu import McuStatusFragment
from printsync.models.status import PrinterStatusFragment


class StatusUpdate(BaseModel):
    """Print/motion/temperature fragment from ``/status``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["status"] = "status"
    fragment: PrinterStatusFragment


class McuUpdate(BaseModel):
    """MCU health fragment from ``/mcu-status``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["mcu"] = "mcu"
    fragment: McuStatusFragment


class ConnectivityUpdate(BaseModel):
    """Outcome of the most recent poll attempt."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["connectivity"] = "connectivity"
    connected: bool


class ResetUpdate(BaseModel):
    """Return to the initial session state."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reset"] = "reset"


SnapshotUpdate = StatusUpdate | McuUpdate | ConnectivityUpdate | ResetUpdate
