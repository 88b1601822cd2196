"""Command kinds, acknowledgements and confirmation outcomes."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

from printsync._constants import API_PREFIX
from printsync.models._base import PrinterBaseModel
from printsync.models.snapshot import Snapshot


class CommandKind(enum.StrEnum):
    """Fire-and-confirm commands; the value is the endpoint suffix."""

    EMERGENCY_STOP = "emergency-stop"
    RESTART_FIRMWARE = "restart-firmware"
    HOME_Z = "home-z"
    HOME_XY = "home-xy"

    @property
    def endpoint(self) -> str:
        return f"{API_PREFIX}/{self.value}"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[CommandKind, str] = {
    CommandKind.EMERGENCY_STOP: "Emergency stop",
    CommandKind.RESTART_FIRMWARE: "Firmware restart",
    CommandKind.HOME_Z: "Home Z",
    CommandKind.HOME_XY: "Home XY",
}


class CommandAck(PrinterBaseModel):
    """``{success, message}`` body returned by command endpoints.

    It never carries the resulting device state.
    """

    success: bool
    message: str = ""
    timestamp: str | None = None


class ConfirmationState(enum.StrEnum):
    ATTEMPTING = "attempting"
    CONFIRMING = "confirming"
    TERMINAL = "terminal"
    TIMED_OUT = "timed_out"
    REJECTED = "rejected"


class ConfirmOptions(BaseModel):
    """Options for one confirmation loop (seconds)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    poll_delay: float = Field(ge=0)
    timeout: float = Field(gt=0)
    resend: bool = True


class CommandOutcome(BaseModel):
    """Result of a confirmed command as shown to the operator."""

    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    state: ConfirmationState
    success: bool
    message: str
    attempts: int = 0
    polls: int = 0
    elapsed: float = 0.0
    snapshot: Snapshot

    @property
    def confirmed(self) -> bool:
        return self.state is ConfirmationState.TERMINAL
