"""printsync - Async state synchronization for a 3D-printer control daemon."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("printsync")
except PackageNotFoundError:
    __version__ = "0+local"
from printsync.client import PrinterClient
from printsync.config import PrinterConfig
from printsync.confirm import ConfirmedCommand, axes_homed, emergency_stop_confirmed, firmware_restarted
from printsync.exceptions import (
    PrinterApiError,
    PrinterCommandRejectedError,
    PrinterConfigError,
    PrinterError,
    PrinterPayloadError,
    PrinterTransportError,
)
from printsync.gateway import CommandGateway
from printsync.models import (
    CommandKind,
    CommandOutcome,
    ConfirmationState,
    ConfirmOptions,
    McuState,
    PrintState,
    Snapshot,
)
from printsync.poller import Poller, PollerState, PollHandle, PollResult
from printsync.state.store import SnapshotStore

__all__ = [
    "__version__",
    "CommandGateway",
    "CommandKind",
    "CommandOutcome",
    "ConfirmOptions",
    "ConfirmationState",
    "ConfirmedCommand",
    "McuState",
    "PollHandle",
    "PollResult",
    "Poller",
    "PollerState",
    "PrintState",
    "PrinterApiError",
    "PrinterClient",
    "PrinterCommandRejectedError",
    "PrinterConfig",
    "PrinterConfigError",
    "PrinterError",
    "PrinterPayloadError",
    "PrinterTransportError",
    "Snapshot",
    "SnapshotStore",
    "axes_homed",
    "emergency_stop_confirmed",
    "firmware_restarted",
]
