"""MCU health fragment (``GET /mcu-status``)."""

from __future__ import annotations

from typing import Any

from printsync.models._base import PrinterBaseModel, PrinterEnum


class McuState(PrinterEnum):
    """Firmware host state reported by the daemon."""

    READY = "ready"
    STARTUP = "startup"
    SHUTDOWN = "shutdown"
    ERROR = "error"
    PRINTING = "printing"
    PAUSED = "paused"
    STANDBY = "standby"
    UNKNOWN = "unknown"


class McuStatusFragment(PrinterBaseModel):
    """Parsed ``result`` object of the MCU status endpoint.

    Only ``state`` is interpreted (by command confirmation predicates);
    the identification fields are passed through to the snapshot.
    """

    state: McuState | None = None
    state_message: str | None = None
    hostname: str | None = None
    klipper_path: str | None = None
    python_path: str | None = None
    process_id: int | None = None
    user_id: int | None = None
    group_id: int | None = None
    log_file: str | None = None
    config_file: str | None = None
    software_version: str | None = None
    cpu_info: str | None = None

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> McuStatusFragment:
        """Parse the envelope ``data`` member (``{"result": {...}}``)."""
        result = data.get("result")
        if not isinstance(result, dict):
            raise ValueError("mcu status payload has no result object")
        return cls.model_validate(result)
