"""Print/motion/temperature status fragment (``GET /status``).

Every field is optional: ``None`` means the daemon did not carry it and
the merger leaves the corresponding snapshot field untouched. Numbers are
taken as reported, without range checks.
"""

from __future__ import annotations

from typing import Any

from printsync.models._base import PrinterBaseModel, PrinterEnum


class PrintState(PrinterEnum):
    """``print_stats.state`` values."""

    READY = "ready"
    PRINTING = "printing"
    PAUSED = "paused"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"
    STANDBY = "standby"
    UNKNOWN = "unknown"


class PrintStats(PrinterBaseModel):
    state: PrintState | None = None
    filename: str | None = None
    total_duration: float | None = None
    print_duration: float | None = None
    filament_used: float | None = None


class Toolhead(PrinterBaseModel):
    homed_axes: str | None = None
    position: tuple[float, float, float, float] | None = None
    print_time: float | None = None
    estimated_print_time: float | None = None


class Extruder(PrinterBaseModel):
    temperature: float | None = None
    target: float | None = None
    power: float | None = None


class PrinterStatusFragment(PrinterBaseModel):
    """Parsed ``result.status`` object of the status endpoint."""

    print_stats: PrintStats | None = None
    toolhead: Toolhead | None = None
    extruder: Extruder | None = None

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> PrinterStatusFragment:
        """Parse the envelope ``data`` member (``{"result": {"status": {...}}}``)."""
        result = data.get("result")
        status = result.get("status") if isinstance(result, dict) else None
        if not isinstance(status, dict):
            raise ValueError("status payload has no result.status object")
        return cls.model_validate(status)

    @property
    def has_durations(self) -> bool:
        """Whether both raw duration counters are present."""
        stats = self.print_stats
        return stats is not None and stats.print_duration is not None and stats.total_duration is not None
