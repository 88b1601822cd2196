"""Client configuration for printsync."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from printsync._constants import (
    DEFAULT_BASE_URL,
    DEFAULT_EMERGENCY_STOP_DELAY,
    DEFAULT_EMERGENCY_STOP_TIMEOUT,
    DEFAULT_HOME_DELAY,
    DEFAULT_HOME_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RESTART_DELAY,
    DEFAULT_RESTART_TIMEOUT,
    DEFAULT_STALE_AFTER,
)
from printsync.exceptions import PrinterConfigError
from printsync.models.command import CommandKind, ConfirmOptions

_POSITIVE_FIELDS = (
    "poll_interval",
    "request_timeout",
    "emergency_stop_timeout",
    "restart_timeout",
    "home_timeout",
    "stale_after",
)
_NON_NEGATIVE_FIELDS = (
    "emergency_stop_delay",
    "restart_delay",
    "home_delay",
)


@dataclasses.dataclass(frozen=True)
class PrinterConfig:
    """Client configuration.

    All durations are in seconds.

    Parameters
    ----------
    base_url : str
        Root URL of the printer control daemon.
    poll_interval : float
        Passive status poll cadence.
    request_timeout : float
        Total timeout applied to each HTTP request.
    emergency_stop_delay : float
        Pause between issuing an emergency stop and re-checking status.
    emergency_stop_timeout : float
        Upper bound for the whole emergency-stop confirmation loop.
    restart_delay : float
        Pause between firmware-restart status checks.
    restart_timeout : float
        Upper bound for the firmware-restart confirmation loop.
    home_delay : float
        Pause between homing status checks.
    home_timeout : float
        Upper bound for a homing confirmation loop.
    stale_after : float
        Age after which the current snapshot is reported as stale.
    """

    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    emergency_stop_delay: float = DEFAULT_EMERGENCY_STOP_DELAY
    emergency_stop_timeout: float = DEFAULT_EMERGENCY_STOP_TIMEOUT
    restart_delay: float = DEFAULT_RESTART_DELAY
    restart_timeout: float = DEFAULT_RESTART_TIMEOUT
    home_delay: float = DEFAULT_HOME_DELAY
    home_timeout: float = DEFAULT_HOME_TIMEOUT
    stale_after: float = DEFAULT_STALE_AFTER

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise PrinterConfigError("base_url must be non-empty")
        for name in (*_POSITIVE_FIELDS, *_NON_NEGATIVE_FIELDS):
            if not math.isfinite(getattr(self, name)):
                raise PrinterConfigError(f"{name} must be a finite number")
        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise PrinterConfigError(f"{name} must be positive")
        for name in _NON_NEGATIVE_FIELDS:
            if getattr(self, name) < 0:
                raise PrinterConfigError(f"{name} must not be negative")

    def confirm_options(self, kind: CommandKind) -> ConfirmOptions:
        """Confirmation loop options for a command kind.

        Emergency stop re-sends the command on every attempt. Firmware
        restart and homing are sent until one request is acknowledged and
        then only re-checked, since repeating them restarts the operation.
        """
        if kind is CommandKind.EMERGENCY_STOP:
            return ConfirmOptions(
                poll_delay=self.emergency_stop_delay,
                timeout=self.emergency_stop_timeout,
                resend=True,
            )
        if kind is CommandKind.RESTART_FIRMWARE:
            return ConfirmOptions(poll_delay=self.restart_delay, timeout=self.restart_timeout, resend=False)
        return ConfirmOptions(poll_delay=self.home_delay, timeout=self.home_timeout, resend=False)

    @classmethod
    def from_env(cls, **overrides: Any) -> PrinterConfig:
        """Create configuration from ``PRINTSYNC_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        PrinterConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_FLOAT_MAP = {
            "PRINTSYNC_POLL_INTERVAL": "poll_interval",
            "PRINTSYNC_REQUEST_TIMEOUT": "request_timeout",
            "PRINTSYNC_EMERGENCY_STOP_DELAY": "emergency_stop_delay",
            "PRINTSYNC_EMERGENCY_STOP_TIMEOUT": "emergency_stop_timeout",
            "PRINTSYNC_RESTART_DELAY": "restart_delay",
            "PRINTSYNC_RESTART_TIMEOUT": "restart_timeout",
            "PRINTSYNC_HOME_DELAY": "home_delay",
            "PRINTSYNC_HOME_TIMEOUT": "home_timeout",
            "PRINTSYNC_STALE_AFTER": "stale_after",
        }

        config_kwargs: dict[str, Any] = {}
        base_url = env.get("PRINTSYNC_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise PrinterConfigError(f"{env_key} must be a number, got {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
