"""Custom exception hierarchy for printsync."""

from __future__ import annotations


class PrinterError(Exception):
    """Base exception for all printsync errors."""


class PrinterConfigError(PrinterError):
    """Invalid or missing configuration."""


class PrinterTransportError(PrinterError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class PrinterPayloadError(PrinterError):
    """Response body does not have the expected envelope or status shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class PrinterApiError(PrinterError):
    """The daemon answered with ``success: false``."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class PrinterCommandRejectedError(PrinterApiError):
    """A command endpoint definitively refused the command.

    Unlike transport failures this is not retried by the confirmation
    loop: re-sending a command the device has rejected will not change
    the answer.
    """
