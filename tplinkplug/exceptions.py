"""Exceptions for the TP-Link smart plug library."""

from __future__ import annotations


class TPLinkError(Exception):
    """Base exception for all TP-Link smart plug errors."""


class TPLinkConnectionError(TPLinkError):
    """Raised when a request/response exchange with the device fails."""


class TPLinkConnectFailedError(TPLinkConnectionError):
    """Raised when the TCP connection cannot be opened."""


class TPLinkShortHeaderError(TPLinkConnectionError):
    """Raised when the 4-byte length header cannot be read."""


class TPLinkShortBodyError(TPLinkConnectionError):
    """Raised when the response body ends before its announced length."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Could not read correct length - expected: {expected} received: {received}"
        )
        self.expected = expected
        self.received = received


class TPLinkDataError(TPLinkError):
    """Raised when a device response is not valid JSON."""


class TPLinkDeviceRejectedError(TPLinkError):
    """Raised when the device answers a command with a nonzero error code."""

    def __init__(self, err_code: object) -> None:
        super().__init__(f"Device rejected command with error code {err_code!r}")
        self.err_code = err_code
