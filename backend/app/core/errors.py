# core/errors.py
from typing import Optional


class CaptureError(Exception):
    """Base error for the popup-capture flow. Carries an HTTP status and a machine-readable reason."""

    status_code = 500
    reason = "unknown_error"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.upstream_status = upstream_status

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.url:
            base += f" | URL: {self.url}"
        if self.upstream_status is not None:
            base += f" | Status: {self.upstream_status}"
        return base


class CaptureValidationError(CaptureError):
    status_code = 400
    reason = "validation_error"


class CustomerLookupError(CaptureError):
    reason = "lookup_failed"


class CustomerWriteError(CaptureError):
    reason = "write_failed"


class PlatformNotConfiguredError(CaptureError):
    reason = "platform_unconfigured"


class SinkError(CaptureError):
    """Log-append or notification failure. Never fails the request."""

    reason = "sink_failed"
