"""Typed exceptions for roundup.

Every error carries a machine-readable ``code`` and an HTTP-like ``status``
so callers can tell client input errors (400), oversized payloads (413) and
internal failures (500) apart without parsing messages.

    RoundupError (base)
    |
    +-- InvalidAmountError
    +-- OutOfRangeError
    +-- InvalidTimestampError
    +-- InvalidRequestError
    +-- PayloadTooLargeError
    +-- UnsupportedInstrumentError
"""

from typing import Any


class RoundupError(Exception):
    """Base exception for all roundup errors."""

    code: str = "ROUNDUP_ERROR"
    status: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        """Error body in the shape the request boundary returns."""
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidAmountError(RoundupError):
    """Raised when a money value is not a finite decimal."""

    code = "INVALID_AMOUNT"
    status = 400


class OutOfRangeError(RoundupError):
    """Raised when a money value falls outside its allowed range."""

    code = "OUT_OF_RANGE"
    status = 400

    def __init__(self, field_name: str):
        super().__init__(f"{field_name} out of allowed range")
        self.field_name = field_name


class InvalidTimestampError(RoundupError):
    """Raised when a timestamp does not match the fixed calendar format."""

    code = "INVALID_TIMESTAMP"
    status = 400


class InvalidRequestError(RoundupError):
    """Raised for a malformed request field, with a path-qualified message."""

    code = "INVALID_REQUEST"
    status = 400


class PayloadTooLargeError(RoundupError):
    """Raised when a record list exceeds the configured cap."""

    code = "PAYLOAD_TOO_LARGE"
    status = 413


class UnsupportedInstrumentError(RoundupError):
    """Raised when returns are requested for an unknown instrument.

    Callers only ever pass known instruments, so this is a programming error.
    """

    code = "UNSUPPORTED_INSTRUMENT"
    status = 500
