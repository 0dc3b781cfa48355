"""
Application-level exceptions.

Every failure surfaced to a caller is a HolderscopeError carrying an
ErrorKind and the HTTP status the API answers with. All of them are
terminal for the current request; nothing is retried or partially returned.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    CONFIGURATION = "configuration"


class HolderscopeError(Exception):
    """Base exception for Holderscope errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class ValidationError(HolderscopeError):
    """Missing or invalid request parameter. Raised before any upstream call."""

    kind = ErrorKind.VALIDATION
    status_code = 400


class UpstreamError(HolderscopeError):
    """Transport failure, non-2xx response or malformed row from Solscan."""

    kind = ErrorKind.UPSTREAM
    status_code = 500

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class ConfigurationError(HolderscopeError):
    """Missing credential or malformed setting."""

    kind = ErrorKind.CONFIGURATION
    status_code = 500
