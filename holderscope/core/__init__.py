"""
Core — error taxonomy shared by the client, aggregation, API server and CLI.
"""

from holderscope.core.exceptions import (  # noqa: F401
    ConfigurationError,
    ErrorKind,
    HolderscopeError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "HolderscopeError",
    "UpstreamError",
    "ValidationError",
]
