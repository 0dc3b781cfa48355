"""
Structured logging for Holderscope.

JSON logs with timestamp, event_type and request context (token, endpoint).
Use get_logger() in every module.
"""

from holderscope.holderscope_logging.logger import bind_token, get_logger

__all__ = ["bind_token", "get_logger"]
