"""
structlog setup for Holderscope.

Every line is one JSON object on stderr (stdout stays free for CSV export)
keyed by event_type, with level, ISO timestamp and the request context bound
through contextvars. LOG_FORMAT=console switches to structlog's dev renderer.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _log_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def configure_logging(fmt: str | None = None) -> None:
    """(Re)configure structlog from LOG_LEVEL / LOG_FORMAT."""
    fmt = (fmt or os.getenv("LOG_FORMAT", "json")).strip().lower()
    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.EventRenamer("event_type"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger: logger.info("solscan_page_fetched", token=mint, offset=50, records=50)
    renders {"event_type": "solscan_page_fetched", "logger": name, ...}.
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_token(token: str, endpoint: str) -> structlog.BoundLogger:
    """Request-scoped logger for one endpoint call on one token mint."""
    return get_logger("holderscope.request").bind(token=token, endpoint=endpoint)
