"""Timestamp parsing for the export tool."""

from __future__ import annotations

from datetime import datetime, timezone


def parse_timestamp(value: str) -> int:
    """
    Parse unix seconds ("1700000000") or an ISO-8601 date/datetime
    ("2024-01-31", "2024-01-31T12:00:00+02:00") into unix seconds.

    Naive dates and datetimes are taken as UTC.

    Raises:
        ValueError: value is neither.
    """
    raw = value.strip()
    if not raw:
        raise ValueError("timestamp must be non-empty")
    if raw.lstrip("-").isdigit():
        return int(raw, 10)
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())
