"""
Aggregation output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TraderMetric(str, Enum):
    """What a trader's `volume` column accumulates."""

    VOLUME = "volume"  # sum of |changeAmount| / 10**decimals
    COUNT = "count"  # number of transactions


@dataclass(frozen=True)
class WalletRecord:
    """One result row: a wallet plus whichever metrics the aggregation produced."""

    wallet: str
    amount: float | None = None
    volume: float | None = None
    last_tx: int | None = None
