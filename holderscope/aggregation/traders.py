"""
Trader aggregation: rank wallets by transfer volume (or transaction count).

Volume normalizes each raw changeAmount by the mint's decimals. Decimals vary
per SPL mint, so callers pass them in (see Settings.decimals_for).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import partial

from holderscope.aggregation.models import TraderMetric, WalletRecord
from holderscope.aggregation.paging import fold_pages, iter_pages
from holderscope.holderscope_logging import get_logger
from holderscope.solscan.client import BaseSolscanClient
from holderscope.solscan.models import TransferPage

logger = get_logger(__name__)


@dataclass
class _TraderStats:
    value: float = 0.0
    last_tx: int = 0


class TraderAccumulator:
    """
    wallet -> (volume or count, latest blockTime).

    Scans every page it is given; the record cap lives in the page loop.
    Records without an owner (public rows with no signer) are skipped.
    """

    def __init__(self, limit: int, metric: TraderMetric = TraderMetric.VOLUME, decimals: int = 9) -> None:
        if decimals < 0:
            raise ValueError("decimals must not be negative")
        self.limit = limit
        self.metric = metric
        self.scale = 10**decimals
        self._stats: dict[str, _TraderStats] = {}
        self.scanned = 0

    def add_page(self, page: TransferPage) -> bool:
        for tx in page.records:
            self.scanned += 1
            if not tx.owner:
                continue
            stats = self._stats.setdefault(tx.owner, _TraderStats())
            if self.metric is TraderMetric.COUNT:
                stats.value += 1
            else:
                stats.value += abs(tx.change_amount) / self.scale
            if tx.block_time > stats.last_tx:
                stats.last_tx = tx.block_time
        return True

    def result(self) -> list[WalletRecord]:
        # sorted() is stable: ties keep first-seen order
        ranked = sorted(self._stats.items(), key=lambda item: item[1].value, reverse=True)
        out: list[WalletRecord] = []
        for wallet, stats in ranked[: self.limit]:
            value: float = int(stats.value) if self.metric is TraderMetric.COUNT else stats.value
            out.append(WalletRecord(wallet=wallet, volume=value, last_tx=stats.last_tx))
        return out


def aggregate_traders(
    pages: Iterable[TransferPage],
    *,
    limit: int,
    metric: TraderMetric = TraderMetric.VOLUME,
    decimals: int = 9,
) -> list[WalletRecord]:
    """Return the top `limit` wallets by accumulated metric, descending."""
    if limit <= 0:
        return []
    return fold_pages(pages, TraderAccumulator(limit, metric, decimals))


def fetch_traders(
    client: BaseSolscanClient,
    token: str,
    *,
    limit: int,
    decimals: int,
    page_size: int,
    max_records: int,
) -> list[WalletRecord]:
    """
    Scan up to max_records transfers for token and rank wallets.

    Uses volume when the client exposes amounts (Pro API) and transaction
    count otherwise (public API).
    """
    if limit <= 0:
        return []
    metric = TraderMetric.VOLUME if client.supports_volume else TraderMetric.COUNT
    pages = iter_pages(
        partial(client.fetch_transfers_page, token),
        page_size=page_size,
        max_records=max_records,
    )
    traders = aggregate_traders(pages, limit=limit, metric=metric, decimals=decimals)
    logger.info(
        "traders_aggregated",
        token=token,
        limit=limit,
        metric=metric.value,
        decimals=decimals,
        rows=len(traders),
    )
    return traders
