"""
Interval aggregation: wallets active between two unix timestamps (inclusive).

With assume_descending (the Solscan transfer feed is newest first), the first
record older than `start` ends the scan. Without it, every page up to the
record cap is scanned and out-of-window records are skipped.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial

from holderscope.aggregation.models import WalletRecord
from holderscope.aggregation.paging import fold_pages, iter_pages
from holderscope.holderscope_logging import get_logger
from holderscope.solscan.client import BaseSolscanClient
from holderscope.solscan.models import TransferPage

logger = get_logger(__name__)


class IntervalAccumulator:
    """wallet -> latest blockTime inside [start, end]; dict order is first-seen order."""

    def __init__(self, start: int, end: int, *, assume_descending: bool = True) -> None:
        if start > end:
            raise ValueError("start must not be after end")
        self.start = start
        self.end = end
        self.assume_descending = assume_descending
        self._last_tx: dict[str, int] = {}
        self.out_of_order = 0
        self._previous: int | None = None

    def add_page(self, page: TransferPage) -> bool:
        for tx in page.records:
            if self._previous is not None and tx.block_time > self._previous:
                self.out_of_order += 1
            self._previous = tx.block_time

            if tx.block_time < self.start:
                if self.assume_descending:
                    return False
                continue
            if tx.block_time > self.end or not tx.owner:
                continue
            current = self._last_tx.get(tx.owner)
            if current is None or tx.block_time > current:
                self._last_tx[tx.owner] = tx.block_time
        return True

    def result(self) -> list[WalletRecord]:
        return [WalletRecord(wallet=w, last_tx=ts) for w, ts in self._last_tx.items()]


def aggregate_interval(
    pages: Iterable[TransferPage],
    *,
    start: int,
    end: int,
    assume_descending: bool = True,
) -> list[WalletRecord]:
    """Return every wallet with activity in [start, end] and its latest in-window blockTime."""
    return fold_pages(pages, IntervalAccumulator(start, end, assume_descending=assume_descending))


def fetch_active_wallets(
    client: BaseSolscanClient,
    token: str,
    *,
    start: int,
    end: int,
    page_size: int,
    max_records: int,
    assume_descending: bool = True,
) -> list[WalletRecord]:
    """Scan token transfers (up to max_records) for wallets active in [start, end]."""
    accumulator = IntervalAccumulator(start, end, assume_descending=assume_descending)
    pages = iter_pages(
        partial(client.fetch_transfers_page, token),
        page_size=page_size,
        max_records=max_records,
    )
    wallets = fold_pages(pages, accumulator)
    if accumulator.out_of_order:
        # Descending order is assumed, not guaranteed; surface violations
        logger.warning(
            "interval_feed_out_of_order",
            token=token,
            out_of_order=accumulator.out_of_order,
            assume_descending=assume_descending,
        )
    logger.info("interval_aggregated", token=token, start=start, end=end, rows=len(wallets))
    return wallets
