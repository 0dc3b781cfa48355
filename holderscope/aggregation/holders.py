"""
Holder aggregation: token holders above a minimum amount, in upstream order.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial

from holderscope.aggregation.models import WalletRecord
from holderscope.aggregation.paging import fold_pages, iter_pages
from holderscope.holderscope_logging import get_logger
from holderscope.solscan.client import BaseSolscanClient
from holderscope.solscan.models import HolderPage

logger = get_logger(__name__)


class HolderAccumulator:
    """Collects holders with uiAmount >= min_amount until limit rows are held."""

    def __init__(self, limit: int, min_amount: float) -> None:
        self.limit = limit
        self.min_amount = min_amount
        self._rows: list[WalletRecord] = []

    def add_page(self, page: HolderPage) -> bool:
        for holder in page.records:
            if holder.ui_amount < self.min_amount:
                continue
            self._rows.append(WalletRecord(wallet=holder.owner, amount=holder.ui_amount))
        return len(self._rows) < self.limit

    def result(self) -> list[WalletRecord]:
        return self._rows[: self.limit]


def aggregate_holders(
    pages: Iterable[HolderPage],
    *,
    limit: int,
    min_amount: float,
) -> list[WalletRecord]:
    """Return at most `limit` holders with amount >= min_amount; no re-sorting."""
    if limit <= 0:
        return []
    return fold_pages(pages, HolderAccumulator(limit, min_amount))


def fetch_holders(
    client: BaseSolscanClient,
    token: str,
    *,
    limit: int,
    min_amount: float,
    page_size: int,
) -> list[WalletRecord]:
    """Page through the client's holder feed for token and aggregate."""
    if limit <= 0:
        return []
    pages = iter_pages(partial(client.fetch_holders_page, token), page_size=page_size)
    holders = aggregate_holders(pages, limit=limit, min_amount=min_amount)
    logger.info("holders_aggregated", token=token, limit=limit, min_amount=min_amount, rows=len(holders))
    return holders
