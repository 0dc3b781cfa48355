"""
Aggregation — fold Solscan pages into per-wallet holder, trader and activity rows.
"""

from holderscope.aggregation.holders import aggregate_holders, fetch_holders  # noqa: F401
from holderscope.aggregation.interval import aggregate_interval, fetch_active_wallets  # noqa: F401
from holderscope.aggregation.models import TraderMetric, WalletRecord  # noqa: F401
from holderscope.aggregation.paging import fold_pages, iter_pages  # noqa: F401
from holderscope.aggregation.traders import aggregate_traders, fetch_traders  # noqa: F401

__all__ = [
    "TraderMetric",
    "WalletRecord",
    "aggregate_holders",
    "aggregate_interval",
    "aggregate_traders",
    "fetch_active_wallets",
    "fetch_holders",
    "fetch_traders",
    "fold_pages",
    "iter_pages",
]
