"""
Tests for trader aggregation: per-wallet sums/counts, latest blockTime, ranking.
"""

from __future__ import annotations

from collections import defaultdict

import pytest

from holderscope.aggregation.models import TraderMetric, WalletRecord
from holderscope.aggregation.traders import aggregate_traders, fetch_traders
from holderscope.solscan.client import SolscanClient, SolscanPublicClient
from holderscope.solscan.models import Page, RawTransfer

MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _tx(owner, change_amount, block_time):
    return RawTransfer(owner=owner, block_time=block_time, change_amount=change_amount)


def test_traders_example_volume_and_last_tx():
    """2e9 + 1e9 raw units at 9 decimals -> volume 3, lastTx 200."""
    pages = [Page(records=(_tx("A", 2_000_000_000, 100), _tx("A", 1_000_000_000, 200)), total=2)]
    result = aggregate_traders(pages, limit=10, decimals=9)
    assert result == [WalletRecord(wallet="A", volume=3.0, last_tx=200)]
    assert result[0] == WalletRecord(wallet="A", volume=3, last_tx=200)


def test_traders_sum_abs_amounts_and_max_block_time():
    """Each wallet's volume is the sum of |amount|; lastTx is its max blockTime."""
    stream = [
        _tx("A", -500, 10),
        _tx("B", 300, 50),
        _tx("A", 250, 5),
        _tx("C", -100, 70),
        _tx("B", -300, 20),
    ]
    pages = [Page(records=tuple(stream[:2])), Page(records=tuple(stream[2:4])), Page(records=tuple(stream[4:]))]
    result = aggregate_traders(pages, limit=10, decimals=2)

    expected_volume = defaultdict(float)
    expected_last = defaultdict(int)
    for tx in stream:
        expected_volume[tx.owner] += abs(tx.change_amount) / 100
        expected_last[tx.owner] = max(expected_last[tx.owner], tx.block_time)

    assert {r.wallet for r in result} == set(expected_volume)
    for r in result:
        assert r.volume == pytest.approx(expected_volume[r.wallet])
        assert r.last_tx == expected_last[r.wallet]
    volumes = [r.volume for r in result]
    assert volumes == sorted(volumes, reverse=True)


def test_traders_truncate_to_limit():
    pages = [Page(records=tuple(_tx(f"W{i}", i * 10, i) for i in range(6)))]
    result = aggregate_traders(pages, limit=3, decimals=0)
    assert [r.wallet for r in result] == ["W5", "W4", "W3"]


def test_traders_ties_keep_first_seen_order():
    pages = [Page(records=(_tx("X", 5, 1), _tx("Y", 5, 2), _tx("Z", 9, 3)))]
    result = aggregate_traders(pages, limit=10, decimals=0)
    assert [r.wallet for r in result] == ["Z", "X", "Y"]


def test_traders_count_metric():
    """COUNT ranks by number of transactions and reports it as volume."""
    pages = [Page(records=(_tx("A", 0, 1), _tx("B", 0, 2), _tx("A", 0, 3), _tx("", 0, 4)))]
    result = aggregate_traders(pages, limit=10, metric=TraderMetric.COUNT)
    assert result == [
        WalletRecord(wallet="A", volume=2, last_tx=3),
        WalletRecord(wallet="B", volume=1, last_tx=2),
    ]


def test_traders_empty_first_page():
    assert aggregate_traders([Page(records=())], limit=5) == []


def test_traders_negative_decimals_rejected():
    with pytest.raises(ValueError, match="decimals"):
        aggregate_traders([Page(records=())], limit=5, decimals=-1)


def test_fetch_traders_respects_record_cap(fake_solscan):
    """Scanning stops at max_records even though more transfers exist."""
    transfers = [
        {"owner": f"W{i % 3}", "changeAmount": 10**6, "blockTime": 1000 - i} for i in range(20)
    ]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        result = fetch_traders(client, MINT, limit=10, decimals=6, page_size=4, max_records=8)
    assert fake.offsets == [0, 4]
    assert sum(r.volume for r in result) == pytest.approx(8.0)
    for call in fake.calls:
        assert call.url.params["type"] == "transfer"


def test_fetch_traders_public_counts_by_first_signer(fake_solscan):
    """Public API has no amounts: rank by transaction count keyed on signer[0]."""
    transactions = [
        {"signer": ["A", "fee-payer"], "blockTime": 30, "txHash": "s1"},
        {"signer": ["B"], "blockTime": 20, "txHash": "s2"},
        {"signer": ["A"], "blockTime": 10, "txHash": "s3"},
        {"signer": [], "blockTime": 5, "txHash": "s4"},
    ]
    fake = fake_solscan(transactions=transactions)
    with SolscanPublicClient(transport=fake.transport) as client:
        result = fetch_traders(client, MINT, limit=10, decimals=9, page_size=50, max_records=500)
    assert result == [
        WalletRecord(wallet="A", volume=2, last_tx=30),
        WalletRecord(wallet="B", volume=1, last_tx=20),
    ]
    assert fake.offsets == [0]


def test_fetch_traders_idempotent(fake_solscan):
    """Same upstream pages -> identical ranking, ties included."""
    transfers = [{"owner": f"W{i % 5}", "changeAmount": 10 ** (i % 3), "blockTime": 500 - i} for i in range(23)]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        first = fetch_traders(client, MINT, limit=5, decimals=0, page_size=4, max_records=1000)
        second = fetch_traders(client, MINT, limit=5, decimals=0, page_size=4, max_records=1000)
    assert first == second
    assert len(first) == 5
