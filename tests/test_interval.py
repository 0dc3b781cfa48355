"""
Tests for interval aggregation: window membership, latest in-window activity,
and the descending-time short-circuit.
"""

from __future__ import annotations

import pytest

from holderscope.aggregation.interval import IntervalAccumulator, aggregate_interval, fetch_active_wallets
from holderscope.aggregation.models import WalletRecord
from holderscope.solscan.client import SolscanClient
from holderscope.solscan.models import Page, RawTransfer

MINT = "So11111111111111111111111111111111111111112"


def _tx(owner, block_time):
    return RawTransfer(owner=owner, block_time=block_time, change_amount=1)


def test_interval_example():
    """from=100 to=150 with B at 120 and 90 -> B, lastTx 120."""
    pages = [Page(records=(_tx("B", 120), _tx("B", 90)))]
    result = aggregate_interval(pages, start=100, end=150)
    assert result == [WalletRecord(wallet="B", last_tx=120)]


def test_interval_bounds_are_inclusive():
    pages = [Page(records=(_tx("late", 151), _tx("end", 150), _tx("start", 100), _tx("early", 99)))]
    result = aggregate_interval(pages, start=100, end=150)
    assert result == [WalletRecord(wallet="end", last_tx=150), WalletRecord(wallet="start", last_tx=100)]


def test_interval_membership_and_latest_in_window_time():
    """Wallet present iff it has an in-window record; lastTx is the max in-window blockTime."""
    stream = [_tx("A", 300), _tx("B", 250), _tx("A", 240), _tx("C", 230), _tx("B", 210), _tx("D", 150)]
    pages = [Page(records=tuple(stream[:3])), Page(records=tuple(stream[3:]))]
    start, end = 200, 245
    result = {r.wallet: r.last_tx for r in aggregate_interval(pages, start=start, end=end)}

    expected = {}
    for tx in stream:
        if start <= tx.block_time <= end:
            expected[tx.owner] = max(expected.get(tx.owner, 0), tx.block_time)
    assert result == expected == {"A": 240, "C": 230, "B": 210}


def test_interval_short_circuit_stops_paging(fake_solscan):
    """The first record older than `from` ends the scan; later pages are never fetched."""
    transfers = [{"owner": f"W{i}", "blockTime": 1000 - i * 10, "changeAmount": 1} for i in range(20)]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        result = fetch_active_wallets(client, MINT, start=965, end=990, page_size=3, max_records=1000)
    assert [r.wallet for r in result] == ["W1", "W2", "W3"]
    assert fake.offsets == [0, 3]


def test_interval_without_descending_assumption_scans_everything():
    """assume_descending=False skips old records instead of stopping."""
    pages = [Page(records=(_tx("A", 50), _tx("B", 120))), Page(records=(_tx("C", 130),))]
    stopped = aggregate_interval(pages, start=100, end=150, assume_descending=True)
    scanned = aggregate_interval(pages, start=100, end=150, assume_descending=False)
    assert stopped == []
    assert [r.wallet for r in scanned] == ["B", "C"]


class _RecordingLogger:
    def __init__(self):
        self.events = []

    def info(self, event, **kw):
        self.events.append(("info", event, kw))

    def warning(self, event, **kw):
        self.events.append(("warning", event, kw))


def test_interval_out_of_order_feed_is_counted(fake_solscan, monkeypatch):
    """A record newer than its predecessor is counted and reported as a warning."""
    import holderscope.aggregation.interval as interval_module

    recorder = _RecordingLogger()
    monkeypatch.setattr(interval_module, "logger", recorder)
    transfers = [
        {"owner": "A", "blockTime": 120, "changeAmount": 1},
        {"owner": "B", "blockTime": 140, "changeAmount": 1},
        {"owner": "C", "blockTime": 110, "changeAmount": 1},
    ]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        result = fetch_active_wallets(client, MINT, start=100, end=150, page_size=50, max_records=1000)

    assert {r.wallet for r in result} == {"A", "B", "C"}
    warnings = [e for e in recorder.events if e[0] == "warning"]
    assert warnings == [
        ("warning", "interval_feed_out_of_order", {"token": MINT, "out_of_order": 1, "assume_descending": True})
    ]


def test_interval_accumulator_counts_out_of_order_across_pages():
    accumulator = IntervalAccumulator(0, 1000)
    accumulator.add_page(Page(records=(_tx("A", 500), _tx("B", 400))))
    accumulator.add_page(Page(records=(_tx("C", 450), _tx("D", 300), _tx("E", 310))))
    assert accumulator.out_of_order == 2


def test_interval_in_order_feed_logs_no_warning(fake_solscan, monkeypatch):
    import holderscope.aggregation.interval as interval_module

    recorder = _RecordingLogger()
    monkeypatch.setattr(interval_module, "logger", recorder)
    transfers = [{"owner": "A", "blockTime": 140, "changeAmount": 1}, {"owner": "B", "blockTime": 120, "changeAmount": 1}]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        fetch_active_wallets(client, MINT, start=100, end=150, page_size=50, max_records=1000)
    assert all(level != "warning" for level, _, _ in recorder.events)


def test_fetch_active_wallets_idempotent(fake_solscan):
    """Same upstream pages -> identical output."""
    transfers = [{"owner": f"W{i % 4}", "blockTime": 1000 - i * 5, "changeAmount": 1} for i in range(30)]
    fake = fake_solscan(transfers=transfers)
    with SolscanClient("key", transport=fake.transport) as client:
        first = fetch_active_wallets(client, MINT, start=900, end=990, page_size=7, max_records=1000)
        second = fetch_active_wallets(client, MINT, start=900, end=990, page_size=7, max_records=1000)
    assert first == second
    assert [r.wallet for r in first] == ["W2", "W3", "W0", "W1"]


def test_interval_empty_first_page():
    assert aggregate_interval([Page(records=())], start=0, end=10) == []


def test_interval_rejects_inverted_window():
    with pytest.raises(ValueError, match="start"):
        aggregate_interval([], start=10, end=5)
