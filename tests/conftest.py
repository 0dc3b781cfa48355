"""
Pytest fixtures for Holderscope tests. Solscan is faked with httpx.MockTransport.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

_ENV_VARS = (
    "SOLSCAN_API_MODE",
    "SOLSCAN_API_KEY",
    "VITE_SOLSCAN_PRO_API_KEY",
    "SOLSCAN_PRO_BASE_URL",
    "SOLSCAN_PUBLIC_BASE_URL",
    "SOLSCAN_PAGE_SIZE",
    "SOLSCAN_TIMEOUT_SEC",
    "SOLSCAN_MAX_TRADER_RECORDS",
    "SOLSCAN_MAX_INTERVAL_RECORDS",
    "SOLSCAN_DEFAULT_DECIMALS",
    "SOLSCAN_TOKEN_DECIMALS",
    "SOLSCAN_ASSUME_TIME_DESCENDING",
    "API_HOST",
    "API_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without Solscan settings from the developer's shell."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeSolscan:
    """
    In-memory Solscan serving slices of holder / transfer / transaction rows by offset.

    fail_at_offset makes every request at or beyond that offset answer fail_status.
    """

    def __init__(
        self,
        *,
        holders: list[dict[str, Any]] | None = None,
        transfers: list[dict[str, Any]] | None = None,
        transactions: list[dict[str, Any]] | None = None,
        fail_at_offset: int | None = None,
        fail_status: int = 500,
    ) -> None:
        self.holders = holders or []
        self.transfers = transfers or []
        self.transactions = transactions or []
        self.fail_at_offset = fail_at_offset
        self.fail_status = fail_status
        self.calls: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        params = request.url.params
        offset = int(params.get("offset", "0"))
        size = int(params.get("size") or params.get("limit") or "50")
        if self.fail_at_offset is not None and offset >= self.fail_at_offset:
            return httpx.Response(self.fail_status, json={"success": False, "errors": {"message": "boom"}})

        path = request.url.path
        if path.endswith("/token/holders"):
            return httpx.Response(
                200, json={"data": self.holders[offset : offset + size], "total": len(self.holders)}
            )
        if path.endswith("/token/transfer"):
            return httpx.Response(
                200, json={"data": self.transfers[offset : offset + size], "total": len(self.transfers)}
            )
        if path.endswith("/token/transactions"):
            return httpx.Response(200, json=self.transactions[offset : offset + size])
        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def offsets(self) -> list[int]:
        return [int(c.url.params.get("offset", "0")) for c in self.calls]


@pytest.fixture
def fake_solscan():
    """Factory: fake_solscan(holders=[...], transfers=[...]) -> FakeSolscan."""
    return FakeSolscan


@pytest.fixture
def api():
    """
    FastAPI TestClient wired to a FakeSolscan.

    Usage: client, fake = api(settings=Settings(...), holders=[...])
    Dependency overrides are cleared after the test.
    """
    from fastapi.testclient import TestClient

    from holderscope.api_server.routes import get_app_settings, get_client_factory
    from holderscope.api_server.server import app
    from holderscope.config import Settings
    from holderscope.solscan.client import build_client

    def _make(settings: Settings | None = None, **fake_kwargs: Any) -> tuple[TestClient, FakeSolscan]:
        fake = FakeSolscan(**fake_kwargs)
        resolved = settings or Settings(api_key="test-key", page_size=2)
        app.dependency_overrides[get_app_settings] = lambda: resolved
        app.dependency_overrides[get_client_factory] = lambda: (lambda s: build_client(s, transport=fake.transport))
        return TestClient(app), fake

    yield _make
    app.dependency_overrides.clear()
