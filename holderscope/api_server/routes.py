"""
API route definitions — holders, traders and interval lookups.

Each route validates its query strings (400 before any upstream call),
builds a Solscan client for the request, runs one aggregation and returns
the rows as a JSON array. Errors are HolderscopeError subclasses rendered by
the server's exception handler as {"error": message}.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query

from holderscope.aggregation import (
    fetch_active_wallets,
    fetch_holders,
    fetch_traders,
)
from holderscope.api_server.schemas import HolderRow, IntervalRow, TraderRow
from holderscope.config import Settings, get_settings
from holderscope.core.exceptions import ValidationError
from holderscope.holderscope_logging import bind_token
from holderscope.solscan.client import BaseSolscanClient, build_client
from holderscope.utils.wallet_utils import is_valid_wallet

router = APIRouter(tags=["wallets"])

DEFAULT_HOLDERS_LIMIT = 100
DEFAULT_TRADERS_LIMIT = 50

ClientFactory = Callable[[Settings], BaseSolscanClient]


def get_app_settings() -> Settings:
    """Dependency: settings re-read from env for each request."""
    return get_settings()


def get_client_factory() -> ClientFactory:
    """Dependency: how to build a Solscan client. Tests override this."""
    return build_client


# -----------------------------------------------------------------------------
# Query parsing
# -----------------------------------------------------------------------------

def require_token(token: str | None) -> str:
    token = (token or "").strip()
    if not token:
        raise ValidationError("Token address is required.")
    if not is_valid_wallet(token):
        raise ValidationError("Token address is not a valid Solana address.")
    return token


def parse_int(name: str, raw: str | None, default: int | None = None) -> int:
    """Base-10 integer from a query string; default when absent."""
    raw = (raw or "").strip()
    if not raw:
        if default is None:
            raise ValidationError(f"{name} is required.")
        return default
    try:
        return int(raw, 10)
    except ValueError as e:
        raise ValidationError(f"{name} must be a base-10 integer.") from e


def parse_float(name: str, raw: str | None, default: float) -> float:
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be a number.") from e
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number.")
    return value


def parse_limit(raw: str | None, default: int) -> int:
    limit = parse_int("limit", raw, default)
    if limit < 1:
        raise ValidationError("limit must be at least 1.")
    return limit


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.get("/holders", response_model=list[HolderRow])
def get_holders(
    token: str | None = None,
    limit: str | None = None,
    min_amount: str | None = Query(None, alias="minAmount"),
    settings: Settings = Depends(get_app_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> list[HolderRow]:
    """Holders with amount >= minAmount, first `limit` in Solscan rank order."""
    token = require_token(token)
    limit_value = parse_limit(limit, DEFAULT_HOLDERS_LIMIT)
    min_amount_value = parse_float("minAmount", min_amount, 0.0)

    log = bind_token(token, "holders")
    log.info("holders_requested", limit=limit_value, min_amount=min_amount_value)
    with client_factory(settings) as client:
        rows = fetch_holders(
            client,
            token,
            limit=limit_value,
            min_amount=min_amount_value,
            page_size=settings.page_size,
        )
    return [HolderRow.from_record(r) for r in rows]


@router.get("/traders", response_model=list[TraderRow])
def get_traders(
    token: str | None = None,
    limit: str | None = None,
    decimals: str | None = None,
    settings: Settings = Depends(get_app_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> list[TraderRow]:
    """Top `limit` wallets by transfer volume (transaction count on the public API)."""
    token = require_token(token)
    limit_value = parse_limit(limit, DEFAULT_TRADERS_LIMIT)
    decimals_value = parse_int("decimals", decimals, settings.decimals_for(token))
    if decimals_value < 0:
        raise ValidationError("decimals must not be negative.")

    log = bind_token(token, "traders")
    log.info("traders_requested", limit=limit_value, decimals=decimals_value)
    with client_factory(settings) as client:
        rows = fetch_traders(
            client,
            token,
            limit=limit_value,
            decimals=decimals_value,
            page_size=settings.page_size,
            max_records=settings.max_trader_records,
        )
    return [TraderRow.from_record(r) for r in rows]


@router.get("/interval", response_model=list[IntervalRow])
def get_interval(
    token: str | None = None,
    start: str | None = Query(None, alias="from"),
    end: str | None = Query(None, alias="to"),
    settings: Settings = Depends(get_app_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> list[IntervalRow]:
    """Wallets with transfers between `from` and `to` (unix seconds, inclusive)."""
    token = require_token(token)
    if not (start or "").strip() or not (end or "").strip():
        raise ValidationError("A time range (from, to) is required.")
    start_value = parse_int("from", start)
    end_value = parse_int("to", end)
    if start_value > end_value:
        raise ValidationError("from must not be after to.")

    log = bind_token(token, "interval")
    log.info("interval_requested", start=start_value, end=end_value)
    with client_factory(settings) as client:
        rows = fetch_active_wallets(
            client,
            token,
            start=start_value,
            end=end_value,
            page_size=settings.page_size,
            max_records=settings.max_interval_records,
            assume_descending=settings.assume_time_descending,
        )
    return [IntervalRow.from_record(r) for r in rows]
