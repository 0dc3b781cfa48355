"""
Response models for the wallet endpoints (and the CSV export, which writes the same rows).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from holderscope.aggregation.models import WalletRecord


class HolderRow(BaseModel):
    """GET /api/holders row: holder wallet and its token balance."""

    wallet: str = Field(..., description="Holder owner address (base58)")
    amount: float = Field(..., description="Balance in token units (uiAmount)")

    @classmethod
    def from_record(cls, record: WalletRecord) -> "HolderRow":
        return cls(wallet=record.wallet, amount=record.amount or 0.0)


class TraderRow(BaseModel):
    """GET /api/traders row. volume is a transaction count on the public API."""

    model_config = ConfigDict(populate_by_name=True)

    wallet: str = Field(..., description="Trader owner address (base58)")
    volume: int | float = Field(..., ge=0, description="Summed |changeAmount| / 10**decimals, or tx count")
    last_tx: int = Field(..., alias="lastTx", description="Unix timestamp of the latest transfer seen")

    @classmethod
    def from_record(cls, record: WalletRecord) -> "TraderRow":
        return cls(wallet=record.wallet, volume=record.volume or 0, last_tx=record.last_tx or 0)


class IntervalRow(BaseModel):
    """GET /api/interval row: wallet active in the window and its latest in-window activity."""

    model_config = ConfigDict(populate_by_name=True)

    wallet: str = Field(..., description="Active owner address (base58)")
    last_tx: int = Field(..., alias="lastTx", description="Latest blockTime inside [from, to]")

    @classmethod
    def from_record(cls, record: WalletRecord) -> "IntervalRow":
        return cls(wallet=record.wallet, last_tx=record.last_tx or 0)


ROW_MODELS: dict[str, type[HolderRow] | type[TraderRow] | type[IntervalRow]] = {
    "holders": HolderRow,
    "traders": TraderRow,
    "interval": IntervalRow,
}


def rows_as_json(mode: str, records: list[WalletRecord]) -> list[dict[str, Any]]:
    """Rows for mode as JSON-shaped dicts (camelCase lastTx)."""
    model = ROW_MODELS[mode]
    return [model.from_record(r).model_dump(by_alias=True) for r in records]
