"""
Data models for Solscan responses.

RawHolder and RawTransfer mirror one row of the holder and transfer feeds.
HolderPage / TransferPage are one paginated response; total is None when
the endpoint does not report it (public API).

Numeric fields are parsed leniently ("1700000000.0" is fine) but a missing or
non-numeric blockTime, changeAmount or uiAmount raises ValueError; the client
turns that into an UpstreamError rather than counting the row as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar

R = TypeVar("R")


def _number(value: Any, field: str) -> Decimal:
    """Parse an upstream numeric field (int, float or numeric string). Raises ValueError."""
    if value is None or value == "":
        raise ValueError(f"{field} is missing")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"{field} is not a number: {value!r}") from e
    if not number.is_finite():
        raise ValueError(f"{field} is not finite: {value!r}")
    return number


def _to_float(value: Any, field: str) -> float:
    return float(_number(value, field))


def _to_int(value: Any, field: str) -> int:
    return int(_number(value, field))


@dataclass(frozen=True)
class RawHolder:
    """One holder row from /token/holders."""

    owner: str
    ui_amount: float
    amount: int = 0
    rank: int | None = None
    address: str | None = None

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "RawHolder":
        """Build from one holders item. Pro v2 uses value/decimals when uiAmount is absent."""
        ui_amount = item.get("uiAmount")
        if ui_amount is None and item.get("amount") is not None and item.get("decimals") is not None:
            ui_amount = _to_float(item["amount"], "amount") / (10 ** _to_int(item["decimals"], "decimals"))
        amount = item.get("amount")
        rank = item.get("rank")
        return cls(
            owner=str(item.get("owner") or ""),
            ui_amount=_to_float(ui_amount, "uiAmount"),
            amount=_to_int(amount, "amount") if amount not in (None, "") else 0,
            rank=_to_int(rank, "rank") if rank not in (None, "") else None,
            address=item.get("address"),
        )


@dataclass(frozen=True)
class RawTransfer:
    """
    One transfer row from /token/transfer.

    change_amount is signed raw token units. Public-API transaction rows carry
    no amount; they are normalized with owner = first signer and change_amount 0.
    """

    owner: str
    block_time: int
    change_amount: int = 0
    signature: str | None = None

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "RawTransfer":
        """Build from one Pro transfer item (owner/from_address, blockTime/block_time)."""
        owner = item.get("owner") or item.get("from_address") or ""
        block_time = item.get("blockTime", item.get("block_time"))
        change_amount = item.get("changeAmount", item.get("amount"))
        signature = item.get("signature") or item.get("trans_id")
        if isinstance(signature, list):
            signature = signature[0] if signature else None
        return cls(
            owner=str(owner),
            block_time=_to_int(block_time, "blockTime"),
            change_amount=_to_int(change_amount, "changeAmount"),
            signature=signature,
        )

    @classmethod
    def from_public_transaction(cls, item: dict[str, Any]) -> "RawTransfer":
        """Build from one public /token/transactions item; wallet is the first signer."""
        signers = item.get("signer") or []
        owner = signers[0] if isinstance(signers, list) and signers else ""
        signature = item.get("txHash") or item.get("signature")
        if isinstance(signature, list):
            signature = signature[0] if signature else None
        return cls(
            owner=str(owner or ""),
            block_time=_to_int(item.get("blockTime"), "blockTime"),
            change_amount=0,
            signature=signature,
        )


@dataclass(frozen=True)
class Page(Generic[R]):
    """One upstream page: ordered records plus the reported total (if any)."""

    records: tuple[R, ...]
    total: int | None = None

    def __len__(self) -> int:
        return len(self.records)


HolderPage = Page[RawHolder]
TransferPage = Page[RawTransfer]
