"""Wallet validation and display utilities."""

from solders.pubkey import Pubkey


def is_valid_wallet(w: str) -> bool:
    """Return True if w is a valid Solana address (wallet or mint Pubkey)."""
    try:
        Pubkey.from_string(w.strip())
        return True
    except Exception:
        return False


def format_wallet_address(address: str, chars: int = 4) -> str:
    """Shorten an address to `head...tail`; strings of at most 2*chars are returned as-is."""
    if len(address) <= chars * 2:
        return address
    return f"{address[:chars]}...{address[-chars:]}"
