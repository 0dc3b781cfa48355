"""
Environment variable loading and validation for Holderscope.

- SOLSCAN_API_MODE: pro | public (default: pro)
- SOLSCAN_API_KEY: Solscan Pro API key (VITE_SOLSCAN_PRO_API_KEY accepted for old .env files)
- SOLSCAN_TOKEN_DECIMALS: per-mint decimals overrides, "mint:decimals,mint:decimals"
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from holderscope.core.exceptions import ConfigurationError

# Project root: config is holderscope/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

PRO_BASE_URL = "https://pro-api.solscan.io/v2.0"
PUBLIC_BASE_URL = "https://public-api.solscan.io"

API_MODES = ("pro", "public")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def load_holderscope_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def get_api_mode() -> str:
    """
    Return SOLSCAN_API_MODE from env: pro | public.
    Default: pro.
    """
    raw = env_str("SOLSCAN_API_MODE", "pro").lower()
    if raw not in API_MODES:
        raise ConfigurationError(f"SOLSCAN_API_MODE must be one of {', '.join(API_MODES)}, got {raw!r}")
    return raw


def get_solscan_api_key() -> str | None:
    """Return the Pro API key, or None when unset."""
    return env_str("SOLSCAN_API_KEY") or env_str("VITE_SOLSCAN_PRO_API_KEY") or None


def parse_token_decimals(raw: str) -> dict[str, int]:
    """
    Parse "mint:decimals,mint:decimals" into a mapping.

    Blank entries are skipped; anything else malformed raises ConfigurationError.
    """
    out: dict[str, int] = {}
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        mint, sep, value = part.partition(":")
        mint = mint.strip()
        if not sep or not mint:
            raise ConfigurationError(f"SOLSCAN_TOKEN_DECIMALS entry {part!r} must look like mint:decimals")
        try:
            decimals = int(value.strip(), 10)
        except ValueError as e:
            raise ConfigurationError(f"SOLSCAN_TOKEN_DECIMALS entry {part!r} has non-integer decimals") from e
        if decimals < 0:
            raise ConfigurationError(f"SOLSCAN_TOKEN_DECIMALS entry {part!r} has negative decimals")
        out[mint] = decimals
    return out


def mask_api_key(key: str | None) -> str:
    """Mask an API key for logs: first 4 chars then ***."""
    if not key:
        return "<unset>"
    return key[:4] + "***"
