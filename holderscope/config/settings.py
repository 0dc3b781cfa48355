"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the project .env file.
- Validate settings and provide defaults for optional ones.
- Expose a typed, immutable Settings object for the Solscan client,
  aggregation caps, API server and export tool.

Settings are re-read on every get_settings() call so a changed environment
(tests, reloads) takes effect without restarting the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from holderscope.config.env import (
    PRO_BASE_URL,
    PUBLIC_BASE_URL,
    env_bool,
    env_float,
    env_int,
    env_str,
    get_api_mode,
    get_solscan_api_key,
    load_holderscope_env,
    parse_token_decimals,
)
from holderscope.core.exceptions import ConfigurationError

DEFAULT_PAGE_SIZE = 50
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_DECIMALS = 9
# Records scanned before ranking traders; the public API is slower and capped lower
DEFAULT_MAX_TRADER_RECORDS_PRO = 1000
DEFAULT_MAX_TRADER_RECORDS_PUBLIC = 500
DEFAULT_MAX_INTERVAL_RECORDS = 1000


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Build with get_settings()."""

    api_mode: str = "pro"
    api_key: str | None = None
    pro_base_url: str = PRO_BASE_URL
    public_base_url: str = PUBLIC_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    max_trader_records: int = DEFAULT_MAX_TRADER_RECORDS_PRO
    max_interval_records: int = DEFAULT_MAX_INTERVAL_RECORDS
    default_decimals: int = DEFAULT_DECIMALS
    token_decimals: dict[str, int] = field(default_factory=dict)
    assume_time_descending: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    def decimals_for(self, token: str) -> int:
        """Decimals for a mint: per-token override, else the default."""
        return self.token_decimals.get(token, self.default_decimals)


def get_settings() -> Settings:
    """
    Return the current application settings.

    Raises:
        ConfigurationError: a variable is present but malformed.
    """
    load_holderscope_env()
    api_mode = get_api_mode()
    default_trader_cap = (
        DEFAULT_MAX_TRADER_RECORDS_PRO if api_mode == "pro" else DEFAULT_MAX_TRADER_RECORDS_PUBLIC
    )
    settings = Settings(
        api_mode=api_mode,
        api_key=get_solscan_api_key(),
        pro_base_url=env_str("SOLSCAN_PRO_BASE_URL", PRO_BASE_URL).rstrip("/"),
        public_base_url=env_str("SOLSCAN_PUBLIC_BASE_URL", PUBLIC_BASE_URL).rstrip("/"),
        page_size=env_int("SOLSCAN_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        timeout_sec=env_float("SOLSCAN_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
        max_trader_records=env_int("SOLSCAN_MAX_TRADER_RECORDS", default_trader_cap),
        max_interval_records=env_int("SOLSCAN_MAX_INTERVAL_RECORDS", DEFAULT_MAX_INTERVAL_RECORDS),
        default_decimals=env_int("SOLSCAN_DEFAULT_DECIMALS", DEFAULT_DECIMALS),
        token_decimals=parse_token_decimals(env_str("SOLSCAN_TOKEN_DECIMALS")),
        assume_time_descending=env_bool("SOLSCAN_ASSUME_TIME_DESCENDING", True),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", 8000),
    )
    if settings.page_size <= 0:
        raise ConfigurationError("SOLSCAN_PAGE_SIZE must be positive")
    if settings.timeout_sec <= 0:
        raise ConfigurationError("SOLSCAN_TIMEOUT_SEC must be positive")
    if settings.max_trader_records <= 0 or settings.max_interval_records <= 0:
        raise ConfigurationError("Scan caps must be positive")
    if settings.default_decimals < 0:
        raise ConfigurationError("SOLSCAN_DEFAULT_DECIMALS must not be negative")
    return settings
