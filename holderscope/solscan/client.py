"""
Solscan HTTP client — paged holder and transfer lookups.

Responsibilities:
- Issue one GET per page against the Pro API (header `token: <api key>`) or the
  keyless public API, and normalize the body into a Page of RawHolder/RawTransfer.
- Map every transport failure, non-2xx status, malformed body or malformed row to UpstreamError
  with a generic message; log the details (status, body) for operators.
- No retries: a failed page aborts the caller's whole aggregation.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from holderscope.config.env import mask_api_key
from holderscope.config.settings import Settings
from holderscope.core.exceptions import ConfigurationError, UpstreamError
from holderscope.holderscope_logging import get_logger
from holderscope.solscan.models import HolderPage, Page, RawHolder, RawTransfer, TransferPage

logger = get_logger(__name__)

R = TypeVar("R")

HOLDERS_FAILURE = "Failed to fetch holder data from Solscan."
TRANSFERS_FAILURE = "Failed to fetch transfer data from Solscan."
TRANSACTIONS_FAILURE = "Failed to fetch transaction data from Solscan."

# Max characters of an error body kept in logs
_LOG_BODY_CHARS = 500


class BaseSolscanClient:
    """
    Shared GET/JSON/error plumbing for the Pro and public clients.

    Owns an httpx.Client unless one is injected. Use as a context manager or
    call close() when done.
    """

    supports_volume: bool = False
    mode: str = ""

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout_sec: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url.strip():
            raise ConfigurationError("Solscan base URL must be non-empty")
        self._base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self._base_url,
            headers=headers or {},
            timeout=httpx.Timeout(timeout_sec),
            transport=transport,
        )

    def __enter__(self) -> "BaseSolscanClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _get_json(self, path: str, params: dict[str, Any], failure_message: str) -> Any:
        """GET path with params and return the decoded JSON body, or raise UpstreamError."""
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "solscan_request_failed",
                path=path,
                params=params,
                error_class=type(e).__name__,
                error=str(e),
            )
            raise UpstreamError(failure_message) from e

        if not response.is_success:
            logger.error(
                "solscan_bad_status",
                path=path,
                params=params,
                status_code=response.status_code,
                body=response.text[:_LOG_BODY_CHARS],
            )
            raise UpstreamError(failure_message, upstream_status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(
                "solscan_invalid_json",
                path=path,
                status_code=response.status_code,
                body=response.text[:_LOG_BODY_CHARS],
            )
            raise UpstreamError(failure_message, upstream_status=response.status_code) from e

    def _build_records(
        self,
        items: list[Any],
        build: Callable[[dict[str, Any]], R],
        path: str,
        failure_message: str,
    ) -> tuple[R, ...]:
        """Map dict items through build; a row with a missing or garbled number fails the page."""
        try:
            return tuple(build(i) for i in items if isinstance(i, dict))
        except ValueError as e:
            logger.error("solscan_malformed_record", path=path, error=str(e))
            raise UpstreamError(failure_message) from e

    def fetch_holders_page(self, token: str, offset: int, size: int) -> HolderPage:
        raise NotImplementedError

    def fetch_transfers_page(self, token: str, offset: int, size: int) -> TransferPage:
        raise NotImplementedError


def _unwrap_items(body: Any, failure_message: str, path: str) -> tuple[list[Any], int | None]:
    """
    Return (items, total) from a Solscan body.

    Accepts {"data": [...], "total": N}, {"success": true, "data": {"items": [...], "total": N}}
    and a bare list. A body with success=false or an unknown shape raises UpstreamError.
    """
    if isinstance(body, list):
        return body, None
    if not isinstance(body, dict):
        logger.error("solscan_unexpected_shape", path=path, body_type=type(body).__name__)
        raise UpstreamError(failure_message)
    if body.get("success") is False:
        logger.error("solscan_unsuccessful_response", path=path, errors=body.get("errors"))
        raise UpstreamError(failure_message)

    data = body.get("data")
    total = body.get("total")
    if isinstance(data, dict):
        total = data.get("total", total)
        data = data.get("items", [])
    if data is None:
        data = []
    if not isinstance(data, list):
        logger.error("solscan_unexpected_shape", path=path, data_type=type(data).__name__)
        raise UpstreamError(failure_message)
    try:
        total_int = int(total) if total is not None else None
    except (TypeError, ValueError):
        total_int = None
    return data, total_int


class SolscanClient(BaseSolscanClient):
    """
    Solscan Pro API client (v2.0).

    Example:
        >>> with SolscanClient(api_key) as client:
        ...     page = client.fetch_holders_page(mint, offset=0, size=50)
    """

    supports_volume = True
    mode = "pro"

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://pro-api.solscan.io/v2.0",
        timeout_sec: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not (api_key or "").strip():
            raise ConfigurationError("Solscan API key is not configured.")
        super().__init__(
            base_url,
            headers={"token": api_key.strip()},
            timeout_sec=timeout_sec,
            transport=transport,
        )
        logger.info("solscan_client_initialized", mode=self.mode, base_url=self._base_url, api_key=mask_api_key(api_key))

    def fetch_holders_page(self, token: str, offset: int, size: int) -> HolderPage:
        params = {"token": token, "offset": offset, "size": size}
        body = self._get_json("/token/holders", params, HOLDERS_FAILURE)
        items, total = _unwrap_items(body, HOLDERS_FAILURE, "/token/holders")
        records = self._build_records(items, RawHolder.from_api_item, "/token/holders", HOLDERS_FAILURE)
        logger.debug("solscan_page_fetched", path="/token/holders", token=token, offset=offset, records=len(records), total=total)
        return Page(records=records, total=total)

    def fetch_transfers_page(self, token: str, offset: int, size: int) -> TransferPage:
        params = {"token": token, "offset": offset, "size": size, "type": "transfer"}
        body = self._get_json("/token/transfer", params, TRANSFERS_FAILURE)
        items, total = _unwrap_items(body, TRANSFERS_FAILURE, "/token/transfer")
        records = self._build_records(items, RawTransfer.from_api_item, "/token/transfer", TRANSFERS_FAILURE)
        logger.debug("solscan_page_fetched", path="/token/transfer", token=token, offset=offset, records=len(records), total=total)
        return Page(records=records, total=total)


class SolscanPublicClient(BaseSolscanClient):
    """
    Keyless Solscan public API client.

    Transactions carry no amounts, so traders are ranked by transaction count
    (supports_volume is False) and wallets are keyed by the first signer.
    """

    supports_volume = False
    mode = "public"

    def __init__(
        self,
        *,
        base_url: str = "https://public-api.solscan.io",
        timeout_sec: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, timeout_sec=timeout_sec, transport=transport)
        logger.info("solscan_client_initialized", mode=self.mode, base_url=self._base_url)

    def fetch_holders_page(self, token: str, offset: int, size: int) -> HolderPage:
        params = {"tokenAddress": token, "offset": offset, "limit": size}
        body = self._get_json("/token/holders", params, HOLDERS_FAILURE)
        items, _total = _unwrap_items(body, HOLDERS_FAILURE, "/token/holders")
        records = self._build_records(items, RawHolder.from_api_item, "/token/holders", HOLDERS_FAILURE)
        logger.debug("solscan_page_fetched", path="/token/holders", token=token, offset=offset, records=len(records))
        # Public totals are not reliable; callers stop on a short page instead
        return Page(records=records, total=None)

    def fetch_transfers_page(self, token: str, offset: int, size: int) -> TransferPage:
        params = {"tokenAddress": token, "offset": offset, "limit": size}
        body = self._get_json("/token/transactions", params, TRANSACTIONS_FAILURE)
        items, _total = _unwrap_items(body, TRANSACTIONS_FAILURE, "/token/transactions")
        records = self._build_records(
            items, RawTransfer.from_public_transaction, "/token/transactions", TRANSACTIONS_FAILURE
        )
        logger.debug("solscan_page_fetched", path="/token/transactions", token=token, offset=offset, records=len(records))
        return Page(records=records, total=None)


def build_client(settings: Settings, transport: httpx.BaseTransport | None = None) -> BaseSolscanClient:
    """Return the client matching settings.api_mode. Raises ConfigurationError without a Pro key."""
    if settings.api_mode == "public":
        return SolscanPublicClient(
            base_url=settings.public_base_url,
            timeout_sec=settings.timeout_sec,
            transport=transport,
        )
    return SolscanClient(
        settings.api_key,
        base_url=settings.pro_base_url,
        timeout_sec=settings.timeout_sec,
        transport=transport,
    )
