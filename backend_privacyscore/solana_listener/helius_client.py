"""
Transaction source: one page of enhanced transactions from Helius.

GET {base}/v0/addresses/{wallet}/transactions?api-key=..&limit=..
returns parsed transactions newest-first. A single attempt per request:
no retry, no pagination, order returned unmodified.
"""

from __future__ import annotations

from typing import Any, Protocol

import requests

from backend_privacyscore.config.settings import MAX_TRANSACTION_PAGE_SIZE, Settings
from backend_privacyscore.core.exceptions import ConfigurationError, UpstreamFetchError
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.utils.wallet_utils import mask_wallet

logger = get_logger(__name__)

REQUEST_TIMEOUT = 30.0


class TransactionSource(Protocol):
    """Anything that returns raw transaction records for a wallet."""

    def fetch_transactions(self, wallet: str, limit: int = MAX_TRANSACTION_PAGE_SIZE) -> list[dict[str, Any]]:
        ...


class HeliusTransactionSource:
    """Helius enhanced-transactions API client (requests, bounded timeout)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.helius.xyz",
        *,
        timeout_sec: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HeliusTransactionSource":
        return cls(
            settings.helius_api_key,
            settings.helius_base_url,
            timeout_sec=settings.helius_timeout_sec,
        )

    def fetch_transactions(self, wallet: str, limit: int = MAX_TRANSACTION_PAGE_SIZE) -> list[dict[str, Any]]:
        """
        Fetch up to `limit` (capped at 100) parsed transactions for wallet.

        Raises ConfigurationError without an API key, UpstreamFetchError on
        transport errors, non-2xx responses or a body that is not a JSON list.
        """
        if not self._api_key:
            raise ConfigurationError("Helius API key not configured")
        effective_limit = max(1, min(int(limit), MAX_TRANSACTION_PAGE_SIZE))
        url = f"{self._base_url}/v0/addresses/{wallet}/transactions"
        params = {"api-key": self._api_key, "limit": effective_limit}
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("helius_request_error", wallet_id=mask_wallet(wallet), error=type(e).__name__)
            raise UpstreamFetchError("Transaction provider request failed") from e

        if not resp.ok:
            logger.error(
                "helius_http_error",
                wallet_id=mask_wallet(wallet),
                status_code=resp.status_code,
                body=resp.text[:200],
            )
            raise UpstreamFetchError(
                f"Helius API error: {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamFetchError("Helius API returned invalid JSON") from e
        if not isinstance(data, list):
            raise UpstreamFetchError("Helius API returned an unexpected payload")

        logger.info("helius_transactions_fetched", wallet_id=mask_wallet(wallet), tx_count=len(data))
        return data
