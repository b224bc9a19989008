"""Investidor10 online wallet adapter for registering applied trades."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Final

import httpx

from position_ledger.domain import TransactionAction
from position_ledger.ledger import PositionTransition
from position_ledger.reporting import reporting_round_currency

from .interfaces import WalletAssetType, WalletExportPort, WalletTicker
from .wallet_export_errors import (
    WalletExportConnectionError,
    WalletExportError,
    WalletExportResponseError,
    WalletExportTimeoutError,
    WalletTickerNotFoundError,
)

logger = logging.getLogger(__name__)


class Investidor10WalletAdapter(WalletExportPort):
    """Adapter implementation for Investidor10 ticker search and trade registration."""

    _USER_AGENT: Final[str] = "position-ledger/1.0 (Python/httpx)"
    _TICKER_SEARCH_PATHS: Final[tuple[tuple[str, WalletAssetType], ...]] = (
        ("/api/buscar/ticker/", WalletAssetType.TICKER),
        ("/api/buscar/fii/", WalletAssetType.FII),
    )
    _TRADE_TYPES: Final[dict[TransactionAction, str]] = {
        TransactionAction.BUY: "BUY",
        TransactionAction.SELL: "SELL",
    }

    def __init__(
        self,
        session: str,
        wallet_id: int,
        base_url: str = "https://investidor10.com.br",
        request_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize wallet adapter.

        Args:
            session: Laravel session cookie value of a logged-in account.
            wallet_id: Target wallet identifier.
            base_url: Base URL of the wallet service.
            request_timeout_seconds: HTTP request timeout in seconds.
            transport: Optional httpx transport override.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_session = session.strip()
        normalized_base_url = base_url.strip().rstrip("/")

        if not normalized_session:
            raise ValueError("session must not be blank")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if wallet_id < 1:
            raise ValueError("wallet_id must be >= 1")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._session = normalized_session
        self._wallet_id = wallet_id
        self._base_url = normalized_base_url
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport
        self._resolved_tickers: dict[str, WalletTicker] = {}

    def adapter_source_name(self) -> str:
        """Return stable adapter target label."""

        return "investidor10_wallet"

    def adapter_resolve_ticker(self, ticker: str) -> WalletTicker:
        """Resolve ticker as a stock first, then as a real-estate fund.

        Any failure of the stock search falls through to the fund search.
        Resolved tickers are cached for the adapter lifetime.

        Args:
            ticker: Ticker code.

        Returns:
            WalletTicker: Upstream identity.

        Raises:
            WalletTickerNotFoundError: Raised when neither search yields a match.
            WalletExportError: Raised when the fund search fails at transport level.
        """

        normalized_ticker = ticker.strip().upper()
        if not normalized_ticker:
            raise ValueError("ticker must not be blank")

        cached_ticker = self._resolved_tickers.get(normalized_ticker)
        if cached_ticker is not None:
            return cached_ticker

        stock_path, stock_type = self._TICKER_SEARCH_PATHS[0]
        try:
            wallet_ticker = self._adapter_search_ticker(normalized_ticker, stock_path, stock_type)
        except WalletExportError as error:
            logger.debug("Stock search failed for %s, trying fund search: %s", normalized_ticker, error)
            wallet_ticker = None

        if wallet_ticker is None:
            fund_path, fund_type = self._TICKER_SEARCH_PATHS[1]
            wallet_ticker = self._adapter_search_ticker(normalized_ticker, fund_path, fund_type)

        if wallet_ticker is None:
            raise WalletTickerNotFoundError(normalized_ticker)

        self._resolved_tickers[normalized_ticker] = wallet_ticker
        return wallet_ticker

    def adapter_build_trade_payload(self, transition: PositionTransition, wallet_ticker: WalletTicker) -> dict[str, Any]:
        """Build the trade registration body for one applied transaction.

        Args:
            transition: Applied ledger transition.
            wallet_ticker: Resolved upstream ticker identity.

        Returns:
            dict[str, Any]: JSON-serializable trade payload.
        """

        return {
            "ticker_type": wallet_ticker.asset_type.value,
            "user_wallet_id": self._wallet_id,
            "type": self._TRADE_TYPES[transition.action],
            "source": "Manual",
            "_token": "",
            "date": transition.date.strftime("%d/%m/%Y"),
            "qty": transition.shares,
            "ticker": wallet_ticker.ticker_id,
            "price": adapter_format_wallet_price(transition.price),
            "cost": 0.0,
        }

    def adapter_add_trade(self, transition: PositionTransition) -> None:
        """Resolve the ticker and register one trade in the configured wallet.

        Raises:
            WalletTickerNotFoundError: Raised when the ticker cannot be resolved.
            WalletExportConnectionError: Raised for transport or HTTP status failures.
            WalletExportTimeoutError: Raised when the request times out.
        """

        wallet_ticker = self.adapter_resolve_ticker(transition.ticker)
        trade_payload = self.adapter_build_trade_payload(transition, wallet_ticker)
        self._adapter_http_request(
            method="POST",
            path=f"/api/minhas-carteiras/lancamentos/{self._wallet_id}/",
            json_body=trade_payload,
        )

    def _adapter_search_ticker(
        self,
        ticker: str,
        search_path: str,
        asset_type: WalletAssetType,
    ) -> WalletTicker | None:
        """Run one ticker search and return the first hit, or None when empty."""

        response = self._adapter_http_request(
            method="GET",
            path=search_path,
            query_parameters={"_type": "query", "q": ticker},
        )
        try:
            search_results = response.json()
        except ValueError as error:
            raise WalletExportResponseError(f"ticker search returned non-JSON payload for {ticker}") from error

        if not isinstance(search_results, list):
            raise WalletExportResponseError(f"ticker search returned unexpected payload for {ticker}")
        if not search_results:
            return None

        first_result = search_results[0]
        if not isinstance(first_result, dict) or not isinstance(first_result.get("id"), int):
            raise WalletExportResponseError(f"ticker search result missing id for {ticker}")
        return WalletTicker(
            ticker_id=first_result["id"],
            name=str(first_result.get("name", "")),
            asset_type=asset_type,
        )

    def _adapter_http_request(
        self,
        method: str,
        path: str,
        query_parameters: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Execute one HTTP request and return the successful response.

        Raises:
            WalletExportTimeoutError: Raised when the request times out.
            WalletExportConnectionError: Raised for transport failures and HTTP status >= 400.
        """

        try:
            with httpx.Client(
                base_url=self._base_url,
                headers=self._adapter_build_headers(),
                timeout=self._request_timeout_seconds,
                transport=self._transport,
            ) as client:
                if method == "GET":
                    response = client.get(path, params=query_parameters)
                else:
                    response = client.post(path, json=json_body)
        except httpx.TimeoutException as error:
            raise WalletExportTimeoutError("Wallet transport request timed out") from error
        except httpx.HTTPError as error:
            raise WalletExportConnectionError("Wallet transport request failed") from error

        if response.status_code >= 400:
            raise WalletExportConnectionError(
                f"Wallet upstream returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _adapter_build_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._USER_AGENT,
            "Content-Type": "application/json",
            "Cookie": f"laravel_session={self._session}",
        }


def adapter_format_wallet_price(price: Decimal) -> str:
    """Format a unit price the way the wallet form expects, e.g. `28,20000000`."""

    rounded_price = reporting_round_currency(price, decimal_places=2)
    return f"{str(rounded_price).replace('.', ',')}000000"


__all__ = ["Investidor10WalletAdapter", "adapter_format_wallet_price"]
