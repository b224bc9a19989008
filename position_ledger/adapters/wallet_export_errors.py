"""Project-native typed exceptions for online wallet export failures."""

from __future__ import annotations


class WalletExportError(Exception):
    """Base exception for adapter-level wallet export failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class WalletExportConnectionError(WalletExportError, ConnectionError):
    """Transport-level failure or non-success HTTP status from the wallet service."""


class WalletExportTimeoutError(WalletExportError, TimeoutError):
    """Request to the wallet service exceeded its timeout."""


class WalletExportResponseError(WalletExportError, ValueError):
    """Wallet service answered with a payload that breaks the expected contract."""


class WalletTickerNotFoundError(WalletExportError, LookupError):
    """Ticker is unknown to the wallet service as both stock and real-estate fund.

    Attributes:
        ticker: Ticker that could not be resolved.
    """

    def __init__(self, ticker: str):
        super().__init__(f"Ticker {ticker} not found")
        self.ticker = ticker
