"""Project-native typed exceptions for position ledger failures."""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for transaction-level ledger failures.

    Attributes:
        error_code: Stable machine-readable failure code.
    """

    error_code = "LEDGER_ERROR"


class InsufficientPositionError(LedgerError, ValueError):
    """Sell requested more shares than currently held, including never-bought tickers.

    Attributes:
        ticker: Ticker of the rejected sell.
        requested_shares: Shares the sell asked for.
        held_shares: Shares held when the sell was evaluated.
    """

    error_code = "INSUFFICIENT_POSITION"

    def __init__(self, ticker: str, requested_shares: int, held_shares: int):
        super().__init__(
            f"cannot sell {requested_shares} shares of {ticker}: only {held_shares} held"
        )
        self.ticker = ticker
        self.requested_shares = requested_shares
        self.held_shares = held_shares


class InvalidQuantityError(LedgerError, ValueError):
    """Transaction share count is zero, negative, or not an integer."""

    error_code = "INVALID_QUANTITY"


class InvalidPriceError(LedgerError, ValueError):
    """Transaction unit price is negative or not a decimal."""

    error_code = "INVALID_PRICE"
