"""Typed interfaces for ledger-layer computations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from position_ledger.domain import Transaction, TransactionAction


@dataclass(frozen=True)
class PositionSnapshotRow:
    """Final per-ticker position presented to reporters.

    Attributes:
        ticker: Ticker code.
        shares_held: Shares held after the last transaction.
        average_price: Full-precision moving-average cost, or None for closed positions.
        is_open: Whether shares_held is greater than zero.
    """

    ticker: str
    shares_held: int
    average_price: Decimal | None
    is_open: bool


@dataclass(frozen=True)
class PositionTransition:
    """State change produced by applying one transaction.

    Attributes:
        date: Transaction timestamp.
        ticker: Ticker code.
        action: Applied action.
        shares: Transaction share count.
        price: Transaction unit price.
        shares_before: Shares held before the transaction.
        shares_after: Shares held after the transaction.
        average_before: Average cost before the transaction.
        average_after: Average cost after the transaction.
        realized_gain: Sell proceeds minus cost basis at average_before; None for buys.
    """

    date: datetime
    ticker: str
    action: TransactionAction
    shares: int
    price: Decimal
    shares_before: int
    shares_after: int
    average_before: Decimal
    average_after: Decimal
    realized_gain: Decimal | None = None


@dataclass(frozen=True)
class LedgerAnomaly:
    """Transaction skipped by a fold run instead of failing it.

    Attributes:
        code: Failure code of the skipped transaction.
        message: Human-readable reason.
        transaction: Skipped transaction.
    """

    code: str
    message: str
    transaction: Transaction


class LedgerPort(Protocol):
    """Port definition for position folding ledgers."""

    def ledger_policy_name(self) -> str:
        """Return policy label for the active cost-basis method.

        Returns:
            str: Ledger policy identifier.
        """

    def ledger_apply_transaction(self, transaction: Transaction) -> PositionTransition:
        """Apply one transaction in input order.

        Args:
            transaction: Next transaction of the ordered stream.

        Returns:
            PositionTransition: State change for the transaction's ticker.

        Raises:
            InsufficientPositionError: Raised when a sell exceeds held shares.
            InvalidQuantityError: Raised when share count is not positive.
        """

    def ledger_snapshot(self, include_closed: bool = False) -> tuple[PositionSnapshotRow, ...]:
        """Return final positions ordered by ticker.

        Args:
            include_closed: Whether zero-share tickers are included.

        Returns:
            tuple[PositionSnapshotRow, ...]: Deterministically ordered rows.
        """
