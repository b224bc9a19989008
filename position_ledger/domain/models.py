"""Typed domain models shared across runtime layers.

Transactions are produced by the normalizer and consumed, in order, by the
position ledger. They are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TransactionAction(str, Enum):
    """Closed set of trade actions understood by the ledger."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    """One normalized stock transaction.

    Attributes:
        date: Offset-aware UTC trade timestamp, used only for ordering.
        ticker: Upper-cased, whitespace-stripped ticker code.
        action: Buy or sell.
        shares: Positive share count.
        price: Non-negative unit price.
    """

    date: datetime
    ticker: str
    action: TransactionAction
    shares: int
    price: Decimal


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str
