"""Moving-average cost-basis ledger computation primitives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Context, Decimal
from typing import Iterable

from position_ledger.domain import Transaction, TransactionAction

from .errors import InsufficientPositionError, InvalidPriceError, InvalidQuantityError
from .interfaces import LedgerAnomaly, LedgerPort, PositionSnapshotRow, PositionTransition

logger = logging.getLogger(__name__)

OVERSELL_POLICY_ABORT = "abort"
OVERSELL_POLICY_SKIP = "skip"

# Averages keep full precision; rounding happens only at presentation time.
_LEDGER_DECIMAL_CONTEXT = Context(prec=34, rounding=ROUND_HALF_EVEN)
_ZERO = Decimal("0")


@dataclass
class PositionState:
    """Mutable running position for one ticker.

    Attributes:
        shares_held: Shares currently held, never negative.
        average_price: Moving-average acquisition cost. Retained unchanged
            after a sell closes the position and overwritten by the next buy.
    """

    shares_held: int = 0
    average_price: Decimal = _ZERO


class PositionLedger(LedgerPort):
    """Per-ticker moving-average position ledger for one run."""

    _POLICY_NAME = "moving_average"

    def __init__(self) -> None:
        self._positions: dict[str, PositionState] = {}

    def ledger_policy_name(self) -> str:
        """Return stable cost-basis policy label."""

        return self._POLICY_NAME

    def ledger_position(self, ticker: str) -> PositionState | None:
        """Return live state for one ticker, or None when never touched.

        Args:
            ticker: Ticker code.

        Returns:
            PositionState | None: Copy of the ticker state.
        """

        state = self._positions.get(ticker.strip().upper())
        if state is None:
            return None
        return PositionState(shares_held=state.shares_held, average_price=state.average_price)

    def ledger_apply_transaction(self, transaction: Transaction) -> PositionTransition:
        """Apply one transaction to its ticker position.

        Validation happens before any mutation, so a rejected transaction
        leaves the ledger unchanged.

        Args:
            transaction: Next transaction of the date-ordered stream.

        Returns:
            PositionTransition: Before/after state for the transaction's ticker.

        Raises:
            InvalidQuantityError: Raised when shares is not a positive int.
            InvalidPriceError: Raised when price is not a non-negative Decimal.
            InsufficientPositionError: Raised when a sell exceeds held shares.
            ValueError: Raised for blank tickers or unknown actions.
        """

        ticker = self._ledger_validate_transaction(transaction)
        state = self._positions.get(ticker)
        shares_before = state.shares_held if state is not None else 0
        average_before = state.average_price if state is not None else _ZERO

        if transaction.action is TransactionAction.BUY:
            shares_after = shares_before + transaction.shares
            combined_cost = _LEDGER_DECIMAL_CONTEXT.add(
                _LEDGER_DECIMAL_CONTEXT.multiply(Decimal(shares_before), average_before),
                _LEDGER_DECIMAL_CONTEXT.multiply(Decimal(transaction.shares), transaction.price),
            )
            average_after = _LEDGER_DECIMAL_CONTEXT.divide(combined_cost, Decimal(shares_after))
            realized_gain = None
        else:
            if transaction.shares > shares_before:
                raise InsufficientPositionError(
                    ticker=ticker,
                    requested_shares=transaction.shares,
                    held_shares=shares_before,
                )
            shares_after = shares_before - transaction.shares
            average_after = average_before
            realized_gain = _LEDGER_DECIMAL_CONTEXT.multiply(
                _LEDGER_DECIMAL_CONTEXT.subtract(transaction.price, average_before),
                Decimal(transaction.shares),
            )

        if state is None:
            state = PositionState()
            self._positions[ticker] = state
        state.shares_held = shares_after
        state.average_price = average_after

        return PositionTransition(
            date=transaction.date,
            ticker=ticker,
            action=transaction.action,
            shares=transaction.shares,
            price=transaction.price,
            shares_before=shares_before,
            shares_after=shares_after,
            average_before=average_before,
            average_after=average_after,
            realized_gain=realized_gain,
        )

    def ledger_snapshot(self, include_closed: bool = False) -> tuple[PositionSnapshotRow, ...]:
        """Return final positions ordered by ticker ascending.

        Args:
            include_closed: Include zero-share tickers with average_price None.

        Returns:
            tuple[PositionSnapshotRow, ...]: Snapshot rows.
        """

        snapshot_rows: list[PositionSnapshotRow] = []
        for ticker in sorted(self._positions):
            state = self._positions[ticker]
            is_open = state.shares_held > 0
            if not is_open and not include_closed:
                continue
            snapshot_rows.append(
                PositionSnapshotRow(
                    ticker=ticker,
                    shares_held=state.shares_held,
                    average_price=state.average_price if is_open else None,
                    is_open=is_open,
                )
            )
        return tuple(snapshot_rows)

    def _ledger_validate_transaction(self, transaction: Transaction) -> str:
        """Validate transaction fields and return the normalized ticker key."""

        if not isinstance(transaction.action, TransactionAction):
            raise ValueError(f"unsupported transaction action={transaction.action!r}")

        ticker = transaction.ticker.strip().upper() if isinstance(transaction.ticker, str) else ""
        if not ticker:
            raise ValueError("transaction ticker must not be blank")

        shares = transaction.shares
        if isinstance(shares, bool) or not isinstance(shares, int):
            raise InvalidQuantityError(f"shares must be an integer for {ticker}, got {shares!r}")
        if shares <= 0:
            raise InvalidQuantityError(f"shares must be positive for {ticker}, got {shares}")

        price = transaction.price
        if not isinstance(price, Decimal) or not price.is_finite():
            raise InvalidPriceError(f"price must be a finite Decimal for {ticker}, got {price!r}")
        if price < _ZERO:
            raise InvalidPriceError(f"price must be non-negative for {ticker}, got {price}")

        return ticker


@dataclass
class LedgerFoldResult:
    """Outcome of folding one ordered transaction stream.

    Attributes:
        ledger: Ledger holding final per-ticker state.
        transitions: Applied state changes in input order.
        anomalies: Transactions skipped under the `skip` over-sell policy.
    """

    ledger: PositionLedger
    transitions: list[PositionTransition] = field(default_factory=list)
    anomalies: list[LedgerAnomaly] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        """Number of transactions applied."""

        return len(self.transitions)

    @property
    def skipped_count(self) -> int:
        """Number of transactions skipped."""

        return len(self.anomalies)


def ledger_fold_transactions(
    transactions: Iterable[Transaction],
    oversell_policy: str = OVERSELL_POLICY_ABORT,
    ledger: PositionLedger | None = None,
) -> LedgerFoldResult:
    """Fold an ordered transaction stream into per-ticker positions.

    Input order is trusted and never re-sorted. The over-sell policy applies
    to every transaction of the run: `abort` propagates the first
    `InsufficientPositionError`, `skip` records it as an anomaly and
    continues. Quantity and price errors always propagate.

    Args:
        transactions: Date-ordered transactions.
        oversell_policy: `abort` or `skip`.
        ledger: Optional ledger to continue folding into.

    Returns:
        LedgerFoldResult: Final ledger, transitions and anomalies.

    Raises:
        ValueError: Raised when oversell_policy is unknown.
        InsufficientPositionError: Raised under `abort` for an over-sell.
        InvalidQuantityError: Raised for non-positive share counts.
        InvalidPriceError: Raised for negative prices.
    """

    normalized_policy = oversell_policy.strip().lower()
    if normalized_policy not in {OVERSELL_POLICY_ABORT, OVERSELL_POLICY_SKIP}:
        raise ValueError(f"unsupported oversell_policy={oversell_policy}")

    fold_result = LedgerFoldResult(ledger=ledger if ledger is not None else PositionLedger())
    for transaction in transactions:
        try:
            transition = fold_result.ledger.ledger_apply_transaction(transaction)
        except InsufficientPositionError as error:
            if normalized_policy == OVERSELL_POLICY_ABORT:
                raise
            logger.warning("Skipping transaction on %s dated %s: %s", error.ticker, transaction.date.isoformat(), error)
            fold_result.anomalies.append(
                LedgerAnomaly(code=error.error_code, message=str(error), transaction=transaction)
            )
            continue
        fold_result.transitions.append(transition)

    logger.debug("Folded %d transactions, skipped %d", fold_result.processed_count, fold_result.skipped_count)
    return fold_result


__all__ = [
    "OVERSELL_POLICY_ABORT",
    "OVERSELL_POLICY_SKIP",
    "LedgerFoldResult",
    "PositionLedger",
    "PositionState",
    "ledger_fold_transactions",
]
