"""Regression tests for ordered transaction folding and over-sell run policies."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from position_ledger.domain import Transaction, TransactionAction
from position_ledger.ledger import (
    InsufficientPositionError,
    InvalidQuantityError,
    PositionLedger,
    ledger_fold_transactions,
)


def _transaction(ticker: str, action: TransactionAction, shares: int, price: str, day: int) -> Transaction:
    return Transaction(
        date=datetime(2023, 3, day, 12, 0, 0, tzinfo=timezone.utc),
        ticker=ticker,
        action=action,
        shares=shares,
        price=Decimal(price),
    )


def test_ledger_fold_is_order_sensitive() -> None:
    """Produce different averages when the same three transactions are reordered.

    Returns:
        None: Assertions validate non-commutative folding.

    Raises:
        AssertionError: Raised when order does not affect cost basis.
    """

    buy_low = _transaction("X", TransactionAction.BUY, 10, "10.00", day=1)
    sell_half = _transaction("X", TransactionAction.SELL, 5, "12.00", day=2)
    buy_high = _transaction("X", TransactionAction.BUY, 5, "20.00", day=3)

    sell_first = ledger_fold_transactions([buy_low, sell_half, buy_high])
    buy_first = ledger_fold_transactions([buy_low, buy_high, sell_half])

    sell_first_rows = sell_first.ledger.ledger_snapshot()
    buy_first_rows = buy_first.ledger.ledger_snapshot()
    assert sell_first_rows[0].shares_held == 10
    assert buy_first_rows[0].shares_held == 10
    assert sell_first_rows[0].average_price == Decimal("15")
    assert buy_first_rows[0].average_price.quantize(Decimal("0.0001")) == Decimal("13.3333")
    assert sell_first_rows[0].average_price != buy_first_rows[0].average_price


def test_ledger_fold_trusts_input_order_without_resorting() -> None:
    """Process transactions in the given sequence even when dates disagree."""

    later_buy = _transaction("X", TransactionAction.BUY, 1, "10.00", day=20)
    earlier_sell = _transaction("X", TransactionAction.SELL, 1, "10.00", day=1)

    fold_result = ledger_fold_transactions([later_buy, earlier_sell])

    assert fold_result.processed_count == 2
    assert fold_result.ledger.ledger_snapshot() == ()


def test_ledger_fold_abort_policy_propagates_first_oversell() -> None:
    """Fail the run on the first over-sell under the default policy.

    Returns:
        None: Assertions validate propagated error.

    Raises:
        AssertionError: Raised when the abort policy swallows the over-sell.
    """

    transactions = [
        _transaction("Y", TransactionAction.BUY, 4, "46.95", day=1),
        _transaction("Y", TransactionAction.SELL, 5, "47.00", day=2),
    ]

    with pytest.raises(InsufficientPositionError, match="only 4 held"):
        ledger_fold_transactions(transactions)


def test_ledger_fold_skip_policy_records_anomalies_and_continues() -> None:
    """Skip every over-sell uniformly and keep folding the rest of the stream.

    Returns:
        None: Assertions validate anomalies and surviving state.

    Raises:
        AssertionError: Raised when skipped sells mutate state or are not reported.
    """

    oversell = _transaction("Y", TransactionAction.SELL, 5, "47.00", day=2)
    unseen_sell = _transaction("Z", TransactionAction.SELL, 1, "3.00", day=3)
    transactions = [
        _transaction("Y", TransactionAction.BUY, 4, "46.95", day=1),
        oversell,
        unseen_sell,
        _transaction("Y", TransactionAction.SELL, 4, "48.00", day=4),
    ]

    fold_result = ledger_fold_transactions(transactions, oversell_policy="skip")

    assert fold_result.processed_count == 2
    assert fold_result.skipped_count == 2
    assert [anomaly.transaction for anomaly in fold_result.anomalies] == [oversell, unseen_sell]
    assert {anomaly.code for anomaly in fold_result.anomalies} == {"INSUFFICIENT_POSITION"}
    assert fold_result.ledger.ledger_snapshot() == ()
    assert fold_result.ledger.ledger_position("Z") is None


def test_ledger_fold_skip_policy_still_propagates_invalid_quantity() -> None:
    """Never skip quantity errors, whatever the over-sell policy."""

    transactions = [_transaction("X", TransactionAction.BUY, 0, "1.00", day=1)]

    with pytest.raises(InvalidQuantityError):
        ledger_fold_transactions(transactions, oversell_policy="skip")


def test_ledger_fold_rejects_unknown_policy() -> None:
    """Reject policies other than abort and skip."""

    with pytest.raises(ValueError, match="unsupported oversell_policy"):
        ledger_fold_transactions([], oversell_policy="clamp")


def test_ledger_fold_continues_an_explicit_ledger() -> None:
    """Thread a caller-owned ledger through consecutive folds."""

    ledger = PositionLedger()
    ledger_fold_transactions([_transaction("X", TransactionAction.BUY, 2, "10.00", day=1)], ledger=ledger)

    fold_result = ledger_fold_transactions(
        [_transaction("X", TransactionAction.BUY, 2, "20.00", day=2)],
        ledger=ledger,
    )

    assert fold_result.ledger is ledger
    state = ledger.ledger_position("X")
    assert state is not None
    assert (state.shares_held, state.average_price) == (4, Decimal("15"))
