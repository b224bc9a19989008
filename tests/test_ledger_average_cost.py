"""Regression tests for moving-average position ledger transitions."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, localcontext

import pytest

from position_ledger.domain import Transaction, TransactionAction
from position_ledger.ledger import (
    InsufficientPositionError,
    InvalidPriceError,
    InvalidQuantityError,
    PositionLedger,
)


def _transaction(ticker: str, action: TransactionAction, shares: int, price: str, day: int = 1) -> Transaction:
    return Transaction(
        date=datetime(2023, 1, day, 10, 0, 0, tzinfo=timezone.utc),
        ticker=ticker,
        action=action,
        shares=shares,
        price=Decimal(price),
    )


def _buy(ticker: str, shares: int, price: str, day: int = 1) -> Transaction:
    return _transaction(ticker, TransactionAction.BUY, shares, price, day)


def _sell(ticker: str, shares: int, price: str, day: int = 1) -> Transaction:
    return _transaction(ticker, TransactionAction.SELL, shares, price, day)


def _weighted_mean(*lots: tuple[int, str]) -> Decimal:
    with localcontext() as context:
        context.prec = 34
        total_shares = sum(shares for shares, _ in lots)
        total_cost = sum((Decimal(shares) * Decimal(price) for shares, price in lots), Decimal("0"))
        return total_cost / Decimal(total_shares)


def test_ledger_single_buy_sets_position_and_average() -> None:
    """Open a position from one buy.

    Returns:
        None: Assertions validate share count and average price.

    Raises:
        AssertionError: Raised when the first buy is not taken at its own price.
    """

    ledger = PositionLedger()

    ledger.ledger_apply_transaction(_buy("X", 10, "28.20"))

    state = ledger.ledger_position("X")
    assert state is not None
    assert state.shares_held == 10
    assert state.average_price == Decimal("28.20")


def test_ledger_two_buys_produce_exact_weighted_mean() -> None:
    """Re-average cost over the combined share count on every buy.

    Returns:
        None: Assertions validate the exact weighted mean.

    Raises:
        AssertionError: Raised when the moving average drifts from the exact mean.
    """

    ledger = PositionLedger()

    ledger.ledger_apply_transaction(_buy("X", 10, "28.20", day=1))
    ledger.ledger_apply_transaction(_buy("X", 9, "26.07", day=2))

    state = ledger.ledger_position("X")
    assert state is not None
    assert state.shares_held == 19
    assert state.average_price == _weighted_mean((10, "28.20"), (9, "26.07"))
    assert state.average_price.quantize(Decimal("0.01")) == Decimal("27.19")


def test_ledger_sell_keeps_average_and_reports_pre_sell_basis() -> None:
    """Reduce quantity on sell while the cost basis stays untouched.

    Returns:
        None: Assertions validate retained average and realized gain basis.

    Raises:
        AssertionError: Raised when a sell alters the average price.
    """

    ledger = PositionLedger()
    ledger.ledger_apply_transaction(_buy("X", 10, "28.20", day=1))
    ledger.ledger_apply_transaction(_buy("X", 9, "26.07", day=2))
    pre_sell_average = _weighted_mean((10, "28.20"), (9, "26.07"))

    transition = ledger.ledger_apply_transaction(_sell("X", 19, "26.85", day=3))

    assert transition.shares_before == 19
    assert transition.shares_after == 0
    assert transition.average_before == pre_sell_average
    assert transition.average_after == pre_sell_average
    with localcontext() as context:
        context.prec = 34
        assert transition.realized_gain == (Decimal("26.85") - pre_sell_average) * 19
    state = ledger.ledger_position("X")
    assert state is not None
    assert state.shares_held == 0
    assert state.average_price == pre_sell_average


def test_ledger_partial_sell_leaves_remaining_shares_at_same_average() -> None:
    """Keep the average for the shares left after a partial sell."""

    ledger = PositionLedger()
    ledger.ledger_apply_transaction(_buy("BBAS3", 100, "20.00", day=1))
    ledger.ledger_apply_transaction(_buy("BBAS3", 100, "25.00", day=2))

    ledger.ledger_apply_transaction(_sell("BBAS3", 50, "20.00", day=3))

    state = ledger.ledger_position("BBAS3")
    assert state is not None
    assert state.shares_held == 150
    assert state.average_price == Decimal("22.5")


def test_ledger_buy_after_full_liquidation_resets_basis_to_new_price() -> None:
    """Start a clean average when buying into a fully sold ticker.

    Returns:
        None: Assertions validate the reset average.

    Raises:
        AssertionError: Raised when prior lots contaminate the new average.
    """

    ledger = PositionLedger()
    ledger.ledger_apply_transaction(_buy("X", 10, "28.20", day=1))
    ledger.ledger_apply_transaction(_sell("X", 10, "30.00", day=2))

    ledger.ledger_apply_transaction(_buy("X", 7, "31.13", day=3))

    state = ledger.ledger_position("X")
    assert state is not None
    assert state.shares_held == 7
    assert state.average_price == Decimal("31.13")


@pytest.mark.parametrize("held_shares", [4, 0])
def test_ledger_oversell_raises_without_mutating_position(held_shares: int) -> None:
    """Reject sells exceeding held shares, including never-bought tickers.

    Args:
        held_shares: Shares bought before the rejected sell.

    Returns:
        None: Assertions validate error details and untouched state.

    Raises:
        AssertionError: Raised when an over-sell mutates or clamps the position.
    """

    ledger = PositionLedger()
    if held_shares:
        ledger.ledger_apply_transaction(_buy("Y", held_shares, "46.95"))
    state_before = ledger.ledger_position("Y")

    with pytest.raises(InsufficientPositionError) as error_info:
        ledger.ledger_apply_transaction(_sell("Y", 5, "50.00", day=2))

    assert error_info.value.ticker == "Y"
    assert error_info.value.requested_shares == 5
    assert error_info.value.held_shares == held_shares
    assert error_info.value.error_code == "INSUFFICIENT_POSITION"
    assert ledger.ledger_position("Y") == state_before


@pytest.mark.parametrize("shares", [0, -3])
def test_ledger_rejects_non_positive_share_counts(shares: int) -> None:
    """Reject zero and negative share counts before touching state."""

    ledger = PositionLedger()

    with pytest.raises(InvalidQuantityError):
        ledger.ledger_apply_transaction(_buy("X", shares, "10.00"))

    assert ledger.ledger_position("X") is None


def test_ledger_rejects_negative_price() -> None:
    """Reject negative unit prices."""

    ledger = PositionLedger()

    with pytest.raises(InvalidPriceError):
        ledger.ledger_apply_transaction(_buy("X", 1, "-0.01"))

    assert ledger.ledger_snapshot(include_closed=True) == ()


def test_ledger_rejects_free_form_action_strings() -> None:
    """Accept only TransactionAction members as actions."""

    ledger = PositionLedger()
    transaction = Transaction(
        date=datetime(2023, 1, 1, tzinfo=timezone.utc),
        ticker="X",
        action="Buy",  # type: ignore[arg-type]
        shares=1,
        price=Decimal("1"),
    )

    with pytest.raises(ValueError, match="unsupported transaction action"):
        ledger.ledger_apply_transaction(transaction)


def test_ledger_tickers_are_isolated() -> None:
    """Keep transactions on one ticker from affecting another.

    Returns:
        None: Assertions validate per-ticker independence.

    Raises:
        AssertionError: Raised when ticker state leaks across keys.
    """

    ledger = PositionLedger()
    ledger.ledger_apply_transaction(_buy("A", 10, "10.00", day=1))
    ledger.ledger_apply_transaction(_buy("B", 5, "99.00", day=2))
    ledger.ledger_apply_transaction(_buy("A", 10, "20.00", day=3))
    ledger.ledger_apply_transaction(_sell("A", 15, "30.00", day=4))

    state_a = ledger.ledger_position("A")
    state_b = ledger.ledger_position("B")
    assert state_a is not None and state_b is not None
    assert (state_a.shares_held, state_a.average_price) == (5, Decimal("15"))
    assert (state_b.shares_held, state_b.average_price) == (5, Decimal("99.00"))


def test_ledger_snapshot_orders_by_ticker_and_excludes_closed_by_default() -> None:
    """Present rows in ticker order and hide closed positions unless asked.

    Returns:
        None: Assertions validate ordering and closed-row flagging.

    Raises:
        AssertionError: Raised when snapshot order or closed-row policy is wrong.
    """

    ledger = PositionLedger()
    ledger.ledger_apply_transaction(_buy("PETR4", 200, "14.00", day=1))
    ledger.ledger_apply_transaction(_buy("BBAS3", 100, "20.00", day=2))
    ledger.ledger_apply_transaction(_buy("ITSA4", 10, "9.50", day=3))
    ledger.ledger_apply_transaction(_sell("ITSA4", 10, "9.80", day=4))

    open_rows = ledger.ledger_snapshot()
    all_rows = ledger.ledger_snapshot(include_closed=True)

    assert [row.ticker for row in open_rows] == ["BBAS3", "PETR4"]
    assert [row.ticker for row in all_rows] == ["BBAS3", "ITSA4", "PETR4"]
    closed_row = all_rows[1]
    assert closed_row.shares_held == 0
    assert closed_row.is_open is False
    assert closed_row.average_price is None


def test_ledger_policy_name_is_moving_average() -> None:
    """Expose the cost-basis method label."""

    assert PositionLedger().ledger_policy_name() == "moving_average"
