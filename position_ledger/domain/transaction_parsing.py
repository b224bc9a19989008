"""Transaction CSV normalization helpers.

This module turns raw broker-export rows into ordered `Transaction` values so
the ledger only ever sees validated, time-ordered input. Expected row shape:
`DD/MM/YYYY HH:MM:SS,TICKER,B|S,SHARES,PRICE`. No header row is expected and
trailing extra columns are ignored.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Sequence

from .models import Transaction, TransactionAction

_DOMAIN_TRADE_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
_DOMAIN_REQUIRED_COLUMN_COUNT = 5
_DOMAIN_BYTE_ORDER_MARK = "\ufeff"
_DOMAIN_ACTION_CODES = {
    "B": TransactionAction.BUY,
    "S": TransactionAction.SELL,
}


class TransactionParseError(ValueError):
    """Raised when one raw transaction row cannot be normalized.

    Attributes:
        line_number: 1-based source line of the rejected row, when known.
    """

    def __init__(self, message: str, line_number: int | None = None):
        prefix = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{prefix}{message}")
        self.line_number = line_number


def domain_parse_trade_timestamp(value: str) -> datetime:
    """Parse one `DD/MM/YYYY HH:MM:SS` timestamp as UTC.

    Args:
        value: Raw timestamp text.

    Returns:
        datetime: Offset-aware UTC timestamp.

    Raises:
        ValueError: Raised when value does not match the expected format.
    """

    normalized_value = value.strip()
    try:
        parsed_value = datetime.strptime(normalized_value, _DOMAIN_TRADE_TIMESTAMP_FORMAT)
    except ValueError as error:
        raise ValueError(f"invalid trade timestamp={normalized_value!r}, expected DD/MM/YYYY HH:MM:SS") from error
    return parsed_value.replace(tzinfo=timezone.utc)


def domain_parse_action(value: str) -> TransactionAction:
    """Map one raw action code (`B` or `S`) to `TransactionAction`.

    Raises:
        ValueError: Raised for any other action code.
    """

    normalized_value = value.strip().upper()
    action = _DOMAIN_ACTION_CODES.get(normalized_value)
    if action is None:
        raise ValueError(f"unsupported action={value.strip()!r}, expected B or S")
    return action


def domain_parse_share_count(value: str) -> int:
    """Parse one positive base-10 share count.

    Raises:
        ValueError: Raised when value is not a positive integer.
    """

    normalized_value = value.strip()
    if not normalized_value.isdecimal():
        raise ValueError(f"invalid share count={normalized_value!r}, expected positive integer")
    share_count = int(normalized_value)
    if share_count <= 0:
        raise ValueError(f"share count must be positive, got {share_count}")
    return share_count


def domain_parse_decimal_price(value: str) -> Decimal:
    """Parse one non-negative unit price.

    A decimal comma (`28,20`) is accepted when the value carries no dot.

    Args:
        value: Raw price text.

    Returns:
        Decimal: Parsed price with source precision preserved.

    Raises:
        ValueError: Raised when value is not a finite non-negative decimal.
    """

    normalized_value = value.strip()
    if "," in normalized_value and "." not in normalized_value:
        normalized_value = normalized_value.replace(",", ".")

    try:
        price = Decimal(normalized_value)
    except InvalidOperation as error:
        raise ValueError(f"invalid price={value.strip()!r}") from error

    if not price.is_finite():
        raise ValueError(f"invalid price={value.strip()!r}")
    if price < 0:
        raise ValueError(f"price must be non-negative, got {price}")
    return price


def domain_parse_transaction_row(row: Sequence[str], line_number: int | None = None) -> Transaction:
    """Normalize one raw CSV row into a `Transaction`.

    Args:
        row: Raw CSV cells.
        line_number: Optional 1-based source line used in error messages.

    Returns:
        Transaction: Validated transaction.

    Raises:
        TransactionParseError: Raised when any cell is missing or invalid.
    """

    if len(row) < _DOMAIN_REQUIRED_COLUMN_COUNT:
        raise TransactionParseError(
            f"expected at least {_DOMAIN_REQUIRED_COLUMN_COUNT} columns, got {len(row)}",
            line_number=line_number,
        )

    raw_date, raw_ticker, raw_action, raw_shares, raw_price = row[:_DOMAIN_REQUIRED_COLUMN_COUNT]
    ticker = raw_ticker.strip().upper()
    if not ticker:
        raise TransactionParseError("ticker must not be blank", line_number=line_number)

    try:
        return Transaction(
            date=domain_parse_trade_timestamp(raw_date),
            ticker=ticker,
            action=domain_parse_action(raw_action),
            shares=domain_parse_share_count(raw_shares),
            price=domain_parse_decimal_price(raw_price),
        )
    except ValueError as error:
        raise TransactionParseError(str(error), line_number=line_number) from error


def domain_parse_transactions_csv(source_text: str) -> list[Transaction]:
    """Normalize CSV text into a date-ordered transaction list.

    Blank lines and a leading UTF-8 byte order mark are skipped. Sorting is
    stable, so rows sharing a timestamp keep their source order.

    Args:
        source_text: Raw CSV text.

    Returns:
        list[Transaction]: Transactions sorted by date ascending.

    Raises:
        TransactionParseError: Raised for the first invalid row.
    """

    transactions: list[Transaction] = []
    reader = csv.reader(io.StringIO(source_text.removeprefix(_DOMAIN_BYTE_ORDER_MARK)))
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        transactions.append(domain_parse_transaction_row(row, line_number=reader.line_num))
    return sorted(transactions, key=lambda transaction: transaction.date)


__all__ = [
    "TransactionParseError",
    "domain_parse_action",
    "domain_parse_decimal_price",
    "domain_parse_share_count",
    "domain_parse_trade_timestamp",
    "domain_parse_transaction_row",
    "domain_parse_transactions_csv",
]
