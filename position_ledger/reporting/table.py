"""Fixed-width text rendering for position snapshots and skipped transactions."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Sequence

from position_ledger.ledger import LedgerAnomaly, PositionSnapshotRow

_REPORT_MIN_PRECISION = 28
_REPORT_HEADERS = ("TICKER", "SHARES", "AVERAGE_PRICE")
_REPORT_CLOSED_MARKER = "closed"
_REPORT_EMPTY_MESSAGE = "no open positions"


def reporting_round_currency(value: Decimal, decimal_places: int = 2) -> Decimal:
    """Round one currency value half-up at the given precision.

    Args:
        value: Full-precision amount.
        decimal_places: Digits after the decimal point.

    Returns:
        Decimal: Rounded amount.

    Raises:
        ValueError: Raised when decimal_places is negative.
    """

    if decimal_places < 0:
        raise ValueError("decimal_places must be >= 0")
    quantum = Decimal(1).scaleb(-decimal_places)
    # quantize needs every integer digit plus the requested places within precision
    precision = max(_REPORT_MIN_PRECISION, value.adjusted() + decimal_places + 2)
    with localcontext(Context(prec=precision)):
        return value.quantize(quantum, rounding=ROUND_HALF_UP)


def reporting_render_position_table(rows: Sequence[PositionSnapshotRow], decimal_places: int = 2) -> str:
    """Render snapshot rows as an aligned text table.

    Closed rows print a `closed` marker instead of their stale average.

    Args:
        rows: Snapshot rows in presentation order.
        decimal_places: Average price precision.

    Returns:
        str: Table text without trailing newline.
    """

    if not rows:
        return _REPORT_EMPTY_MESSAGE

    body_rows = [
        (
            row.ticker,
            str(row.shares_held),
            _REPORT_CLOSED_MARKER
            if row.average_price is None
            else str(reporting_round_currency(row.average_price, decimal_places)),
        )
        for row in rows
    ]
    widths = [
        max(len(_REPORT_HEADERS[index]), *(len(body_row[index]) for body_row in body_rows))
        for index in range(len(_REPORT_HEADERS))
    ]

    lines = [_reporting_format_line(_REPORT_HEADERS, widths)]
    lines.extend(_reporting_format_line(body_row, widths) for body_row in body_rows)
    return "\n".join(lines)


def reporting_render_anomalies(anomalies: Sequence[LedgerAnomaly]) -> str:
    """Render skipped transactions, one per line; empty string when none."""

    return "\n".join(
        f"SKIPPED {anomaly.transaction.date.strftime('%d/%m/%Y %H:%M:%S')} "
        f"{anomaly.transaction.ticker} {anomaly.transaction.action.value} {anomaly.transaction.shares}: "
        f"{anomaly.code} ({anomaly.message})"
        for anomaly in anomalies
    )


def _reporting_format_line(cells: Sequence[str], widths: Sequence[int]) -> str:
    ticker_cell = cells[0].ljust(widths[0])
    numeric_cells = [cell.rjust(width) for cell, width in zip(cells[1:], widths[1:])]
    return "  ".join([ticker_cell, *numeric_cells])


__all__ = [
    "reporting_render_anomalies",
    "reporting_render_position_table",
    "reporting_round_currency",
]
