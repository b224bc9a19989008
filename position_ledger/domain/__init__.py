"""Domain models and normalization helpers used across application layers."""

from .models import HealthStatus, Transaction, TransactionAction
from .timeline import domain_build_stage_event
from .transaction_parsing import (
    TransactionParseError,
    domain_parse_transaction_row,
    domain_parse_transactions_csv,
)

__all__ = [
    "HealthStatus",
    "Transaction",
    "TransactionAction",
    "TransactionParseError",
    "domain_build_stage_event",
    "domain_parse_transaction_row",
    "domain_parse_transactions_csv",
]
