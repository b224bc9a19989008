"""Ledger layer package for position folding and cost-basis boundaries."""

from .average_cost_engine import (
	OVERSELL_POLICY_ABORT,
	OVERSELL_POLICY_SKIP,
	LedgerFoldResult,
	PositionLedger,
	PositionState,
	ledger_fold_transactions,
)
from .errors import InsufficientPositionError, InvalidPriceError, InvalidQuantityError, LedgerError
from .interfaces import LedgerAnomaly, LedgerPort, PositionSnapshotRow, PositionTransition

__all__ = [
	"OVERSELL_POLICY_ABORT",
	"OVERSELL_POLICY_SKIP",
	"InsufficientPositionError",
	"InvalidPriceError",
	"InvalidQuantityError",
	"LedgerAnomaly",
	"LedgerError",
	"LedgerFoldResult",
	"LedgerPort",
	"PositionLedger",
	"PositionSnapshotRow",
	"PositionState",
	"PositionTransition",
	"ledger_fold_transactions",
]
