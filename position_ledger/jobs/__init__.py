"""Job layer package for workflow orchestration boundaries."""

from .interfaces import (
	JOB_STATUS_FAILED,
	JOB_STATUS_PARTIAL,
	JOB_STATUS_SUCCESS,
	PositionReportConfig,
	PositionReportResult,
	WalletExportFailure,
	WalletExportResult,
)
from .position_report_orchestrator import INVALID_TRANSACTION_ROW_CODE, PositionReportOrchestrator
from .wallet_export_orchestrator import WalletExportOrchestrator

__all__ = [
	"INVALID_TRANSACTION_ROW_CODE",
	"JOB_STATUS_FAILED",
	"JOB_STATUS_PARTIAL",
	"JOB_STATUS_SUCCESS",
	"PositionReportConfig",
	"PositionReportOrchestrator",
	"PositionReportResult",
	"WalletExportFailure",
	"WalletExportOrchestrator",
	"WalletExportResult",
]
