"""Job-layer orchestrator pushing open-position trades to an online wallet."""

from __future__ import annotations

import logging

from position_ledger.adapters import WalletExportError, WalletExportPort
from position_ledger.domain import domain_build_stage_event

from .interfaces import (
    JOB_STATUS_FAILED,
    JOB_STATUS_PARTIAL,
    JOB_STATUS_SUCCESS,
    PositionReportResult,
    WalletExportFailure,
    WalletExportResult,
)

logger = logging.getLogger(__name__)


class WalletExportOrchestrator:
    """Register every applied trade of still-open tickers with a wallet adapter."""

    _JOB_NAME = "wallet_export"

    def __init__(self, wallet_adapter: WalletExportPort):
        if wallet_adapter is None:
            raise ValueError("wallet_adapter must not be None")
        self._wallet_adapter = wallet_adapter

    def job_supported_names(self) -> tuple[str, ...]:
        """Return supported job names."""

        return (self._JOB_NAME,)

    def job_execute(self, report_result: PositionReportResult) -> WalletExportResult:
        """Export trades of open tickers from a successful report run.

        A failing trade is logged and recorded; remaining trades are still
        attempted.

        Args:
            report_result: Successful position report payload.

        Returns:
            WalletExportResult: Export summary.

        Raises:
            ValueError: Raised when report_result is missing or did not succeed.
        """

        if report_result is None:
            raise ValueError("report_result must not be None")
        if report_result.status != JOB_STATUS_SUCCESS:
            raise ValueError(f"cannot export from report with status={report_result.status}")

        open_tickers = {row.ticker for row in report_result.rows if row.is_open}
        export_transitions = [transition for transition in report_result.transitions if transition.ticker in open_tickers]

        timeline: list[dict[str, object]] = [
            domain_build_stage_event(
                stage="export",
                status="started",
                details={
                    "target": self._wallet_adapter.adapter_source_name(),
                    "trade_count": len(export_transitions),
                },
            )
        ]
        failures: list[WalletExportFailure] = []
        exported_count = 0

        for transition in export_transitions:
            try:
                self._wallet_adapter.adapter_add_trade(transition)
            except WalletExportError as error:
                logger.warning(
                    "%s %s %s failed to be added: %s",
                    transition.date.strftime("%d/%m/%Y"),
                    transition.ticker,
                    transition.action.value,
                    error,
                )
                failures.append(WalletExportFailure(ticker=transition.ticker, date=transition.date, message=str(error)))
                continue
            exported_count += 1
            logger.info(
                "%s %s %s added with success",
                transition.date.strftime("%d/%m/%Y"),
                transition.ticker,
                transition.action.value,
            )

        if not failures:
            status = JOB_STATUS_SUCCESS
        elif exported_count:
            status = JOB_STATUS_PARTIAL
        else:
            status = JOB_STATUS_FAILED

        timeline.append(
            domain_build_stage_event(
                stage="export",
                status="completed" if status != JOB_STATUS_FAILED else "failed",
                details={"exported_count": exported_count, "failed_count": len(failures)},
            )
        )
        return WalletExportResult(
            job_name=self._JOB_NAME,
            status=status,
            exported_count=exported_count,
            failures=tuple(failures),
            timeline=timeline,
        )
