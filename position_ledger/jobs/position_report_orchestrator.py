"""Job-layer orchestrator for one normalize, fold and snapshot run."""

from __future__ import annotations

import logging

from position_ledger.domain import TransactionParseError, domain_build_stage_event, domain_parse_transactions_csv
from position_ledger.ledger import OVERSELL_POLICY_ABORT, OVERSELL_POLICY_SKIP, LedgerError, ledger_fold_transactions

from .interfaces import JOB_STATUS_FAILED, JOB_STATUS_SUCCESS, PositionReportConfig, PositionReportResult

logger = logging.getLogger(__name__)

INVALID_TRANSACTION_ROW_CODE = "INVALID_TRANSACTION_ROW"


class PositionReportOrchestrator:
    """Run the transaction pipeline over raw CSV text with a stage timeline."""

    _JOB_NAME = "position_report"

    def __init__(self, config: PositionReportConfig):
        """Initialize orchestrator configuration.

        Args:
            config: Report run configuration.

        Raises:
            ValueError: Raised when the over-sell policy is unsupported.
        """

        if config is None:
            raise ValueError("config must not be None")
        if config.oversell_policy.strip().lower() not in {OVERSELL_POLICY_ABORT, OVERSELL_POLICY_SKIP}:
            raise ValueError(f"unsupported oversell_policy={config.oversell_policy}")
        self._config = config

    def job_supported_names(self) -> tuple[str, ...]:
        """Return supported job names."""

        return (self._JOB_NAME,)

    def job_execute(self, source_text: str) -> PositionReportResult:
        """Normalize CSV text, fold it through a fresh ledger and snapshot the result.

        Parse and ledger failures finish the run as `failed` with an error code
        instead of propagating.

        Args:
            source_text: Raw transaction CSV text.

        Returns:
            PositionReportResult: Final run payload.

        Raises:
            ValueError: Raised when source_text is not a string.
        """

        if not isinstance(source_text, str):
            raise ValueError("source_text must be a string")

        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="run", status="started")]
        transaction_count = 0

        try:
            timeline.append(domain_build_stage_event(stage="normalize", status="started"))
            transactions = domain_parse_transactions_csv(source_text)
            transaction_count = len(transactions)
            timeline.append(
                domain_build_stage_event(
                    stage="normalize",
                    status="completed",
                    details={"transaction_count": transaction_count},
                )
            )

            timeline.append(domain_build_stage_event(stage="fold", status="started"))
            fold_result = ledger_fold_transactions(
                transactions,
                oversell_policy=self._config.oversell_policy,
            )
            timeline.append(
                domain_build_stage_event(
                    stage="fold",
                    status="completed",
                    details={
                        "processed_count": fold_result.processed_count,
                        "skipped_count": fold_result.skipped_count,
                    },
                )
            )

            rows = fold_result.ledger.ledger_snapshot(include_closed=self._config.include_closed)
        except TransactionParseError as error:
            return self._job_finalize_failure(timeline, INVALID_TRANSACTION_ROW_CODE, str(error), transaction_count)
        except LedgerError as error:
            return self._job_finalize_failure(timeline, error.error_code, str(error), transaction_count)

        timeline.append(domain_build_stage_event(stage="run", status="completed", details={"row_count": len(rows)}))
        logger.info(
            "Position report completed: %d transactions, %d positions, %d skipped",
            transaction_count,
            len(rows),
            fold_result.skipped_count,
        )
        return PositionReportResult(
            job_name=self._JOB_NAME,
            status=JOB_STATUS_SUCCESS,
            rows=rows,
            anomalies=tuple(fold_result.anomalies),
            transitions=tuple(fold_result.transitions),
            transaction_count=transaction_count,
            timeline=timeline,
        )

    def _job_finalize_failure(
        self,
        timeline: list[dict[str, object]],
        error_code: str,
        error_message: str,
        transaction_count: int,
    ) -> PositionReportResult:
        """Append failure event and build the failed run payload."""

        logger.error("Position report failed: code=%s, message=%s", error_code, error_message)
        timeline.append(
            domain_build_stage_event(
                stage="run",
                status="failed",
                details={"error_code": error_code, "error_message": error_message},
            )
        )
        return PositionReportResult(
            job_name=self._JOB_NAME,
            status=JOB_STATUS_FAILED,
            transaction_count=transaction_count,
            timeline=timeline,
            error_code=error_code,
            error_message=error_message,
        )
