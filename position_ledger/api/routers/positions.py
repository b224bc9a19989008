"""Positions API router running one stateless report over a posted CSV body."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from position_ledger.config import SUPPORTED_OVERSELL_POLICIES, AppSettings
from position_ledger.jobs import (
    INVALID_TRANSACTION_ROW_CODE,
    JOB_STATUS_SUCCESS,
    PositionReportConfig,
    PositionReportOrchestrator,
)
from position_ledger.ledger import LedgerAnomaly, PositionSnapshotRow
from position_ledger.reporting import reporting_round_currency

_API_UNPROCESSABLE_STATUS_CODE = 422
_API_ERROR_STATUS_CODES = {
    INVALID_TRANSACTION_ROW_CODE: status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_POSITION": _API_UNPROCESSABLE_STATUS_CODE,
    "INVALID_QUANTITY": _API_UNPROCESSABLE_STATUS_CODE,
    "INVALID_PRICE": _API_UNPROCESSABLE_STATUS_CODE,
}


def api_create_positions_router(settings: AppSettings) -> APIRouter:
    """Create router exposing the position computation endpoint.

    Args:
        settings: Runtime settings used for run defaults.

    Returns:
        APIRouter: Router exposing `/positions`.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(prefix="/positions", tags=["positions"])

    @router.post("")
    async def api_positions_compute(
        request: Request,
        include_closed: bool | None = Query(default=None),
        oversell_policy: str | None = Query(default=None),
    ) -> JSONResponse:
        """Compute positions from the CSV request body.

        Args:
            request: Incoming request carrying raw CSV text.
            include_closed: Optional override of the closed-position setting.
            oversell_policy: Optional override of the over-sell setting.

        Returns:
            JSONResponse: Snapshot payload or error envelope.
        """

        normalized_policy = (oversell_policy or settings.oversell_policy).strip().lower()
        if normalized_policy not in SUPPORTED_OVERSELL_POLICIES:
            payload = {
                "status": "error",
                "code": "INVALID_OVERSELL_POLICY",
                "message": f"unsupported oversell_policy={normalized_policy}",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        try:
            source_text = (await request.body()).decode("utf-8")
        except UnicodeDecodeError:
            payload = {
                "status": "error",
                "code": "INVALID_ENCODING",
                "message": "request body must be UTF-8 text",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        orchestrator = PositionReportOrchestrator(
            config=PositionReportConfig(
                oversell_policy=normalized_policy,
                include_closed=settings.include_closed_positions if include_closed is None else include_closed,
            )
        )
        report_result = orchestrator.job_execute(source_text)
        if report_result.status != JOB_STATUS_SUCCESS:
            payload = {
                "status": "error",
                "code": report_result.error_code,
                "message": report_result.error_message,
            }
            return JSONResponse(
                content=payload,
                status_code=_API_ERROR_STATUS_CODES.get(
                    report_result.error_code or "",
                    _API_UNPROCESSABLE_STATUS_CODE,
                ),
            )

        payload = {
            "items": [
                api_serialize_position_row(row, decimal_places=settings.report_decimal_places)
                for row in report_result.rows
            ],
            "anomalies": [api_serialize_anomaly(anomaly) for anomaly in report_result.anomalies],
            "summary": {
                "transaction_count": report_result.transaction_count,
                "processed_count": len(report_result.transitions),
                "skipped_count": len(report_result.anomalies),
                "oversell_policy": normalized_policy,
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_serialize_position_row(row: PositionSnapshotRow, decimal_places: int = 2) -> dict[str, object]:
    """Serialize one snapshot row; closed rows carry null prices."""

    return {
        "ticker": row.ticker,
        "shares_held": row.shares_held,
        "average_price": None
        if row.average_price is None
        else str(reporting_round_currency(row.average_price, decimal_places)),
        "average_price_exact": None if row.average_price is None else str(row.average_price),
        "is_open": row.is_open,
    }


def api_serialize_anomaly(anomaly: LedgerAnomaly) -> dict[str, object]:
    """Serialize one skipped transaction."""

    return {
        "code": anomaly.code,
        "message": anomaly.message,
        "ticker": anomaly.transaction.ticker,
        "date": anomaly.transaction.date.isoformat(),
        "action": anomaly.transaction.action.value,
        "shares": anomaly.transaction.shares,
    }


__all__ = ["api_create_positions_router", "api_serialize_anomaly", "api_serialize_position_row"]
