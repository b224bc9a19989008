"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from position_ledger.ledger import LedgerAnomaly, PositionSnapshotRow, PositionTransition

JOB_STATUS_SUCCESS = "success"
JOB_STATUS_PARTIAL = "partial"
JOB_STATUS_FAILED = "failed"


@dataclass(frozen=True)
class PositionReportConfig:
    """Configuration values for one position report run.

    Attributes:
        oversell_policy: `abort` or `skip`, applied to every transaction of the run.
        include_closed: Whether fully closed tickers appear in the snapshot.
    """

    oversell_policy: str = "abort"
    include_closed: bool = False


@dataclass(frozen=True)
class PositionReportResult:
    """Result contract for one normalize-fold-snapshot run.

    Attributes:
        job_name: Job identifier.
        status: Final execution state (`success` or `failed`).
        rows: Snapshot rows, empty when the run failed.
        anomalies: Transactions skipped under the `skip` policy.
        transitions: Applied ledger transitions in input order.
        transaction_count: Number of normalized transactions.
        timeline: Structured stage events.
        error_code: Failure code when status is `failed`.
        error_message: Failure detail when status is `failed`.
    """

    job_name: str
    status: str
    rows: tuple[PositionSnapshotRow, ...] = ()
    anomalies: tuple[LedgerAnomaly, ...] = ()
    transitions: tuple[PositionTransition, ...] = ()
    transaction_count: int = 0
    timeline: list[dict[str, object]] = field(default_factory=list)
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class WalletExportFailure:
    """One transaction the wallet export could not register.

    Attributes:
        ticker: Ticker code.
        date: Transaction timestamp.
        message: Failure detail.
    """

    ticker: str
    date: datetime
    message: str


@dataclass(frozen=True)
class WalletExportResult:
    """Result contract for one wallet export run.

    Attributes:
        job_name: Job identifier.
        status: `success`, `partial`, or `failed`.
        exported_count: Trades registered upstream.
        failures: Trades that could not be registered.
        timeline: Structured stage events.
    """

    job_name: str
    status: str
    exported_count: int
    failures: tuple[WalletExportFailure, ...] = ()
    timeline: list[dict[str, object]] = field(default_factory=list)
