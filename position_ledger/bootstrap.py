"""Application bootstrap wiring for startup validation and dependency assembly."""

import logging

from fastapi import FastAPI

from position_ledger.adapters import Investidor10WalletAdapter
from position_ledger.api import create_api_application
from position_ledger.config import AppSettings, config_load_settings, config_require_wallet_export_settings
from position_ledger.jobs import PositionReportConfig, PositionReportOrchestrator, WalletExportOrchestrator

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def bootstrap_configure_logging(settings: AppSettings) -> None:
    """Configure root logging once from validated settings."""

    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT)


def bootstrap_create_application() -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    return create_api_application(settings=settings)


def bootstrap_create_report_orchestrator(
    settings: AppSettings,
    oversell_policy: str | None = None,
    include_closed: bool | None = None,
) -> PositionReportOrchestrator:
    """Build report orchestrator with optional per-run overrides.

    Args:
        settings: Validated runtime settings.
        oversell_policy: Optional override of settings.oversell_policy.
        include_closed: Optional override of settings.include_closed_positions.

    Returns:
        PositionReportOrchestrator: Configured orchestrator.

    Raises:
        ValueError: Raised when the resolved over-sell policy is unsupported.
    """

    return PositionReportOrchestrator(
        config=PositionReportConfig(
            oversell_policy=oversell_policy or settings.oversell_policy,
            include_closed=settings.include_closed_positions if include_closed is None else include_closed,
        )
    )


def bootstrap_create_wallet_export_orchestrator(settings: AppSettings) -> WalletExportOrchestrator:
    """Build wallet export orchestrator wired to the Investidor10 adapter.

    Raises:
        SettingsLoadError: Raised when wallet credentials are not configured.
    """

    session, wallet_id = config_require_wallet_export_settings(settings)
    wallet_adapter = Investidor10WalletAdapter(
        session=session,
        wallet_id=wallet_id,
        base_url=settings.investidor10_base_url,
        request_timeout_seconds=settings.request_timeout_seconds,
    )
    return WalletExportOrchestrator(wallet_adapter=wallet_adapter)
