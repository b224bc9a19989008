"""Main module entrypoint for local runtime execution.

This module validates startup configuration and runs one report, one wallet
export, or the FastAPI service.
"""

import argparse
import sys
from typing import Sequence

import uvicorn

from position_ledger.bootstrap import (
    bootstrap_configure_logging,
    bootstrap_create_application,
    bootstrap_create_report_orchestrator,
    bootstrap_create_wallet_export_orchestrator,
)
from position_ledger.config import SUPPORTED_OVERSELL_POLICIES, config_load_settings
from position_ledger.jobs import JOB_STATUS_SUCCESS, PositionReportResult
from position_ledger.reporting import reporting_render_anomalies, reporting_render_position_table


def main(argv: Sequence[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to process arguments.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when a report or export run fails.
    """

    argument_parser = argparse.ArgumentParser(description="Stock position ledger runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="report",
        choices=("report", "api", "export"),
        help="Runtime command: `report` prints positions, `export` pushes open-position trades "
        "to the online wallet, `api` starts server",
        type=str,
    )
    argument_parser.add_argument(
        "--input",
        dest="input_path",
        type=str,
        help="Transaction CSV path; reads stdin when omitted",
    )
    argument_parser.add_argument(
        "--include-closed",
        dest="include_closed",
        action="store_true",
        default=None,
        help="Also list fully sold tickers",
    )
    argument_parser.add_argument(
        "--oversell-policy",
        dest="oversell_policy",
        choices=SUPPORTED_OVERSELL_POLICIES,
        help="Override OVERSELL_POLICY for this run",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    settings = config_load_settings()
    bootstrap_configure_logging(settings)

    if parsed_arguments.command == "api":
        application = bootstrap_create_application()
        uvicorn.run(
            application,
            host=settings.application_host,
            port=settings.application_port,
        )
        return

    source_text = main_read_source_text(parsed_arguments.input_path)
    report_orchestrator = bootstrap_create_report_orchestrator(
        settings=settings,
        oversell_policy=parsed_arguments.oversell_policy,
        include_closed=parsed_arguments.include_closed,
    )
    report_result = report_orchestrator.job_execute(source_text)
    if report_result.status != JOB_STATUS_SUCCESS:
        print(f"{report_result.error_code}: {report_result.error_message}", file=sys.stderr)
        raise SystemExit(1)

    if parsed_arguments.command == "export":
        export_orchestrator = bootstrap_create_wallet_export_orchestrator(settings)
        export_result = export_orchestrator.job_execute(report_result)
        print(f"exported {export_result.exported_count} trades, {len(export_result.failures)} failed")
        if export_result.status != JOB_STATUS_SUCCESS:
            raise SystemExit(1)
        return

    main_print_report(report_result, decimal_places=settings.report_decimal_places)


def main_read_source_text(input_path: str | None) -> str:
    """Read transaction CSV text from a file path or stdin."""

    if input_path is None:
        return sys.stdin.read()
    with open(input_path, encoding="utf-8-sig") as input_file:
        return input_file.read()


def main_print_report(report_result: PositionReportResult, decimal_places: int = 2) -> None:
    """Print the position table, followed by skipped transactions when present."""

    print(reporting_render_position_table(report_result.rows, decimal_places=decimal_places))
    anomalies_text = reporting_render_anomalies(report_result.anomalies)
    if anomalies_text:
        print(anomalies_text, file=sys.stderr)


if __name__ == "__main__":
    main()
