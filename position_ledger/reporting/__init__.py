"""Reporting package for text rendering of position snapshots."""

from .table import (
    reporting_render_anomalies,
    reporting_render_position_table,
    reporting_round_currency,
)

__all__ = [
    "reporting_render_anomalies",
    "reporting_render_position_table",
    "reporting_round_currency",
]
