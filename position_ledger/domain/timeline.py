"""Stage timeline helpers for report and export runs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

_TIMELINE_STATUSES = frozenset({"started", "completed", "failed", "skipped"})


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name, e.g. `normalize` or `fold`.
        status: One of `started`, `completed`, `failed`, `skipped`.
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.

    Raises:
        ValueError: Raised when stage is blank or status is unknown.
    """

    normalized_stage = stage.strip()
    if not normalized_stage:
        raise ValueError("stage must not be blank")
    if status not in _TIMELINE_STATUSES:
        raise ValueError(f"unsupported timeline status={status}")

    event_payload: dict[str, object] = {
        "stage": normalized_stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload
