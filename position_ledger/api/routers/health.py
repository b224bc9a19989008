"""Health endpoint router composition."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from position_ledger.config import AppSettings
from position_ledger.domain import HealthStatus


def api_create_health_router(settings: AppSettings) -> APIRouter:
    """Create health-check router reporting app status and active run policy.

    Args:
        settings: Runtime settings.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state."""

        health = HealthStatus(status="ok", detail="ledger ready")
        payload = {
            "status": health.status,
            "app": "up",
            "detail": health.detail,
            "environment": settings.environment_name,
            "oversell_policy": settings.oversell_policy,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
