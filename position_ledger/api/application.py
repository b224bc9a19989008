"""FastAPI application factory for the position ledger service."""

from fastapi import FastAPI

from position_ledger.config import AppSettings

from .routers import api_create_health_router, api_create_positions_router


def create_api_application(settings: AppSettings) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for run defaults and metadata.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when settings are missing.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    application = FastAPI(title="Stock Position Ledger")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service identification payload."""

        return {
            "service": "position-ledger",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(settings=settings))
    application.include_router(api_create_positions_router(settings=settings))

    return application
