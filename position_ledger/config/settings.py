"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_OVERSELL_POLICIES = ("abort", "skip")
_SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for report runs, API runtime and wallet export.

    Environment variable names map directly to field names in uppercase.
    Example: `oversell_policy` reads from `OVERSELL_POLICY`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        oversell_policy: Run-wide handling for sells exceeding held shares (`abort` or `skip`).
        include_closed_positions: Whether fully closed tickers appear in snapshots.
        report_decimal_places: Currency precision used when presenting average prices.
        investidor10_base_url: Base URL of the Investidor10 wallet service.
        investidor10_session: Laravel session cookie value used by wallet export.
        investidor10_wallet_id: Target Investidor10 wallet identifier.
        request_timeout_seconds: HTTP request timeout for wallet export calls.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    oversell_policy: str = Field(default="abort")
    include_closed_positions: bool = Field(default=False)
    report_decimal_places: int = Field(default=2, ge=0, le=8)
    investidor10_base_url: str = Field(default="https://investidor10.com.br")
    investidor10_session: str | None = Field(default=None)
    investidor10_wallet_id: int | None = Field(default=None, ge=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("oversell_policy")
    @classmethod
    def _validate_oversell_policy(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in SUPPORTED_OVERSELL_POLICIES:
            raise ValueError(f"oversell_policy must be one of {', '.join(SUPPORTED_OVERSELL_POLICIES)}")
        return normalized_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _SUPPORTED_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_SUPPORTED_LOG_LEVELS)}")
        return normalized_value

    @field_validator("investidor10_base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped_value = value.strip().rstrip("/")
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("investidor10_session")
    @classmethod
    def _validate_optional_session(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_require_wallet_export_settings(settings: AppSettings) -> tuple[str, int]:
    """Return wallet export credentials or fail when they are not configured.

    Args:
        settings: Validated runtime settings.

    Returns:
        tuple[str, int]: Session cookie value and wallet identifier.

    Raises:
        SettingsLoadError: Raised when session or wallet id is missing.
    """

    if settings.investidor10_session is None:
        raise SettingsLoadError("Wallet export requires INVESTIDOR10_SESSION to be set.")
    if settings.investidor10_wallet_id is None:
        raise SettingsLoadError("Wallet export requires INVESTIDOR10_WALLET_ID to be set.")
    return settings.investidor10_session, settings.investidor10_wallet_id
