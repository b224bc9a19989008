"""Configuration package for runtime settings and startup validation."""

from .settings import (
    SUPPORTED_OVERSELL_POLICIES,
    AppSettings,
    SettingsLoadError,
    config_load_settings,
    config_require_wallet_export_settings,
)

__all__ = [
    "SUPPORTED_OVERSELL_POLICIES",
    "AppSettings",
    "SettingsLoadError",
    "config_load_settings",
    "config_require_wallet_export_settings",
]
