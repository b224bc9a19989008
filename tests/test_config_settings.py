"""Regression tests for environment-driven settings validation."""

from __future__ import annotations

import pytest

from position_ledger.config import (
    AppSettings,
    SettingsLoadError,
    config_load_settings,
    config_require_wallet_export_settings,
)


def test_config_load_settings_normalizes_environment_values(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read policy, log level and wallet settings from the environment.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate normalized values.

    Raises:
        AssertionError: Raised when values are not normalized.
    """

    monkeypatch.setenv("OVERSELL_POLICY", " SKIP ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("INCLUDE_CLOSED_POSITIONS", "true")
    monkeypatch.setenv("INVESTIDOR10_BASE_URL", "https://wallet.example.test/")
    monkeypatch.setenv("INVESTIDOR10_SESSION", "  ")

    settings = config_load_settings()

    assert settings.oversell_policy == "skip"
    assert settings.log_level == "DEBUG"
    assert settings.include_closed_positions is True
    assert settings.investidor10_base_url == "https://wallet.example.test"
    assert settings.investidor10_session is None


@pytest.mark.parametrize(
    ("variable_name", "variable_value"),
    [("OVERSELL_POLICY", "clamp"), ("LOG_LEVEL", "verbose"), ("REPORT_DECIMAL_PLACES", "9")],
)
def test_config_load_settings_raises_load_error_for_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    variable_name: str,
    variable_value: str,
) -> None:
    """Wrap validation failures in SettingsLoadError."""

    monkeypatch.setenv(variable_name, variable_value)

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_require_wallet_export_settings_needs_session_and_wallet() -> None:
    """Fail wallet export wiring until both credentials are present.

    Returns:
        None: Assertions validate credential checks.

    Raises:
        AssertionError: Raised when missing credentials are accepted.
    """

    with pytest.raises(SettingsLoadError, match="INVESTIDOR10_SESSION"):
        config_require_wallet_export_settings(AppSettings(investidor10_session=None, investidor10_wallet_id=3))
    with pytest.raises(SettingsLoadError, match="INVESTIDOR10_WALLET_ID"):
        config_require_wallet_export_settings(AppSettings(investidor10_session="cookie", investidor10_wallet_id=None))

    assert config_require_wallet_export_settings(
        AppSettings(investidor10_session="cookie", investidor10_wallet_id=3)
    ) == ("cookie", 3)
