from __future__ import annotations

import pytest

from devicesync.config import (
    IMMEDIATE_UNKNOWN_ON_MISSING,
    ConfigurationError,
    env_flag,
    get_reconciliation_config,
    optional_env_var,
)


def test_optional_env_var_falls_back_for_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    assert optional_env_var("EXAMPLE_VAR", "fallback") == "fallback"


def test_optional_env_var_strips_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    assert optional_env_var("EXAMPLE_VAR", "fallback") == "value"


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_env_flag_parses_booleans(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG") is expected


def test_env_flag_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError) as exc:
        env_flag("EXAMPLE_FLAG")

    assert "EXAMPLE_FLAG" in str(exc.value)


def test_reconciliation_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEVICESYNC_MISSING_FLAG_KEY", raising=False)
    monkeypatch.delenv("DEVICESYNC_MISSING_FLAG_DEFAULT", raising=False)

    config = get_reconciliation_config()

    assert config.missing_flag_key == IMMEDIATE_UNKNOWN_ON_MISSING
    assert config.missing_flag_default is False


def test_reconciliation_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVICESYNC_MISSING_FLAG_KEY", "custom-flag")
    monkeypatch.setenv("DEVICESYNC_MISSING_FLAG_DEFAULT", "true")

    config = get_reconciliation_config()

    assert config.missing_flag_key == "custom-flag"
    assert config.missing_flag_default is True
