"""Unit tests for callpatch configuration."""

import logging

import pytest

from callpatch.config import (
    SNAPSHOT_ENV_VAR,
    configure,
    parse_flag,
    reset_config,
    snapshot_arguments_enabled,
)


def test_snapshots_enabled_by_default() -> None:
    assert snapshot_arguments_enabled() is True


def test_configure_disables_snapshots() -> None:
    configure(snapshot_arguments=False)
    assert snapshot_arguments_enabled() is False


def test_configure_none_keeps_setting() -> None:
    configure(snapshot_arguments=False)
    configure()
    assert snapshot_arguments_enabled() is False


def test_reset_config_restores_default() -> None:
    configure(snapshot_arguments=False)
    reset_config()
    assert snapshot_arguments_enabled() is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [("0", False), ("off", False), ("FALSE", False), ("1", True), (" yes ", True)],
)
def test_environment_variable(monkeypatch, value: str, expected: bool) -> None:
    monkeypatch.setenv(SNAPSHOT_ENV_VAR, value)
    assert snapshot_arguments_enabled() is expected


def test_explicit_configuration_wins_over_environment(monkeypatch) -> None:
    monkeypatch.setenv(SNAPSHOT_ENV_VAR, "0")
    configure(snapshot_arguments=True)
    assert snapshot_arguments_enabled() is True


def test_invalid_environment_value_is_ignored(monkeypatch, caplog) -> None:
    monkeypatch.setenv(SNAPSHOT_ENV_VAR, "sometimes")
    with caplog.at_level(logging.WARNING, logger="callpatch.config"):
        assert snapshot_arguments_enabled() is True
    assert "Ignoring invalid CALLPATCH_SNAPSHOT_ARGS='sometimes'" in caplog.text


def test_parse_flag_rejects_unknown_values() -> None:
    with pytest.raises(ValueError):
        parse_flag("maybe")
