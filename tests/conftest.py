"""Pytest fixtures for shared test state."""

from __future__ import annotations

import pytest

import callpatch
from callpatch.config import SNAPSHOT_ENV_VAR, reset_config
from callpatch.registry import InterceptionRegistry


@pytest.fixture(autouse=True)
def _reset_callpatch_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global callpatch state between tests."""
    monkeypatch.delenv(SNAPSHOT_ENV_VAR, raising=False)
    reset_config()
    callpatch.unload()
    yield
    callpatch.unload()
    reset_config()


@pytest.fixture
def registry() -> InterceptionRegistry:
    registry = InterceptionRegistry()
    yield registry
    registry.unload()
