"""pytest plugin for callpatch.

Registered through the ``pytest11`` entry point. It guarantees that nothing
patched through the module-level API outlives the test that patched it, and
provides:
    patcher: A fresh ``Patcher`` unloaded at the end of the test

Configuration (pytest.ini or pyproject.toml):
    callpatch_snapshot_args: Copy call arguments at call time (default: true)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from callpatch.api import Patcher, unload
from callpatch.config import configure, parse_flag


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "callpatch_snapshot_args",
        "Copy call arguments at call time so later mutation does not change history",
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the marker and apply ini configuration."""
    config.addinivalue_line(
        "markers",
        "callpatch: test patches or spies on functions with callpatch",
    )
    value = config.getini("callpatch_snapshot_args")
    if value:
        try:
            configure(snapshot_arguments=parse_flag(str(value)))
        except ValueError as exc:
            raise pytest.UsageError(f"callpatch_snapshot_args: {exc}") from exc


@pytest.fixture(autouse=True)
def _callpatch_unload() -> Iterator[None]:
    """Restore everything patched with the default patcher, even on failure."""
    yield
    unload()


@pytest.fixture
def patcher() -> Iterator[Patcher]:
    """A patcher of its own for the current test."""
    with Patcher() as session:
        yield session
