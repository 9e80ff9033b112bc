"""Global callpatch configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SNAPSHOT_ENV_VAR = "CALLPATCH_SNAPSHOT_ARGS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class _PatchConfig:
    snapshot_arguments: bool | None = None


_config = _PatchConfig()


def configure(snapshot_arguments: bool | None = None) -> None:
    """Configure callpatch settings.

    Args:
        snapshot_arguments: Copy call arguments at call time so later mutation
            by the caller does not rewrite recorded history. ``None`` leaves
            the current setting unchanged.
    """
    if snapshot_arguments is not None:
        _config.snapshot_arguments = bool(snapshot_arguments)


def reset_config() -> None:
    """Drop explicit settings so environment and defaults apply again."""
    _config.snapshot_arguments = None


def parse_flag(value: str) -> bool:
    """Parse an on/off flag as used by environment variables and ini options.

    Raises:
        ValueError: If the value is not a recognised flag.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid flag value: {value!r}")


def snapshot_arguments_enabled() -> bool:
    if _config.snapshot_arguments is not None:
        return _config.snapshot_arguments

    env_value = os.getenv(SNAPSHOT_ENV_VAR)
    if env_value is not None:
        try:
            return parse_flag(env_value)
        except ValueError:
            logger.warning(
                "Ignoring invalid %s=%r; argument snapshots stay enabled",
                SNAPSHOT_ENV_VAR,
                env_value,
            )
    return True
