"""Constant-returning replacements of a fixed arity."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from .arity import MAX_ARITY


def build_replacement(arity: int, value: Any) -> Callable[..., Any]:
    """Build a callable that takes exactly ``arity`` arguments and returns ``value``.

    Arguments may be passed positionally or by keyword; only their count is
    checked and their values are ignored.

    Raises:
        ValueError: If ``arity`` is outside ``[0, MAX_ARITY]``.
    """
    if not 0 <= arity <= MAX_ARITY:
        raise ValueError(f"arity must be between 0 and {MAX_ARITY}, got {arity}")

    def replacement(*args: Any, **kwargs: Any) -> Any:
        received = len(args) + len(kwargs)
        if received != arity:
            raise TypeError(
                f"replacement takes {arity} argument(s) but {received} were given"
            )
        return value

    replacement.__name__ = f"replacement_{arity}"
    replacement.__qualname__ = replacement.__name__
    replacement.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
        [
            inspect.Parameter(f"arg{index}", inspect.Parameter.POSITIONAL_OR_KEYWORD)
            for index in range(arity)
        ]
    )
    return replacement
