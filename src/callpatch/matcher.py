"""Matching recorded calls against patterns, and rendering history."""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from typing import Any

from .history import RecordedCall
from .pattern import CallPattern


def describe_target(target: Any) -> str:
    """Short name of a target as shown in history and failure messages."""
    if inspect.ismodule(target):
        return target.__name__
    if inspect.isclass(target):
        return target.__qualname__
    return repr(target)


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:  # noqa: BLE001 - a broken __repr__ must not hide the report
        return f"<unrepresentable {type(value).__name__}>"


def format_arguments(args: Iterable[Any], kwargs: Mapping[str, Any] | None = None) -> str:
    """Render arguments as ``a,b,name=c``."""
    parts = [_safe_repr(arg) for arg in args]
    parts.extend(f"{name}={_safe_repr(value)}" for name, value in (kwargs or {}).items())
    return ",".join(parts)


def format_call(
    target: Any,
    function_name: str,
    args: Iterable[Any],
    kwargs: Mapping[str, Any] | None = None,
) -> str:
    return f"{describe_target(target)}.{function_name}({format_arguments(args, kwargs)})"


def call_matches(call: RecordedCall, pattern: CallPattern) -> bool:
    """Check one recorded call against a pattern.

    Names must be equal, the number of positional arguments and the set of
    keyword names must be the same, and every term must match its argument.
    """
    if call.function_name != pattern.function_name:
        return False
    if len(call.args) != len(pattern.args):
        return False
    if set(call.kwargs) != set(pattern.kwargs):
        return False
    if not all(term.matches(arg) for term, arg in zip(pattern.args, call.args)):
        return False
    return all(term.matches(call.kwargs[name]) for name, term in pattern.kwargs.items())


def matches(calls: Iterable[RecordedCall], pattern: CallPattern) -> bool:
    return any(call_matches(call, pattern) for call in calls)


def render(calls: Iterable[RecordedCall]) -> str:
    """Render history as numbered lines, one per call, in call order.

    Each line reads ``{index}. {target}.{function}({args}) -> {result}``.
    """
    lines = []
    for index, call in enumerate(calls, start=1):
        if call.exception is not None:
            outcome = f"raised {_safe_repr(call.exception)}"
        else:
            outcome = _safe_repr(call.result)
        call_text = format_call(call.target, call.function_name, call.args, call.kwargs)
        lines.append(f"{index}. {call_text} -> {outcome}")
    return "\n".join(lines)
