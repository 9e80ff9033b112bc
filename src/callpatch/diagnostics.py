"""Failure messages for call assertions."""

from __future__ import annotations

from typing import Any

from .matcher import format_call
from .pattern import CallPattern


def _report(heading: str, target: Any, pattern: CallPattern, history: str) -> str:
    call = format_call(target, pattern.function_name, pattern.args, pattern.kwargs)
    lines = [
        "",
        "",
        heading,
        "",
        f"   {call}",
        "",
        "Calls which were received:",
        "",
        history,
    ]
    return "\n".join(lines)


def missing_call_message(target: Any, pattern: CallPattern, history: str) -> str:
    return _report(
        "Expected but did not receive the following call:", target, pattern, history
    )


def unexpected_call_message(target: Any, pattern: CallPattern, history: str) -> str:
    return _report("Unexpected call received:", target, pattern, history)
