"""Custom exceptions for interception and call assertions."""

from typing import Any


class CallpatchError(Exception):
    """Base class for callpatch errors."""


class InterceptionError(CallpatchError):
    """Raised when interception cannot be installed on a target."""


class UnresolvableTargetError(InterceptionError):
    """Raised when a target cannot be imported or is not a module or class."""

    def __init__(self, target: Any, original_error: Exception | None = None) -> None:
        self.target = target
        self.original_error = original_error
        message = f"Cannot resolve target {target!r}"
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)


class UndefinedFunctionError(InterceptionError):
    """Raised when patching a name the target does not define as a callable."""

    def __init__(self, target: Any, function_name: str) -> None:
        self.target = target
        self.function_name = function_name
        super().__init__(f"{target!r} has no callable named {function_name!r}")


class CallAssertionError(AssertionError):
    """Base class for failed call assertions.

    Carries the structured pieces of the diagnostic so callers can build their
    own report instead of parsing the message.
    """

    def __init__(self, message: str, target: Any, pattern: Any, history: str) -> None:
        self.target = target
        self.pattern = pattern
        self.history = history
        super().__init__(message)


class MissingCallError(CallAssertionError):
    """Raised when an expected call was not recorded."""


class UnexpectedCallError(CallAssertionError):
    """Raised when a refuted call was recorded."""
