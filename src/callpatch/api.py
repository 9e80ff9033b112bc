"""Public entry points for spying, patching and asserting calls."""

from __future__ import annotations

from types import TracebackType
from typing import Any

from .arity import resolve_target
from .diagnostics import missing_call_message, unexpected_call_message
from .exceptions import MissingCallError, UnexpectedCallError
from .history import RecordedCall
from .pattern import CallPattern
from .registry import InterceptionRegistry


class Patcher:
    """A test session's view of an interception registry.

    Every operation acts on the wrapped registry only, so a test can create its
    own ``Patcher`` and unload it independently of the module-level default.
    Used as a context manager, it unloads everything it touched on exit.

    Attributes:
        registry: The registry holding interception state and history.
    """

    def __init__(self, registry: InterceptionRegistry | None = None) -> None:
        self.registry = registry if registry is not None else InterceptionRegistry()

    def spy(self, target: Any) -> None:
        """Record calls made to ``target`` without changing its behavior."""
        self.registry.ensure_intercepted(target)

    def patch(self, target: Any, function_name: str, mock: Any) -> Any:
        """Make ``function_name`` return ``mock``, or run it when callable.

        Returns ``mock`` so the call can double as fixture construction::

            expected = patch(service, "fetch", {"id": 1})
        """
        return self.registry.override(target, function_name, mock)

    def restore(self, target: Any) -> None:
        self.registry.restore(target)

    def unload(self) -> None:
        self.registry.unload()

    def history(self, target: Any) -> tuple[RecordedCall, ...]:
        return self.registry.history(target)

    def called(self, target: Any, function_name: str, /, *args: Any, **kwargs: Any) -> bool:
        """Check whether a call matching the arguments was recorded.

        Arguments may be plain values, compared with ``==``, or the ``_``
        wildcard, which matches any value in its position.
        """
        return self.registry.called(target, CallPattern.of(function_name, *args, **kwargs))

    def assert_called(
        self, target: Any, function_name: str, /, *args: Any, **kwargs: Any
    ) -> None:
        """Raise ``MissingCallError`` unless a matching call was recorded."""
        pattern = CallPattern.of(function_name, *args, **kwargs)
        if self.registry.called(target, pattern):
            return
        resolved = resolve_target(target)
        history = self.registry.render(resolved)
        raise MissingCallError(
            missing_call_message(resolved, pattern, history), resolved, pattern, history
        )

    def refute_called(
        self, target: Any, function_name: str, /, *args: Any, **kwargs: Any
    ) -> None:
        """Raise ``UnexpectedCallError`` if a matching call was recorded."""
        pattern = CallPattern.of(function_name, *args, **kwargs)
        if not self.registry.called(target, pattern):
            return
        resolved = resolve_target(target)
        history = self.registry.render(resolved)
        raise UnexpectedCallError(
            unexpected_call_message(resolved, pattern, history), resolved, pattern, history
        )

    def __enter__(self) -> Patcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unload()


_default_patcher = Patcher()


def default_patcher() -> Patcher:
    """Return the process-wide patcher behind the module-level functions."""
    return _default_patcher


def spy(target: Any) -> None:
    """Spy on ``target`` with the default patcher."""
    _default_patcher.spy(target)


def patch(target: Any, function_name: str, mock: Any) -> Any:
    """Patch ``function_name`` on ``target`` with the default patcher."""
    return _default_patcher.patch(target, function_name, mock)


def restore(target: Any) -> None:
    _default_patcher.restore(target)


def unload() -> None:
    _default_patcher.unload()


def history(target: Any) -> tuple[RecordedCall, ...]:
    return _default_patcher.history(target)


def called(target: Any, function_name: str, /, *args: Any, **kwargs: Any) -> bool:
    return _default_patcher.called(target, function_name, *args, **kwargs)


def assert_called(target: Any, function_name: str, /, *args: Any, **kwargs: Any) -> None:
    _default_patcher.assert_called(target, function_name, *args, **kwargs)


def refute_called(target: Any, function_name: str, /, *args: Any, **kwargs: Any) -> None:
    _default_patcher.refute_called(target, function_name, *args, **kwargs)
