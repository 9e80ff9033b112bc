"""Interception registry.

This module installs proxies on modules and classes, routes every call made
through them to either the original implementation or a replacement, and
records each call in the target's history. It also restores targets to their
original state.
"""

from __future__ import annotations

import contextlib
import enum
import functools
import inspect
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .arity import MAX_ARITY, callable_arities, resolve_target, unwrap_descriptor
from .exceptions import InterceptionError, UndefinedFunctionError, UnresolvableTargetError
from .history import CallHistory, RecordedCall, snapshot_value
from .matcher import describe_target, matches, render
from .pattern import CallPattern
from .replacement import build_replacement

logger = logging.getLogger(__name__)

PROXY_MARKER = "__callpatch_registry__"

_MISSING = object()


class Mode(enum.Enum):
    PASSTHROUGH = "passthrough"
    OVERRIDE = "override"


@dataclass
class InterceptionState:
    """Everything needed to run, record and restore one intercepted target.

    Attributes:
        target: The intercepted module or class.
        originals: Raw attributes as found in ``vars(target)``; ``_MISSING``
            marks attributes that were only reachable by inheritance.
        implementations: Callables used for passthrough calls.
        overrides: Replacement callables by function name and arity.
        history: Calls recorded since interception was installed.
    """

    target: Any
    originals: dict[str, Any] = field(default_factory=dict)
    implementations: dict[str, Callable[..., Any]] = field(default_factory=dict)
    overrides: dict[str, dict[int, Callable[..., Any]]] = field(default_factory=dict)
    history: CallHistory = field(init=False)

    def __post_init__(self) -> None:
        self.history = CallHistory(self.target)

    def mode(self, function_name: str) -> Mode:
        if self.overrides.get(function_name):
            return Mode.OVERRIDE
        return Mode.PASSTHROUGH

    def replacement_for(self, function_name: str, arity: int) -> Callable[..., Any] | None:
        return self.overrides.get(function_name, {}).get(arity)


def _proxy_owner(attribute: Any) -> Any:
    return getattr(unwrap_descriptor(attribute), PROXY_MARKER, None)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_interceptable(name: str, attribute: Any) -> bool:
    if _is_dunder(name):
        return False
    return (
        inspect.isfunction(attribute)
        or inspect.isbuiltin(attribute)
        or isinstance(attribute, (staticmethod, classmethod))
    )


def _lookup_static(target: Any, name: str) -> Any:
    try:
        return inspect.getattr_static(target, name)
    except AttributeError:
        return getattr(target, name)


def _inherited_names(target: Any) -> list[str]:
    """Interceptable names a class only reaches through its bases."""
    if not inspect.isclass(target):
        return []
    seen = set(vars(target))
    names: list[str] = []
    for base in target.__mro__[1:]:
        if base is object:
            continue
        for name in vars(base):
            if name in seen:
                continue
            seen.add(name)
            if _is_interceptable(name, inspect.getattr_static(target, name)):
                names.append(name)
    return names


class InterceptionRegistry:
    """Owns the interception state of every target it has touched.

    A registry is an ordinary object: tests can use the process-wide default
    through the module-level API, or create their own and unload it when done.
    A target can only be intercepted by one registry at a time.
    """

    def __init__(self) -> None:
        self._states: dict[Any, InterceptionState] = {}
        self._paused = 0

    # Installation

    def ensure_intercepted(self, target: Any) -> InterceptionState:
        """Intercept every public function of ``target`` in passthrough mode.

        Calling this again for an intercepted target returns the existing
        state untouched, keeping its history and overrides.

        Raises:
            UnresolvableTargetError: If the target cannot be resolved.
            InterceptionError: If another registry intercepts the target or
                its attributes cannot be replaced.
        """
        resolved = resolve_target(target)
        state = self._states.get(resolved)
        if state is not None:
            return state

        names = []
        for name, attribute in list(vars(resolved).items()):
            owner = _proxy_owner(attribute)
            if owner is not None and owner is not self:
                raise InterceptionError(
                    f"{describe_target(resolved)} is already intercepted by another registry"
                )
            if _is_interceptable(name, attribute):
                names.append(name)
        names.extend(_inherited_names(resolved))

        state = InterceptionState(resolved)
        try:
            for name in names:
                self._install(state, name)
        except InterceptionError:
            self._uninstall(state)
            raise

        self._states[resolved] = state
        logger.debug(
            "Intercepted %s (%d functions)", describe_target(resolved), len(names)
        )
        return state

    def _install(self, state: InterceptionState, name: str) -> None:
        target = state.target
        raw = vars(target).get(name, _MISSING)
        attribute = raw if raw is not _MISSING else _lookup_static(target, name)
        implementation = unwrap_descriptor(attribute)
        proxy = self._make_proxy(target, name, implementation)

        if isinstance(attribute, staticmethod):
            installed: Any = staticmethod(proxy)
        elif isinstance(attribute, classmethod):
            installed = classmethod(proxy)
        elif inspect.isclass(target) and not inspect.isfunction(attribute):
            # Only plain functions bind to instances.
            installed = staticmethod(proxy)
        else:
            installed = proxy

        try:
            setattr(target, name, installed)
        except (AttributeError, TypeError) as exc:
            raise InterceptionError(
                f"Cannot intercept {describe_target(target)}.{name}: {exc}"
            ) from exc

        state.originals[name] = raw
        state.implementations[name] = implementation

    def _make_proxy(
        self, target: Any, name: str, implementation: Callable[..., Any]
    ) -> Callable[..., Any]:
        registry = self

        @functools.wraps(implementation)
        def proxy(*args: Any, **kwargs: Any) -> Any:
            if not registry.is_recording(target):
                return implementation(*args, **kwargs)
            return registry.dispatch(target, name, args, kwargs)

        setattr(proxy, PROXY_MARKER, registry)
        return proxy

    def override(self, target: Any, function_name: str, mock: Any) -> Any:
        """Replace ``function_name`` on ``target`` with ``mock``.

        A callable ``mock`` runs in place of the original for every arity the
        mock accepts; calls at other arities still reach the original. Any
        other value, classes included, is
        returned by a replacement built for every arity the original accepts.
        Other functions keep their current behavior.

        Returns:
            ``mock``, unchanged.

        Raises:
            UndefinedFunctionError: If ``target`` has no callable of that name.
        """
        state = self.ensure_intercepted(target)
        if function_name not in state.implementations:
            self._install_lazily(state, function_name)

        if callable(mock) and not inspect.isclass(mock):
            replacements = {arity: mock for arity in callable_arities(mock)}
        else:
            original_arities = callable_arities(state.implementations[function_name])
            replacements = {
                arity: build_replacement(arity, mock) for arity in original_arities
            }

        state.overrides.setdefault(function_name, {}).update(replacements)
        logger.debug(
            "Overrode %s.%s for arities %s",
            describe_target(state.target),
            function_name,
            sorted(replacements),
        )
        return mock

    def _install_lazily(self, state: InterceptionState, function_name: str) -> None:
        attribute = getattr(state.target, function_name, _MISSING)
        if attribute is _MISSING or not callable(attribute):
            raise UndefinedFunctionError(state.target, function_name)
        owner = _proxy_owner(attribute)
        if owner is not None and owner is not self:
            raise InterceptionError(
                f"{describe_target(state.target)}.{function_name} is already "
                "intercepted by another registry"
            )
        self._install(state, function_name)

    # Dispatch

    def is_recording(self, target: Any) -> bool:
        return not self._paused and target in self._states

    @contextlib.contextmanager
    def paused(self) -> Iterator[None]:
        """Let calls through to the originals without recording them.

        Used while copying, comparing or rendering arguments, whose ``__eq__``
        or ``__repr__`` may call intercepted functions themselves.
        """
        self._paused += 1
        try:
            yield
        finally:
            self._paused -= 1

    def dispatch(
        self,
        target: Any,
        function_name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Run one intercepted call and record it.

        The override installed for the call's arity runs if there is one,
        otherwise the original implementation does. Exceptions are recorded
        and re-raised unchanged.
        """
        state = self._states[target]
        with self.paused():
            recorded_args = tuple(snapshot_value(arg) for arg in args)
            recorded_kwargs = {name: snapshot_value(value) for name, value in kwargs.items()}

        arity = len(args) + len(kwargs)
        replacement = state.replacement_for(function_name, arity) if arity <= MAX_ARITY else None
        func = replacement if replacement is not None else state.implementations[function_name]
        logger.debug(
            "Dispatching %s.%s/%d (%s)",
            describe_target(target),
            function_name,
            arity,
            Mode.OVERRIDE.value if replacement is not None else Mode.PASSTHROUGH.value,
        )

        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            state.history.append(
                function_name, recorded_args, recorded_kwargs, exception=exc
            )
            raise

        state.history.append(function_name, recorded_args, recorded_kwargs, result=result)
        return result

    # Queries

    def is_intercepted(self, target: Any) -> bool:
        return self.state_for(target) is not None

    def state_for(self, target: Any) -> InterceptionState | None:
        return self._states.get(resolve_target(target))

    def targets(self) -> list[Any]:
        return list(self._states)

    def history(self, target: Any) -> tuple[RecordedCall, ...]:
        """Return the calls recorded for ``target``, oldest first.

        A target that was never intercepted has an empty history.
        """
        state = self.state_for(target)
        if state is None:
            return ()
        return state.history.all()

    def called(self, target: Any, pattern: CallPattern) -> bool:
        state = self.state_for(target)
        if state is None:
            return False
        calls = state.history.for_function(pattern.function_name)
        with self.paused():
            return matches(calls, pattern)

    def render(self, target: Any) -> str:
        calls = self.history(target)
        with self.paused():
            return render(calls)

    # Lifecycle

    def restore(self, target: Any) -> None:
        """Put the original functions back and drop overrides and history.

        Restoring a target that is not intercepted, or that cannot even be
        resolved, does nothing.
        """
        try:
            resolved = resolve_target(target)
        except UnresolvableTargetError:
            logger.debug("Nothing to restore for unresolvable target %r", target)
            return
        state = self._states.pop(resolved, None)
        if state is None:
            return
        self._uninstall(state)
        state.overrides.clear()
        state.history.clear()
        logger.debug("Restored %s", describe_target(resolved))

    def _uninstall(self, state: InterceptionState) -> None:
        for name, original in state.originals.items():
            if original is _MISSING:
                delattr(state.target, name)
            else:
                setattr(state.target, name, original)
        state.originals.clear()
        state.implementations.clear()

    def unload(self) -> None:
        """Restore every target this registry intercepts."""
        for target in list(self._states):
            self.restore(target)
