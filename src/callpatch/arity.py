"""Target resolution and arity discovery.

Interception works on namespaces: a module, or a class. Which argument counts
a function accepts is read from its signature once, when a replacement is
installed, and the result is bounded by ``MAX_ARITY``.
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Callable
from typing import Any

from .exceptions import UnresolvableTargetError

MAX_ARITY = 10

_ALL_ARITIES = frozenset(range(MAX_ARITY + 1))


def resolve_target(target: Any) -> Any:
    """Resolve a target to the module or class that will be intercepted.

    Args:
        target: A module, a class, or a dotted module path.

    Returns:
        The module or class object.

    Raises:
        UnresolvableTargetError: If the path cannot be imported or the object
            is neither a module nor a class.
    """
    if isinstance(target, str):
        try:
            return importlib.import_module(target)
        except ImportError as exc:
            raise UnresolvableTargetError(target, exc) from exc
    if inspect.ismodule(target) or inspect.isclass(target):
        return target
    raise UnresolvableTargetError(target)


def unwrap_descriptor(attribute: Any) -> Any:
    """Return the function held by a staticmethod or classmethod."""
    if isinstance(attribute, (staticmethod, classmethod)):
        return attribute.__func__
    return attribute


def callable_arities(func: Callable[..., Any]) -> frozenset[int]:
    """Return every argument count in ``[0, MAX_ARITY]`` that ``func`` accepts.

    Positional and keyword arguments count alike, so a function with two
    required and one defaulted parameter accepts arities 2 and 3. Callables
    without an introspectable signature are assumed to accept any arity.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return _ALL_ARITIES

    required = 0
    optional = 0
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            optional = MAX_ARITY
        elif parameter.default is parameter.empty:
            required += 1
        else:
            optional += 1

    return frozenset(
        arity for arity in range(required, required + optional + 1) if arity <= MAX_ARITY
    )


def resolve_arities(target: Any, function_name: str) -> frozenset[int]:
    """Return the arities ``function_name`` currently supports on ``target``.

    Methods are resolved without binding, so the arities of an instance method
    or classmethod include its ``self``/``cls`` parameter. A missing or
    non-callable attribute supports no arity.
    """
    resolved = resolve_target(target)
    try:
        attribute = inspect.getattr_static(resolved, function_name)
    except AttributeError:
        attribute = getattr(resolved, function_name, None)
    func = unwrap_descriptor(attribute)
    if func is None or not callable(func):
        return frozenset()
    return callable_arities(func)
