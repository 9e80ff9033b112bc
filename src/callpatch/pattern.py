"""Call patterns used to query recorded history.

Each argument position of a pattern is either a ``Literal`` compared with
``==`` or the ``ANY`` wildcard, which matches whatever was passed there.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union


class Wildcard:
    """Pattern term matching any single argument."""

    _instance: Wildcard | None = None

    def __new__(cls) -> Wildcard:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def matches(self, value: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "_"

    def __reduce__(self) -> tuple[Any, ...]:
        return (Wildcard, ())


ANY = Wildcard()


@dataclass(frozen=True)
class Literal:
    """Pattern term matching an argument equal to ``value``."""

    value: Any

    def matches(self, value: Any) -> bool:
        try:
            return bool(self.value == value)
        except Exception:  # noqa: BLE001 - arbitrary __eq__ and __bool__ implementations
            return False

    def __repr__(self) -> str:
        return repr(self.value)


Term = Union[Literal, Wildcard]


def coerce_term(term: Any) -> Term:
    """Wrap a plain value in ``Literal``; terms are returned unchanged."""
    if isinstance(term, (Literal, Wildcard)):
        return term
    return Literal(term)


@dataclass(frozen=True)
class CallPattern:
    """A function name plus positional and keyword match terms."""

    function_name: str
    args: tuple[Term, ...] = ()
    kwargs: Mapping[str, Term] = field(default_factory=dict)

    @classmethod
    def of(cls, function_name: str, *args: Any, **kwargs: Any) -> CallPattern:
        return cls(
            function_name=function_name,
            args=tuple(coerce_term(arg) for arg in args),
            kwargs={name: coerce_term(value) for name, value in kwargs.items()},
        )
