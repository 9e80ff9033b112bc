"""callpatch.

Patch functions on modules and classes for the duration of a test, spy on
the calls made to them, and assert or refute that specific calls happened.
"""

__version__ = "0.1.0"
__all__ = [
    "ANY",
    "CallAssertionError",
    "CallPattern",
    "CallpatchError",
    "InterceptionError",
    "InterceptionRegistry",
    "Literal",
    "MAX_ARITY",
    "MissingCallError",
    "Mode",
    "Patcher",
    "RecordedCall",
    "UndefinedFunctionError",
    "UnexpectedCallError",
    "UnresolvableTargetError",
    "_",
    "assert_called",
    "called",
    "configure",
    "default_patcher",
    "history",
    "patch",
    "refute_called",
    "restore",
    "spy",
    "unload",
]

from .api import (
    Patcher,
    assert_called,
    called,
    default_patcher,
    history,
    patch,
    refute_called,
    restore,
    spy,
    unload,
)
from .arity import MAX_ARITY
from .config import configure
from .exceptions import (
    CallAssertionError,
    CallpatchError,
    InterceptionError,
    MissingCallError,
    UndefinedFunctionError,
    UnexpectedCallError,
    UnresolvableTargetError,
)
from .history import RecordedCall
from .pattern import ANY, CallPattern, Literal
from .registry import InterceptionRegistry, Mode

_ = ANY
