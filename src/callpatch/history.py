"""Per-target call history.

Every call routed through an intercepted target is appended here, in the
order the calls completed. Arguments are captured with dill at call time so a
caller mutating a list after passing it does not rewrite what was recorded.
"""

from __future__ import annotations

import io
import logging
import mmap
import pickle
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import dill

from .config import snapshot_arguments_enabled

logger = logging.getLogger(__name__)

_IMMUTABLE_TYPES = (type(None), bool, int, float, complex, str, bytes, range)

# dill reopens file handles by name when loading them, truncating "w" files.
_RESOURCE_TYPES = (io.IOBase, socket.socket, mmap.mmap)


class _SnapshotPickler(dill.Pickler):
    """dill pickler that refuses to capture open resources."""

    def reducer_override(self, obj: Any) -> Any:
        if isinstance(obj, _RESOURCE_TYPES):
            raise pickle.PicklingError(f"Refusing to snapshot {type(obj).__name__}")
        return NotImplemented


def _copy(value: Any) -> Any:
    buffer = io.BytesIO()
    _SnapshotPickler(buffer).dump(value)
    return dill.loads(buffer.getvalue())


@dataclass(frozen=True)
class RecordedCall:
    """A single intercepted call and its outcome."""

    target: Any
    function_name: str
    args: tuple[Any, ...]
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    position: int = 0
    result: Any = None
    exception: Exception | None = None

    @property
    def raised(self) -> bool:
        return self.exception is not None

    @property
    def arity(self) -> int:
        return len(self.args) + len(self.kwargs)


def snapshot_value(value: Any) -> Any:
    """Capture the state of an argument at call time.

    The dill copy is kept only when it still compares equal to the original,
    so values compared by identity keep matching themselves. Values dill cannot
    copy, and values holding open files or sockets, are kept as live
    references.
    """
    if isinstance(value, _IMMUTABLE_TYPES) or not snapshot_arguments_enabled():
        return value
    try:
        copied = _copy(value)
    except Exception:  # noqa: BLE001 - dill fails in many ways for exotic objects
        logger.debug(
            "Keeping live reference for uncopyable %s", type(value).__name__, exc_info=True
        )
        return value
    try:
        if copied == value:
            return copied
    except Exception:  # noqa: BLE001 - arbitrary __eq__ implementations
        logger.debug(
            "Keeping live reference for %s with failing __eq__", type(value).__name__
        )
    return value


class CallHistory:
    """Append-only, chronologically ordered log of calls made on one target.

    Attributes:
        target: The intercepted module or class.
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        self._calls: list[RecordedCall] = []

    def append(
        self,
        function_name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any] | None = None,
        result: Any = None,
        exception: Exception | None = None,
    ) -> RecordedCall:
        """Record a completed call.

        Returns:
            The stored record.
        """
        call = RecordedCall(
            target=self.target,
            function_name=function_name,
            args=tuple(args),
            kwargs=dict(kwargs or {}),
            position=len(self._calls),
            result=result,
            exception=exception,
        )
        self._calls.append(call)
        return call

    def all(self) -> tuple[RecordedCall, ...]:
        return tuple(self._calls)

    def for_function(self, function_name: str) -> tuple[RecordedCall, ...]:
        return tuple(call for call in self._calls if call.function_name == function_name)

    def clear(self) -> None:
        self._calls.clear()

    def __len__(self) -> int:
        return len(self._calls)
