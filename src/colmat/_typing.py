"""
colmat Type Definitions and Protocols.

Type aliases and structural protocols shared by the dense matrix modules.
Any object with a matching ``eval``/``get``/``put`` method can be passed
where these protocols are expected; no inheritance is required.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:
    import numpy as np


# =============================================================================
# Protocol Definitions
# =============================================================================

@runtime_checkable
class MappingLike(Protocol):
    """Element transformation: new value from location and old value."""

    def eval(self, i: int, j: int, value: float) -> float:
        ...


@runtime_checkable
class SourceLike(Protocol):
    """Pull-based element provider."""

    def get(self, i: int, j: int) -> float:
        ...


@runtime_checkable
class SinkLike(Protocol):
    """Push-based element consumer."""

    def put(self, i: int, j: int, value: float) -> None:
        ...


# =============================================================================
# Type Aliases
# =============================================================================

#: Plain callable form of a transformation, ``f(i, j, old) -> new``.
TransformFn = Callable[[int, int, float], float]

#: Anything ``map`` accepts.
TransformInput = Union[MappingLike, TransformFn]

#: Storage accepted by ``from_buffer``: buffer-protocol objects or a list.
BufferInput = Union["np.ndarray", bytearray, memoryview, Sequence[float], Any]

#: Row-major nested lists (``TableSource``, ``from_list``).
RowData = Sequence[Sequence[float]]


def is_transform(obj: Any) -> bool:
    """Check if object can be used as an element transformation."""
    return isinstance(obj, MappingLike) or callable(obj)
