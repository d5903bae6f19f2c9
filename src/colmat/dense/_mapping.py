"""Element Mapping and Traversal.

One traversal implementation shared by element-wise transforms, value
population and triangularization. A traversal mode selects which index
pairs are visited and in which order:

    FULL   every (i, j), column by column (memory order)
    UPPER  i <= j, row by row
    LOWER  j <= i, column by column
    SYMM   square matrices only; for each column j the pairs i < j are
           evaluated once and mirrored to (j, i), then (j, j) is evaluated

With ``strict=True`` UPPER and LOWER skip the diagonal.

Transforms are either plain callables ``f(i, j, value)`` or objects with an
``eval(i, j, value)`` method (see ``FloatMapping``).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterator, Tuple, Union
import logging
import math

from .._typing import MappingLike, TransformInput, is_transform

__all__ = [
    'Traversal',
    'FloatMapping',
    'FloatEvaluator',
    'FloatFunction',
    'Float2Function',
    'iter_region',
    'map_elements',
    'scale',
    'add',
    'log',
    'triu',
    'tril',
]

logger = logging.getLogger("colmat.mapping")


class Traversal(Enum):
    """Index region visited by map/populate."""
    FULL = 'full'
    UPPER = 'upper'
    LOWER = 'lower'
    SYMM = 'symm'


def as_traversal(mode: Union[Traversal, str, None]) -> Traversal:
    if mode is None:
        return Traversal.FULL
    if isinstance(mode, Traversal):
        return mode
    if isinstance(mode, str):
        return Traversal(mode.lower())
    raise TypeError(f"Traversal mode must be Traversal or str, got {type(mode).__name__}")


# =============================================================================
# Transform Objects
# =============================================================================

class FloatMapping(ABC):
    """Interface for mapping element values to new values."""

    @abstractmethod
    def eval(self, i: int, j: int, value: float) -> float:
        ...

    def __call__(self, i: int, j: int, value: float) -> float:
        return self.eval(i, j, value)


class FloatEvaluator(FloatMapping):
    """Location dependent mapping, ``callable(i, j, value)``."""

    def __init__(self, callable_: Callable[[int, int, float], float]):
        self.callable = callable_

    def eval(self, i: int, j: int, value: float) -> float:
        return self.callable(i, j, value)


class FloatFunction(FloatMapping):
    """Single parameter mapping, ``callable(value)``."""

    def __init__(self, callable_: Callable[[float], float]):
        self.callable = callable_

    def eval(self, i: int, j: int, value: float) -> float:
        return self.callable(value)


class Float2Function(FloatMapping):
    """Two parameter mapping, ``callable(value, constant)``."""

    def __init__(self, callable_: Callable[[float, float], float], constant: float):
        self.callable = callable_
        self.constant = constant

    def eval(self, i: int, j: int, value: float) -> float:
        return self.callable(value, self.constant)


def as_callable(transform: TransformInput) -> Callable[[int, int, float], float]:
    if not is_transform(transform):
        raise TypeError(f"Expected callable or object with eval(), got {type(transform).__name__}")
    if isinstance(transform, MappingLike):
        return transform.eval
    return transform


# =============================================================================
# Traversal
# =============================================================================

def iter_region(rows: int, cols: int, mode: Traversal = Traversal.FULL,
                strict: bool = False) -> Iterator[Tuple[int, int]]:
    """
    Yield the (i, j) pairs of a region in traversal order.

    For SYMM only the upper triangle including the diagonal is yielded,
    and nothing at all unless rows == cols.
    """
    mode = as_traversal(mode)
    unit = 1 if strict else 0
    if mode is Traversal.UPPER:
        for i in range(rows):
            for j in range(i + unit, cols):
                yield i, j
    elif mode is Traversal.LOWER:
        for j in range(cols):
            for i in range(j + unit, rows):
                yield i, j
    elif mode is Traversal.SYMM:
        if rows != cols:
            return
        for j in range(cols):
            for i in range(j):
                yield i, j
            yield j, j
    else:
        for j in range(cols):
            for i in range(rows):
                yield i, j


def apply(matrix, fn: Callable[[int, int, float], float],
          mode: Traversal = Traversal.FULL, strict: bool = False) -> None:
    """
    Replace elements of ``matrix`` in the selected region with
    ``fn(i, j, old)``. SYMM mirrors every off-diagonal result.
    """
    mode = as_traversal(mode)
    rows, cols = matrix.rows, matrix.cols
    if rows == 0 or cols == 0:
        return
    if mode is Traversal.SYMM and rows != cols:
        logger.debug("symmetric traversal skipped for non-square %dx%d", rows, cols)
        return

    buf = matrix.data
    off = matrix.offset
    step = matrix.stride
    if mode is Traversal.SYMM:
        for j in range(cols):
            for i in range(j):
                k = off + i + j * step
                buf[k] = fn(i, j, buf.item(k))
                buf[off + j + i * step] = buf[k]
            k = off + j + j * step
            buf[k] = fn(j, j, buf.item(k))
        return

    for i, j in iter_region(rows, cols, mode, strict):
        k = off + i + j * step
        buf[k] = fn(i, j, buf.item(k))


def map_elements(matrix, transform: TransformInput,
                 mode: Union[Traversal, str] = Traversal.FULL) -> None:
    """
    Change matrix elements with a mapping.

    UPPER leaves the strictly lower part untouched, LOWER the strictly
    upper part. SYMM evaluates the transform once per upper-triangle
    position and copies results to the lower triangle.
    """
    apply(matrix, as_callable(transform), as_traversal(mode))


# =============================================================================
# Element-wise Helpers
# =============================================================================

def _log(value: float) -> float:
    if value > 0.0:
        return math.log(value)
    if value == 0.0:
        return -math.inf
    return math.nan


def log(matrix) -> None:
    """Element-wise natural logarithm."""
    map_elements(matrix, FloatFunction(_log))


def scale(matrix, value: float) -> None:
    """Element-wise scaling."""
    map_elements(matrix, FloatFunction(lambda a: a * value))


def add(matrix, value: float) -> None:
    """Element-wise adding."""
    map_elements(matrix, FloatFunction(lambda a: a + value))


def triu(matrix, unit: bool = False):
    """
    Make matrix upper triangular/trapezoidal: zero the strictly lower part.

    With ``unit`` the diagonal is set to one. Returns the matrix.
    """
    def fn(i: int, j: int, value: float) -> float:
        if i > j:
            return 0.0
        if i == j and unit:
            return 1.0
        return value
    apply(matrix, fn, Traversal.LOWER)
    return matrix


def tril(matrix, unit: bool = False):
    """
    Make matrix lower triangular/trapezoidal: zero the strictly upper part.

    With ``unit`` the diagonal is set to one. Returns the matrix.
    """
    def fn(i: int, j: int, value: float) -> float:
        if j > i:
            return 0.0
        if i == j and unit:
            return 1.0
        return value
    apply(matrix, fn, Traversal.UPPER)
    return matrix
