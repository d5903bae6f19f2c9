"""Value Sources and Sinks.

Sources provide element values on demand (``get(i, j)``) and sinks accept
them (``put(i, j, value)``). ``populate`` fills a matrix from a source
using the same traversal rules as ``map``; ``drain`` pushes the visited
elements of a matrix into a sink.

Random sources own an independent ``numpy.random.Generator`` created at
construction time. Without an explicit seed, the seed comes from OS
entropy, or from the configured global seed when one is set
(``config.random``), so sources created back to back never share a
sequence.

Example:
    >>> A = FloatMatrix(4, 4)
    >>> populate(A, NormalSource(stddev=2.0, seed=1), Traversal.SYMM)
    >>> populate(A, ConstSource(0.0), Traversal.LOWER, unit=True)
"""

from abc import ABC, abstractmethod
from typing import List, Tuple, Union

import numpy as np

from .._config import config
from .._typing import RowData, SinkLike, SourceLike
from ._mapping import Traversal, apply, as_traversal, iter_region

__all__ = [
    'FloatSource',
    'FloatSink',
    'ConstSource',
    'UniformSource',
    'NormalSource',
    'TableSource',
    'TableSink',
    'populate',
    'drain',
]

SeedInput = Union[None, int, np.random.SeedSequence]


def _make_rng(seed: SeedInput) -> np.random.Generator:
    if seed is None:
        seed = config.random.spawn()
    return np.random.default_rng(seed)


# =============================================================================
# Interfaces
# =============================================================================

class FloatSource(ABC):
    """Interface for providing float values."""

    @abstractmethod
    def get(self, i: int, j: int) -> float:
        ...


class FloatSink(ABC):
    """Interface for pushing out elements."""

    @abstractmethod
    def put(self, i: int, j: int, value: float) -> None:
        ...


# =============================================================================
# Sources
# =============================================================================

class ConstSource(FloatSource):
    """Source that produces a constant value."""

    def __init__(self, value: float):
        self.value = float(value)

    def get(self, i: int, j: int) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"ConstSource({self.value!r})"


class UniformSource(FloatSource):
    """
    Uniformly distributed values ``scale*(U[0, 1) + shift)``.

    Defaults (scale=1, shift=0) give plain U[0, 1) values.
    """

    def __init__(self, scale: float = 1.0, shift: float = 0.0, seed: SeedInput = None):
        self.scale = scale
        self.shift = shift
        self.rng = _make_rng(seed)

    def get(self, i: int, j: int) -> float:
        return self.scale * (self.rng.random() + self.shift)

    def __repr__(self) -> str:
        return f"UniformSource(scale={self.scale!r}, shift={self.shift!r})"


class NormalSource(FloatSource):
    """Normally distributed values ``stddev*N(0, 1) + mean``."""

    def __init__(self, stddev: float = 1.0, mean: float = 0.0, seed: SeedInput = None):
        self.stddev = stddev
        self.mean = mean
        self.rng = _make_rng(seed)

    def get(self, i: int, j: int) -> float:
        return self.rng.standard_normal() * self.stddev + self.mean

    def __repr__(self) -> str:
        return f"NormalSource(stddev={self.stddev!r}, mean={self.mean!r})"


class TableSource(FloatSource):
    """
    Values from a row-major, possibly jagged, table.

    Indexes outside the table (including negative ones) give ``default``.
    """

    def __init__(self, data: RowData, default: float = 0.0):
        self.data = data
        self.default = default

    def get(self, i: int, j: int) -> float:
        if i < 0 or i >= len(self.data):
            return self.default
        line = self.data[i]
        if j < 0 or j >= len(line):
            return self.default
        return line[j]

    def size(self) -> Tuple[int, int]:
        """Table dimensions (rows, longest row)."""
        rows = len(self.data)
        cols = max((len(line) for line in self.data), default=0)
        return rows, cols


# =============================================================================
# Sinks
# =============================================================================

class TableSink(FloatSink):
    """Collects pushed values into a row-major table, padding with ``fill``."""

    def __init__(self, fill: float = 0.0):
        self.fill = fill
        self.data: List[List[float]] = []

    def put(self, i: int, j: int, value: float) -> None:
        while len(self.data) <= i:
            self.data.append([])
        line = self.data[i]
        while len(line) <= j:
            line.append(self.fill)
        line[j] = value


# =============================================================================
# Population
# =============================================================================

def populate(matrix, source: SourceLike, mode: Union[Traversal, str] = Traversal.FULL,
             unit: bool = False) -> None:
    """
    Set matrix elements from a source.

    Modes:
        FULL          set all entries (default)
        UPPER         set upper triangular/trapezoidal part
        UPPER, unit   set strictly upper part
        LOWER         set lower triangular/trapezoidal part
        LOWER, unit   set strictly lower part
        SYMM          set upper part, mirror it to the lower part
    """
    if not isinstance(source, SourceLike):
        raise TypeError(f"Expected a source with get(i, j), got {type(source).__name__}")
    mode = as_traversal(mode)
    apply(matrix, lambda i, j, old: source.get(i, j), mode,
          strict=unit and mode in (Traversal.UPPER, Traversal.LOWER))


def drain(matrix, sink: SinkLike, mode: Union[Traversal, str] = Traversal.FULL,
          unit: bool = False) -> None:
    """
    Push matrix elements of the selected region into a sink.

    SYMM pushes only the upper triangle and diagonal of square matrices.
    """
    if not isinstance(sink, SinkLike):
        raise TypeError(f"Expected a sink with put(i, j, value), got {type(sink).__name__}")
    mode = as_traversal(mode)
    strict = unit and mode in (Traversal.UPPER, Traversal.LOWER)
    for i, j in iter_region(matrix.rows, matrix.cols, mode, strict):
        sink.put(i, j, matrix.get(i, j))
