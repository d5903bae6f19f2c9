"""Storage Ownership and Buffer Handling.

This module defines how a dense matrix holds its elements:

- Ownership kinds (Owned, Borrowed, View)
- Storage metadata for introspection
- Coercion of caller storage into a flat float64 buffer

Design Philosophy:
    Every matrix addresses a one-dimensional float64 ``numpy.ndarray`` (the
    root buffer) through ``offset + i + j*stride``. Views share the root
    buffer of the matrix they were cut from, so no element is ever copied
    when a view is created. numpy reference counting keeps the root buffer
    alive for as long as any matrix or view still refers to it.

Example:
    >>> A = FloatMatrix.zeros(4, 4)          # OWNED
    >>> B = FloatMatrix.from_buffer(2, 2, arr)  # BORROWED, aliases arr
    >>> V = A.submatrix(1, 1)                # VIEW, aliases A
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple
import array as _pyarray
import logging

import numpy as np

from .._errors import CapacityError

__all__ = [
    'Ownership',
    'StorageInfo',
    'as_buffer',
    'required_capacity',
    'region_fits',
]

logger = logging.getLogger("colmat.storage")

FLOAT = np.float64


# =============================================================================
# Enumerations
# =============================================================================

class Ownership(Enum):
    """Data ownership model.

    Attributes:
        OWNED: Matrix allocated its own buffer (zeros, copy, decode).
        BORROWED: Matrix wraps caller storage; caller keeps it alive and
                  sees every write.
        VIEW: Matrix is a window into another matrix's buffer. The source
              matrix is referenced so the buffer outlives the view.
        EMPTY: Zero-extent matrix without any buffer reference, produced
               by out-of-range view requests.
    """
    OWNED = 'owned'
    BORROWED = 'borrowed'
    VIEW = 'view'
    EMPTY = 'empty'


# =============================================================================
# Storage Information
# =============================================================================

@dataclass
class StorageInfo:
    """Storage metadata for a dense matrix.

    Attributes:
        ownership: Data ownership model.
        shape: Logical extents (rows, cols).
        stride: Leading dimension.
        offset: Index of element (0, 0) in the root buffer.
        capacity: Length of the root buffer.
    """
    ownership: Ownership
    shape: Tuple[int, int]
    stride: int
    offset: int
    capacity: int

    @property
    def is_contiguous(self) -> bool:
        """True when the window is a gap-free run of the buffer."""
        rows, cols = self.shape
        return cols <= 1 or self.stride == rows

    def __repr__(self) -> str:
        return (
            f"StorageInfo(ownership={self.ownership.value}, "
            f"shape={self.shape}, stride={self.stride}, "
            f"offset={self.offset}, capacity={self.capacity})"
        )


# =============================================================================
# Buffer Helpers
# =============================================================================

def required_capacity(rows: int, cols: int, stride: int) -> int:
    """Minimum buffer length for a (rows, cols) matrix with given stride."""
    if rows <= 0 or cols <= 0:
        return 0
    return stride * (cols - 1) + rows


def region_fits(capacity: int, offset: int, rows: int, cols: int, stride: int) -> bool:
    """Check that the addressed region lies within ``[0, capacity)``."""
    if rows == 0 or cols == 0:
        return True
    if offset < 0 or rows < 0 or cols < 0 or stride < rows:
        return False
    return offset + required_capacity(rows, cols, stride) <= capacity


def as_buffer(buffer: Any, needed: int) -> Tuple[np.ndarray, bool]:
    """
    Coerce caller storage to a flat float64 ndarray.

    Objects that support the buffer protocol with float64 items (numpy
    arrays, ``array.array('d')``, writable bytes-like objects) are wrapped
    without copying. Python lists cannot be aliased and are copied.
    Read-only storage is rejected.

    Args:
        buffer: Caller storage.
        needed: Minimum number of elements (``stride*cols``).

    Returns:
        Tuple of (flat ndarray, aliased flag).

    Raises:
        CapacityError: If storage holds fewer than ``needed`` elements.
        TypeError: If storage is read-only or cannot be interpreted as
                   float64 elements.
    """
    aliased = True
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != FLOAT:
            raise TypeError(f"Buffer dtype must be float64, got {buffer.dtype}")
        if not buffer.flags.c_contiguous:
            raise TypeError("Buffer must be C-contiguous")
        if not buffer.flags.writeable:
            raise TypeError("Buffer must be writable")
        flat = buffer.reshape(-1)
    elif isinstance(buffer, (list, tuple)):
        flat = np.array(buffer, dtype=FLOAT)
        aliased = False
    else:
        try:
            mv = memoryview(buffer)
        except TypeError as e:
            raise TypeError(f"Cannot use {type(buffer).__name__} as matrix storage: {e}")
        if isinstance(buffer, _pyarray.array) and buffer.typecode != 'd':
            raise TypeError(f"array.array typecode must be 'd', got {buffer.typecode!r}")
        if mv.readonly:
            raise TypeError(f"Buffer of type {type(buffer).__name__} is read-only")
        flat = np.frombuffer(mv, dtype=FLOAT)

    if flat.size < needed:
        logger.debug("Storage of %d elements rejected, need %d", flat.size, needed)
        raise CapacityError(f"Buffer too small: {flat.size} < {needed}")
    return flat, aliased


def empty_buffer() -> np.ndarray:
    """Shared placeholder for matrices without storage."""
    return _EMPTY


_EMPTY = np.zeros(0, dtype=FLOAT)
_EMPTY.setflags(write=False)


def describe(ownership: Ownership, rows: int, cols: int, stride: int,
             offset: int, buf: np.ndarray) -> StorageInfo:
    return StorageInfo(
        ownership=ownership,
        shape=(rows, cols),
        stride=stride,
        offset=offset,
        capacity=int(buf.size),
    )
