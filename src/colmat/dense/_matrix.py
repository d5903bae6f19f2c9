"""
Column-Major Dense Matrix

Double precision matrix stored column by column in a flat float64 buffer.
Element (i, j) of a matrix lives at ``buffer[offset + i + j*stride]``.

Views (submatrix, row, column, diagonal) never copy: they share the
buffer of the matrix they were cut from, so a write through any view is
visible through the parent and through every overlapping view.

Access policy:
    - get/get_at out of range return NaN, set/set_at out of range are
      no-ops, negative indices wrap once from the end.
    - View requests outside the parent return an empty (0 x 0) matrix.
    - Structural operations (copy_from, transpose_from, from_buffer)
      raise on bad shapes or too small storage.

Example:
    >>> A = FloatMatrix.zeros(4, 4)
    >>> V = A.submatrix(1, 1, 2, 2)
    >>> V.set(0, 0, 5.0)
    >>> A.get(1, 1)
    5.0
"""

import logging
import math
from typing import Any, Optional, Tuple

import numpy as np

from .._config import config
from .._errors import InvalidSizeError, ShapeMismatchError
from .._typing import BufferInput, RowData
from ._storage import (
    FLOAT,
    Ownership,
    StorageInfo,
    as_buffer,
    describe,
    empty_buffer,
    region_fits,
)
from . import _mapping
from . import _sources

__all__ = [
    'FloatMatrix',
    'zeros',
    'from_buffer',
    'from_list',
    'copy_of',
    'copy_into',
    'transpose_into',
    'allclose',
]

logger = logging.getLogger("colmat.matrix")


# =============================================================================
# Matrix Class
# =============================================================================

class FloatMatrix:
    """
    Column-major double precision matrix or view.

    Attributes:
        rows (int): Number of rows
        cols (int): Number of columns
        stride (int): Leading dimension (buffer distance between columns)
        offset (int): Index of element (0, 0) in the root buffer
        ownership (Ownership): OWNED, BORROWED, VIEW or EMPTY
        source (FloatMatrix): Matrix this view was cut from (views only)

    Example:
        >>> A = FloatMatrix(3, 3)          # zero filled, owns its buffer
        >>> A.set(-1, -1, 2.0)             # last element
        >>> D = A.diag()                   # 1 x 3 view of the diagonal
        >>> D.get(0, 2)
        2.0
    """

    __slots__ = ("_buf", "_offset", "_rows", "_cols", "_stride",
                 "_ownership", "_source")

    def __init__(self, rows: int = 0, cols: int = 0):
        """
        Allocate a zero filled rows x cols matrix with stride = rows.

        Raises:
            InvalidSizeError: If rows or cols is negative.
        """
        if rows < 0 or cols < 0:
            raise InvalidSizeError(f"Matrix size must be non-negative, got {rows}x{cols}")
        self._buf = np.zeros(rows * cols, dtype=FLOAT)
        self._offset = 0
        self._rows = rows
        self._cols = cols
        self._stride = rows
        self._ownership = Ownership.OWNED
        self._source = None

    @classmethod
    def _make(cls, buf: np.ndarray, offset: int, rows: int, cols: int,
              stride: int, ownership: Ownership,
              source: Optional["FloatMatrix"] = None) -> "FloatMatrix":
        mat = cls.__new__(cls)
        mat._buf = buf
        mat._offset = offset
        mat._rows = rows
        mat._cols = cols
        mat._stride = stride
        mat._ownership = ownership
        mat._source = source
        return mat

    @classmethod
    def _empty(cls) -> "FloatMatrix":
        return cls._make(empty_buffer(), 0, 0, 0, 0, Ownership.EMPTY)

    def _view(self, offset: int, rows: int, cols: int, stride: int) -> "FloatMatrix":
        if rows <= 0 or cols <= 0:
            return FloatMatrix._empty()
        return FloatMatrix._make(self._buf, offset, rows, cols, stride,
                                 Ownership.VIEW, source=self)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "FloatMatrix":
        """Create zero-initialized rows x cols matrix."""
        return cls(rows, cols)

    @classmethod
    def from_buffer(cls, rows: int, cols: int, buffer: BufferInput, stride: int = 0) -> "FloatMatrix":
        """
        Create matrix over caller storage (zero-copy where possible).

        WARNING: The matrix aliases the storage. Writes through the matrix
        change the caller's buffer and vice versa.

        Args:
            rows: Number of rows
            cols: Number of columns
            buffer: numpy float64 array, ``array.array('d')``, writable
                    bytes-like object, or a list (copied)
            stride: Leading dimension; zero or negative means ``rows``

        Raises:
            InvalidSizeError: If rows/cols is negative or stride < rows.
            CapacityError: If buffer holds fewer than stride*cols elements.
        """
        if rows < 0 or cols < 0:
            raise InvalidSizeError(f"Matrix size must be non-negative, got {rows}x{cols}")
        if stride <= 0:
            stride = rows
        if rows > 0 and stride < rows:
            raise InvalidSizeError(f"Stride {stride} smaller than row count {rows}")
        buf, aliased = as_buffer(buffer, stride * cols)
        ownership = Ownership.BORROWED if aliased else Ownership.OWNED
        return cls._make(buf, 0, rows, cols, stride, ownership)

    @classmethod
    def from_list(cls, data: RowData) -> "FloatMatrix":
        """
        Create matrix from row-major nested lists.

        Rows shorter than the longest row are padded with zeros.
        """
        rows = len(data)
        cols = max((len(r) for r in data), default=0)
        mat = cls(rows, cols)
        for i, line in enumerate(data):
            for j, val in enumerate(line):
                mat._buf[i + j * rows] = val
        return mat

    @classmethod
    def from_bytes(cls, data: bytes) -> "FloatMatrix":
        """Decode a matrix from the binary encoding."""
        from ._encoding import decode
        return decode(data)

    @classmethod
    def from_json(cls, text: Any) -> "FloatMatrix":
        """Decode a matrix from the JSON encoding."""
        from ._encoding import from_json
        return from_json(text)

    def copy(self) -> "FloatMatrix":
        """Create an owned deep copy of the logical window."""
        new = FloatMatrix(self._rows, self._cols)
        new.copy_from(self)
        return new

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        """Logical extents (rows, cols)."""
        return (self._rows, self._cols)

    @property
    def stride(self) -> int:
        """Leading dimension."""
        return self._stride

    @property
    def offset(self) -> int:
        """Position of element (0, 0) in the root buffer."""
        return self._offset

    @property
    def data(self) -> np.ndarray:
        """Root buffer (shared with the parent for views)."""
        return self._buf

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    @property
    def source(self) -> Optional["FloatMatrix"]:
        """Matrix this view was cut from, None for non-views."""
        return self._source

    @property
    def is_empty(self) -> bool:
        return self._rows == 0 or self._cols == 0

    def size(self) -> Tuple[int, int]:
        """Get size of the matrix as tuple (rows, cols)."""
        return self._rows, self._cols

    def is_vector(self) -> bool:
        return self._rows == 1 or self._cols == 1

    def storage_info(self) -> StorageInfo:
        return describe(self._ownership, self._rows, self._cols,
                        self._stride, self._offset, self._buf)

    def __len__(self) -> int:
        """Number of logical elements."""
        return self._rows * self._cols

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def submatrix(self, row: int, col: int, rows: Optional[int] = None,
                  cols: Optional[int] = None, stride: Optional[int] = None) -> "FloatMatrix":
        """
        Make a view of this matrix starting at (row, col).

        Negative row/col wrap from the end. Missing extents run to the
        far edge of this matrix. With an explicit stride only the buffer
        range is checked, which allows strided views such as diagonals.

        Returns:
            View sharing this matrix's buffer, or an empty matrix if the
            origin or the requested window falls outside this matrix.
        """
        if row < 0:
            row += self._rows
        if col < 0:
            col += self._cols
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            logger.debug("submatrix origin (%d, %d) outside %dx%d, returning empty view",
                         row, col, self._rows, self._cols)
            return FloatMatrix._empty()

        nr = self._rows - row if rows is None else rows
        nc = self._cols - col if cols is None else cols
        offset = self._offset + row + col * self._stride
        if stride is None or stride <= 0:
            if nr < 0 or nc < 0 or row + nr > self._rows or col + nc > self._cols:
                logger.debug("submatrix %dx%d at (%d, %d) exceeds %dx%d, returning empty view",
                             nr, nc, row, col, self._rows, self._cols)
                return FloatMatrix._empty()
            return self._view(offset, nr, nc, self._stride)

        if nr < 0 or nc < 0 or not region_fits(self._buf.size, offset, nr, nc, stride):
            logger.debug("strided submatrix %dx%d/%d at (%d, %d) leaves buffer, returning empty view",
                         nr, nc, stride, row, col)
            return FloatMatrix._empty()
        return self._view(offset, nr, nc, stride)

    def row(self, index: int, col: int = 0, ncols: Optional[int] = None) -> "FloatMatrix":
        """
        Make a 1 x n view of row ``index``.

        Args:
            index: Row index, negative wraps
            col: First column of the view
            ncols: Number of columns, default runs to the last column
        """
        if index < 0:
            index += self._rows
        if ncols is None:
            ncols = self._cols - col
        if not (0 <= index < self._rows and 0 <= col < self._cols
                and 0 <= ncols and col + ncols <= self._cols):
            return FloatMatrix._empty()
        return self._view(self._offset + index + col * self._stride, 1, ncols, self._stride)

    def column(self, index: int, row: int = 0, nrows: Optional[int] = None) -> "FloatMatrix":
        """
        Make an n x 1 view of column ``index``.

        Args:
            index: Column index, negative wraps
            row: First row of the view
            nrows: Number of rows, default runs to the last row
        """
        if index < 0:
            index += self._cols
        if nrows is None:
            nrows = self._rows - row
        if not (0 <= index < self._cols and 0 <= row < self._rows
                and 0 <= nrows and row + nrows <= self._rows):
            return FloatMatrix._empty()
        return self._view(self._offset + row + index * self._stride, nrows, 1, self._stride)

    def diag(self) -> "FloatMatrix":
        """Make a 1 x min(rows, cols) view of the main diagonal."""
        n = min(self._rows, self._cols)
        if n == 0:
            return FloatMatrix._empty()
        return self.submatrix(0, 0, 1, n, self._stride + 1)

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def get(self, i: int, j: int) -> float:
        """Get element at [i, j]. Returns NaN if indexes are invalid."""
        if self._rows == 0 or self._cols == 0:
            return 0.0
        if i < 0:
            i += self._rows
        if j < 0:
            j += self._cols
        if i < 0 or i >= self._rows or j < 0 or j >= self._cols:
            return math.nan
        return self._buf.item(self._offset + i + j * self._stride)

    def set(self, i: int, j: int, value: float) -> None:
        """Set element at [i, j]. Invalid indexes are ignored."""
        if self._rows == 0 or self._cols == 0:
            return
        if i < 0:
            i += self._rows
        if j < 0:
            j += self._cols
        if i < 0 or i >= self._rows or j < 0 or j >= self._cols:
            return
        self._buf[self._offset + i + j * self._stride] = value

    def get_at(self, k: int) -> float:
        """Get element at column-major logical index k. NaN if invalid."""
        n = self._rows * self._cols
        if k < 0:
            k += n
        if k < 0 or k >= n:
            return math.nan
        c, r = divmod(k, self._rows)
        return self._buf.item(self._offset + r + c * self._stride)

    def set_at(self, k: int, value: float) -> None:
        """Set element at column-major logical index k."""
        n = self._rows * self._cols
        if k < 0:
            k += n
        if k < 0 or k >= n:
            return
        c, r = divmod(k, self._rows)
        self._buf[self._offset + r + c * self._stride] = value

    def __getitem__(self, key):
        if isinstance(key, tuple) and len(key) == 2:
            return self.get(int(key[0]), int(key[1]))
        if isinstance(key, (int, np.integer)):
            return self.get_at(int(key))
        raise TypeError(f"FloatMatrix indices must be (row, col) or int, got {key!r}")

    def __setitem__(self, key, value) -> None:
        if isinstance(key, tuple) and len(key) == 2:
            self.set(int(key[0]), int(key[1]), value)
        elif isinstance(key, (int, np.integer)):
            self.set_at(int(key), value)
        else:
            raise TypeError(f"FloatMatrix indices must be (row, col) or int, got {key!r}")

    # -------------------------------------------------------------------------
    # Bulk Operations
    # -------------------------------------------------------------------------

    def to_numpy(self) -> np.ndarray:
        """
        Get a zero-copy 2-D numpy view of the logical window.

        The returned array aliases this matrix; writes go to the shared
        buffer. Empty matrices give a fresh zero-size array.
        """
        if self._rows == 0 or self._cols == 0:
            return np.zeros((self._rows, self._cols), dtype=FLOAT)
        base = self._buf[self._offset:]
        item = base.strides[0]
        return np.lib.stride_tricks.as_strided(
            base,
            shape=(self._rows, self._cols),
            strides=(item, item * self._stride),
        )

    def __array__(self, dtype=None, copy=None):
        arr = self.to_numpy()
        if dtype is not None:
            arr = arr.astype(dtype, copy=False)
        if copy:
            arr = arr.copy()
        return arr

    def copy_from(self, src: "FloatMatrix") -> "FloatMatrix":
        """
        Copy elements of src into this matrix (self = src).

        Raises:
            ShapeMismatchError: If shapes differ. Nothing is written.
        """
        if src.shape != self.shape:
            logger.debug("copy rejected: %s into %s", src.shape, self.shape)
            raise ShapeMismatchError(f"Cannot copy {src.shape} into {self.shape}")
        if self.is_empty:
            return self
        self.to_numpy()[...] = src.to_numpy()
        return self

    def transpose_from(self, src: "FloatMatrix") -> "FloatMatrix":
        """
        Store the transpose of src in this matrix (self = src.T).

        Raises:
            ShapeMismatchError: If self is not src.cols x src.rows.
        """
        if self._rows != src.cols or self._cols != src.rows:
            logger.debug("transpose rejected: %s into %s", src.shape, self.shape)
            raise ShapeMismatchError(
                f"Cannot store transpose of {src.shape} in {self.shape}")
        if self.is_empty:
            return self
        self.to_numpy()[...] = src.to_numpy().T
        return self

    def allclose(self, other: "FloatMatrix", abstol: Optional[float] = None,
                 reltol: Optional[float] = None) -> bool:
        """
        Test if this matrix equals other within tolerances.

        Elements a (self) and b (other) are close unless
        ``|a - b| > abstol + reltol*|b|``. Shape mismatch gives False.
        Defaults come from ``config.tolerance``.
        """
        if self.shape != other.shape:
            return False
        if abstol is None:
            abstol = config.tolerance.abstol
        if reltol is None:
            reltol = config.tolerance.reltol
        if self.is_empty:
            return True
        a = self.to_numpy()
        b = other.to_numpy()
        with np.errstate(invalid='ignore'):
            df = np.abs(a - b)
            ref = abstol + reltol * np.abs(b)
            return not bool(np.any(df > ref))

    # -------------------------------------------------------------------------
    # Mapping and Population
    # -------------------------------------------------------------------------

    def map(self, transform, mode=_mapping.Traversal.FULL) -> "FloatMatrix":
        """Apply ``transform(i, j, value)`` over the selected region."""
        _mapping.map_elements(self, transform, mode)
        return self

    def scale(self, value: float) -> "FloatMatrix":
        _mapping.scale(self, value)
        return self

    def add(self, value: float) -> "FloatMatrix":
        _mapping.add(self, value)
        return self

    def log(self) -> "FloatMatrix":
        _mapping.log(self)
        return self

    def set_from(self, source, mode=_mapping.Traversal.FULL, unit: bool = False) -> "FloatMatrix":
        """Populate elements from a value source. See ``populate``."""
        _sources.populate(self, source, mode, unit)
        return self

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        from ._encoding import encode
        return encode(self)

    def to_json(self) -> str:
        from ._encoding import to_json
        return to_json(self)

    def __reduce__(self):
        from ._encoding import _rebuild, encode
        return (_rebuild, (encode(self),))

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def to_string(self, fmt: Optional[str] = None) -> str:
        """
        Render rows as bracketed lines, e.g. ``[1.00e+00, 2.00e+00]``.

        Args:
            fmt: printf-style element format, default ``config.format``
        """
        if fmt is None:
            fmt = config.format.element_format
        lines = []
        for i in range(self._rows):
            base = self._offset + i
            items = (fmt % self._buf.item(base + j * self._stride)
                     for j in range(self._cols))
            lines.append("[" + ", ".join(items) + "]")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (f"FloatMatrix(rows={self._rows}, cols={self._cols}, "
                f"stride={self._stride}, ownership={self._ownership.value})")


# =============================================================================
# Factory and Structural Functions
# =============================================================================

def zeros(rows: int, cols: int) -> FloatMatrix:
    """Create zero-initialized matrix."""
    return FloatMatrix.zeros(rows, cols)


def from_buffer(rows: int, cols: int, buffer: BufferInput, stride: int = 0) -> FloatMatrix:
    """Create matrix over existing storage (zero-copy)."""
    return FloatMatrix.from_buffer(rows, cols, buffer, stride)


def from_list(data: RowData) -> FloatMatrix:
    """Create matrix from row-major nested lists."""
    return FloatMatrix.from_list(data)


def copy_of(mat: FloatMatrix) -> FloatMatrix:
    """Create an owned deep copy."""
    return mat.copy()


def copy_into(dst: FloatMatrix, src: FloatMatrix) -> FloatMatrix:
    """dst = src, shapes must agree."""
    return dst.copy_from(src)


def transpose_into(dst: FloatMatrix, src: FloatMatrix) -> FloatMatrix:
    """dst = src.T, dst must be src.cols x src.rows."""
    return dst.transpose_from(src)


def allclose(a: FloatMatrix, b: FloatMatrix, abstol: Optional[float] = None,
             reltol: Optional[float] = None) -> bool:
    """Element-wise tolerance comparison, see ``FloatMatrix.allclose``."""
    return a.allclose(b, abstol, reltol)
