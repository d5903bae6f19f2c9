"""Matrix Encoding.

Two wire formats, both covering only the logical window of a matrix (a
view encodes its own rows/cols, not its parent's buffer). Decoding always
allocates a fresh owned matrix with stride == rows.

Binary format (little-endian):

    uint8    format version (1)
    int64    rows
    int64    cols
    per column j = 0..cols-1:
        uint64   element count (== rows)
        float64  count values in row order

JSON format:

    {"rows":R,"cols":C,"elems":[e0,e1,...]}

with elements in column-major order, printed with ``%.16e``. The JSON
decoder is a narrow scanner for exactly this shape: ``rows`` and ``cols``
must come before the element list.
"""

from typing import BinaryIO, Tuple, Union
import io
import logging
import struct

import numpy as np

from .._config import config
from .._errors import (
    COLMAT_ERROR_FORMAT,
    COLMAT_ERROR_TRUNCATED,
    COLMAT_ERROR_VERSION,
    DecodeError,
)
from ._matrix import FloatMatrix

__all__ = [
    'ENCODE_VERSION',
    'encode',
    'decode',
    'dump',
    'load',
    'to_json',
    'from_json',
]

logger = logging.getLogger("colmat.encoding")

ENCODE_VERSION = 1

_VERSION = struct.Struct("<B")
_EXTENTS = struct.Struct("<qq")
_COUNT = struct.Struct("<Q")
_ELEM = np.dtype("<f8")
_HEADER_SIZE = _VERSION.size + _EXTENTS.size
_CHUNK = 1 << 20


# =============================================================================
# Binary Encoding
# =============================================================================

def dump(matrix: FloatMatrix, fp: BinaryIO) -> None:
    """Write the binary encoding of ``matrix`` to a binary stream."""
    rows, cols = matrix.size()
    fp.write(_VERSION.pack(ENCODE_VERSION))
    fp.write(_EXTENTS.pack(rows, cols))
    window = matrix.to_numpy()
    for j in range(cols):
        fp.write(_COUNT.pack(rows))
        fp.write(np.ascontiguousarray(window[:, j], dtype=_ELEM).tobytes())


def encode(matrix: FloatMatrix) -> bytes:
    """Binary encoding of ``matrix``."""
    buf = io.BytesIO()
    dump(matrix, buf)
    return buf.getvalue()


def _read_exact(fp: BinaryIO, n: int, what: str) -> bytes:
    chunks = []
    remaining = n
    while remaining > 0:
        data = fp.read(min(remaining, _CHUNK))
        if not data:
            got = n - remaining
            raise DecodeError(f"Truncated stream reading {what}: expected {n} bytes, got {got}",
                              COLMAT_ERROR_TRUNCATED)
        chunks.append(data)
        remaining -= len(data)
    return b"".join(chunks)


def _read_header(fp: BinaryIO) -> Tuple[int, int]:
    (version,) = _VERSION.unpack(_read_exact(fp, _VERSION.size, "version"))
    if version != ENCODE_VERSION:
        raise DecodeError(f"Unsupported encoding version {version}", COLMAT_ERROR_VERSION)
    rows, cols = _EXTENTS.unpack(_read_exact(fp, _EXTENTS.size, "extents"))
    if rows < 0 or cols < 0:
        raise DecodeError(f"Invalid extents {rows}x{cols}")
    return rows, cols


def _encoded_size(rows: int, cols: int) -> int:
    return _HEADER_SIZE + cols * (_COUNT.size + rows * _ELEM.itemsize)


def load(fp: BinaryIO) -> FloatMatrix:
    """
    Read one binary-encoded matrix from a stream.

    Exactly the bytes of one encoding are consumed, so several matrices
    can be read back to back from the same stream. Column payloads are
    read before the result is allocated.

    Raises:
        DecodeError: Unknown version, bad extents, column count mismatch or
                     truncated input.
        OSError: Propagated from the stream.
    """
    rows, cols = _read_header(fp)
    columns = []
    for j in range(cols):
        (count,) = _COUNT.unpack(_read_exact(fp, _COUNT.size, f"column {j} length"))
        if count != rows:
            raise DecodeError(f"Column {j} holds {count} elements, expected {rows}")
        raw = _read_exact(fp, count * _ELEM.itemsize, f"column {j}")
        columns.append(np.frombuffer(raw, dtype=_ELEM))

    matrix = FloatMatrix(rows, cols)
    if rows > 0 and cols > 0:
        window = matrix.to_numpy()
        for j, column in enumerate(columns):
            window[:, j] = column
    logger.debug("decoded %dx%d matrix", rows, cols)
    return matrix


def decode(data: Union[bytes, bytearray, memoryview]) -> FloatMatrix:
    """
    Decode a binary-encoded matrix.

    Raises:
        DecodeError: Malformed or truncated input, or trailing bytes.
    """
    data = bytes(data)
    rows, cols = _read_header(io.BytesIO(data))
    needed = _encoded_size(rows, cols)
    if len(data) < needed:
        raise DecodeError(f"Truncated input: {rows}x{cols} matrix needs {needed} bytes, got {len(data)}",
                          COLMAT_ERROR_TRUNCATED)
    if len(data) > needed:
        raise DecodeError(f"{len(data) - needed} trailing bytes after encoded matrix")
    return load(io.BytesIO(data))


def _rebuild(data: bytes) -> FloatMatrix:
    # pickle support, see FloatMatrix.__reduce__
    return decode(data)


# =============================================================================
# JSON Encoding
# =============================================================================

def to_json(matrix: FloatMatrix) -> str:
    """JSON text ``{"rows":R,"cols":C,"elems":[...]}``, column-major."""
    fmt = config.format.json_format
    rows, cols = matrix.size()
    elems = ",".join(fmt % matrix.get_at(k) for k in range(rows * cols))
    return f'{{"rows":{rows},"cols":{cols},"elems":[{elems}]}}'


def _parse_extent(part: str, key: str) -> int:
    colon = part.find(":")
    try:
        value = int(part[colon + 1:].strip())
    except ValueError:
        raise DecodeError(f"Invalid {key} value in {part!r}")
    if value < 0:
        raise DecodeError(f"Negative {key} value {value}")
    return value


def from_json(text: Union[str, bytes, bytearray]) -> FloatMatrix:
    """
    Decode the JSON text produced by ``to_json``.

    Elements are parsed before the result is allocated, so a header that
    claims more elements than the text holds fails without allocating.

    Raises:
        DecodeError: Undecodable bytes, missing element list, bad numbers
                     or too few elements.
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"JSON input is not valid UTF-8: {e}", COLMAT_ERROR_FORMAT) from e

    rows = cols = 0
    elems = None
    for part in text.split(",", 2):
        if "rows" in part:
            rows = _parse_extent(part, "rows")
        elif "cols" in part:
            cols = _parse_extent(part, "cols")
        elif rows * cols > 0:
            elems = part

    n = rows * cols
    if n == 0:
        return FloatMatrix(rows, cols)
    if elems is None or "[" not in elems:
        raise DecodeError("matrix elements not found")

    body = elems[elems.index("[") + 1:]
    end = body.find("]")
    if end >= 0:
        body = body[:end]
    tokens = body.split(",")
    if len(tokens) < n:
        raise DecodeError(f"Expected {n} elements, found {len(tokens)}")

    values = []
    for k in range(n):
        try:
            values.append(float(tokens[k]))
        except ValueError:
            raise DecodeError(f"Invalid element {tokens[k]!r} at position {k}")

    matrix = FloatMatrix(rows, cols)
    matrix.data[:] = values
    logger.debug("decoded %dx%d matrix from JSON", rows, cols)
    return matrix
