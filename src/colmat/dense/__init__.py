"""colmat Dense Matrix Module.

Column-major double precision matrices with zero-copy views, traversal
controlled element mapping, value sources, joining and encodings.

Storage Model:

    root buffer  [ ......................................... ]
                        ^ offset
    element (i, j) = buffer[offset + i + j*stride]

    FloatMatrix
    ├── OWNED      fresh allocation (zeros, copy, decode, join)
    ├── BORROWED   wraps caller storage (from_buffer)
    ├── VIEW       window into another matrix (submatrix, row, column, diag)
    └── EMPTY      0 x 0 result of an out-of-range view request

Quick Start:
    >>> from colmat.dense import FloatMatrix, Traversal, NormalSource
    >>>
    >>> A = FloatMatrix.zeros(4, 4)
    >>> A.set_from(NormalSource(seed=3), Traversal.SYMM)
    >>> V = A.submatrix(1, 1, 2, 2)      # aliases A
    >>> V.scale(2.0)                     # changes A too
    >>> B = FloatMatrix.from_bytes(V.to_bytes())   # owned 2 x 2 copy

Key Functions:
    - zeros, from_buffer, from_list, copy_of: construction
    - copy_into, transpose_into, allclose: structural operations
    - map_elements, scale, add, log, triu, tril: traversal engine
    - populate, drain: sources and sinks
    - join, vstack, hstack: concatenation
    - encode, decode, dump, load, to_json, from_json: encodings
"""

# =============================================================================
# Storage
# =============================================================================
from ._storage import (
    Ownership,
    StorageInfo,
)

# =============================================================================
# Matrix
# =============================================================================
from ._matrix import (
    FloatMatrix,
    zeros,
    from_buffer,
    from_list,
    copy_of,
    copy_into,
    transpose_into,
    allclose,
)

# =============================================================================
# Traversal / Mapping
# =============================================================================
from ._mapping import (
    Traversal,
    FloatMapping,
    FloatEvaluator,
    FloatFunction,
    Float2Function,
    iter_region,
    map_elements,
    scale,
    add,
    log,
    triu,
    tril,
)

# =============================================================================
# Sources and Sinks
# =============================================================================
from ._sources import (
    FloatSource,
    FloatSink,
    ConstSource,
    UniformSource,
    NormalSource,
    TableSource,
    TableSink,
    populate,
    drain,
)

# =============================================================================
# Joining
# =============================================================================
from ._join import (
    JoinType,
    join,
    vstack,
    hstack,
)

# =============================================================================
# Encoding
# =============================================================================
from ._encoding import (
    ENCODE_VERSION,
    encode,
    decode,
    dump,
    load,
    to_json,
    from_json,
)


__all__ = [
    # ---- Storage ----
    'Ownership',
    'StorageInfo',

    # ---- Matrix ----
    'FloatMatrix',
    'zeros',
    'from_buffer',
    'from_list',
    'copy_of',
    'copy_into',
    'transpose_into',
    'allclose',

    # ---- Traversal / Mapping ----
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

    # ---- Sources and Sinks ----
    'FloatSource',
    'FloatSink',
    'ConstSource',
    'UniformSource',
    'NormalSource',
    'TableSource',
    'TableSink',
    'populate',
    'drain',

    # ---- Joining ----
    'JoinType',
    'join',
    'vstack',
    'hstack',

    # ---- Encoding ----
    'ENCODE_VERSION',
    'encode',
    'decode',
    'dump',
    'load',
    'to_json',
    'from_json',
]
