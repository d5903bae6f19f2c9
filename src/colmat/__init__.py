"""
colmat - Column-Major Dense Matrix Core

Dense double precision matrix storage for numerical algorithm authors:
- Zero-copy sub-views that alias their parent's buffer
- Element mapping over full, upper, lower or symmetric regions
- Bulk population from constant, random and table sources
- Horizontal/vertical joining
- Versioned binary and JSON encodings

Modules:
- dense: Matrix type, traversal engine, sources, join, encodings
- config: Global tolerances, formats and random seed policy

Architecture:
    ┌──────────────────────────────────────────────┐
    │   join / encode / decode / populate / map    │
    ├──────────────────────────────────────────────┤
    │        FloatMatrix (rows, cols, stride)      │
    │  Ownership: OWNED | BORROWED | VIEW | EMPTY  │
    ├──────────────────────────────────────────────┤
    │        flat float64 numpy root buffer        │
    └──────────────────────────────────────────────┘

Example:
    >>> import colmat
    >>> from colmat import FloatMatrix, ConstSource
    >>>
    >>> M = FloatMatrix.zeros(3, 3)
    >>> M.set_from(ConstSource(2.0))
    >>> C = M.copy()
    >>> C.allclose(M)
    True
"""

__version__ = '0.1.0'

from . import dense
from ._config import (
    config,
    ColmatConfig,
    ToleranceConfig,
    FormatConfig,
    RandomConfig,
)
from ._errors import (
    ColmatError,
    InvalidSizeError,
    CapacityError,
    ShapeMismatchError,
    DecodeError,
)

from .dense import (
    # Matrix
    FloatMatrix,
    Ownership,
    StorageInfo,
    zeros,
    from_buffer,
    from_list,
    copy_of,
    copy_into,
    transpose_into,
    allclose,

    # Traversal
    Traversal,
    FloatMapping,
    FloatEvaluator,
    FloatFunction,
    Float2Function,
    triu,
    tril,

    # Sources
    FloatSource,
    FloatSink,
    ConstSource,
    UniformSource,
    NormalSource,
    TableSource,
    TableSink,
    populate,
    drain,

    # Join
    JoinType,
    join,
    vstack,
    hstack,

    # Encoding
    encode,
    decode,
    dump,
    load,
    to_json,
    from_json,
)

__all__ = [
    '__version__',
    'dense',

    # Config
    'config',
    'ColmatConfig',
    'ToleranceConfig',
    'FormatConfig',
    'RandomConfig',

    # Errors
    'ColmatError',
    'InvalidSizeError',
    'CapacityError',
    'ShapeMismatchError',
    'DecodeError',

    # Matrix
    'FloatMatrix',
    'Ownership',
    'StorageInfo',
    'zeros',
    'from_buffer',
    'from_list',
    'copy_of',
    'copy_into',
    'transpose_into',
    'allclose',

    # Traversal
    'Traversal',
    'FloatMapping',
    'FloatEvaluator',
    'FloatFunction',
    'Float2Function',
    'triu',
    'tril',

    # Sources
    'FloatSource',
    'FloatSink',
    'ConstSource',
    'UniformSource',
    'NormalSource',
    'TableSource',
    'TableSink',
    'populate',
    'drain',

    # Join
    'JoinType',
    'join',
    'vstack',
    'hstack',

    # Encoding
    'encode',
    'decode',
    'dump',
    'load',
    'to_json',
    'from_json',
]
