"""Matrix Joining.

Builds a new owned matrix by concatenating existing matrices:

- AUGMENT: horizontal, result is max(rows) x sum(cols)
- STACK: vertical, result is sum(rows) x max(cols)

Each input is copied into a view of the result at the running offset.
Inputs smaller than the result in the other dimension leave zeros.

Example:
    >>> A = FloatMatrix(3, 2)
    >>> B = FloatMatrix(5, 4)
    >>> join(JoinType.AUGMENT, A, B).shape
    (5, 6)
    >>> join(JoinType.STACK, A, B).shape
    (8, 4)
"""

from enum import IntEnum
from typing import Iterable, Union
import logging

from ._matrix import FloatMatrix

__all__ = [
    'JoinType',
    'join',
    'vstack',
    'hstack',
]

logger = logging.getLogger("colmat.join")


class JoinType(IntEnum):
    """Join direction. Unrecognized values are treated as AUGMENT."""
    STACK = 0
    AUGMENT = 1


def join(how: Union[JoinType, int], *matrices: FloatMatrix) -> FloatMatrix:
    """
    Create a new matrix by joining argument matrices.

    Args:
        how: JoinType.STACK (vertical) or JoinType.AUGMENT (horizontal)
        *matrices: Matrices or views to join, in order

    Returns:
        New owned FloatMatrix.
    """
    nrows = ncols = maxrow = maxcol = 0
    for m in matrices:
        r, c = m.size()
        nrows += r
        ncols += c
        maxrow = max(maxrow, r)
        maxcol = max(maxcol, c)

    stack = how == JoinType.STACK
    if stack:
        result = FloatMatrix(nrows, maxcol)
    else:
        result = FloatMatrix(maxrow, ncols)
    logger.debug("join %s of %d matrices into %dx%d",
                 "STACK" if stack else "AUGMENT", len(matrices), *result.shape)

    crow = ccol = 0
    for m in matrices:
        r, c = m.size()
        if r > 0 and c > 0:
            if stack:
                target = result.submatrix(crow, 0, r, c)
            else:
                target = result.submatrix(0, ccol, r, c)
            target.copy_from(m)
        crow += r
        ccol += c
    return result


def vstack(matrices: Iterable[FloatMatrix]) -> FloatMatrix:
    """Vertically stack matrices (row concatenation)."""
    return join(JoinType.STACK, *matrices)


def hstack(matrices: Iterable[FloatMatrix]) -> FloatMatrix:
    """Horizontally stack matrices (column concatenation)."""
    return join(JoinType.AUGMENT, *matrices)
