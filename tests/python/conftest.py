"""
Pytest configuration and shared fixtures for colmat tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import colmat
from colmat import FloatMatrix


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Keep global configuration changes local to one test."""
    yield
    colmat.config.reset()


@pytest.fixture
def small_matrix():
    """Create a small 3x4 matrix.

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return FloatMatrix.from_list([
        [1.0, 0.0, 2.0, 0.0],
        [0.0, 3.0, 0.0, 4.0],
        [5.0, 0.0, 0.0, 6.0],
    ])


@pytest.fixture
def indexed_matrix():
    """Create a 6x6 matrix with element (i, j) = 10*i + j."""
    mat = FloatMatrix(6, 6)
    mat.map(lambda i, j, v: 10.0 * i + j)
    return mat


@pytest.fixture
def square_matrix():
    """Create a 4x4 matrix with element (i, j) = 1 + i + 4*j."""
    mat = FloatMatrix(4, 4)
    mat.map(lambda i, j, v: 1.0 + i + 4 * j)
    return mat


# =============================================================================
# Helper Functions
# =============================================================================

def dense(mat):
    """Row-major nested list of a matrix's logical elements."""
    rows, cols = mat.size()
    return [[mat.get(i, j) for j in range(cols)] for i in range(rows)]


def assert_matrix_equal(mat, expected, rtol=0.0, atol=0.0):
    """Assert matrix elements equal a row-major nested list or array."""
    np.testing.assert_allclose(np.array(dense(mat)).reshape(np.shape(expected)),
                               np.asarray(expected, dtype=np.float64),
                               rtol=rtol, atol=atol)
