"""
Tests for FloatMatrix construction, element access and structural operations.
"""

import array
import math

import pytest
import numpy as np

from colmat import (
    FloatMatrix, Ownership, zeros, from_buffer, from_list, copy_of,
    copy_into, transpose_into, allclose, ConstSource,
    InvalidSizeError, CapacityError, ShapeMismatchError, ColmatError,
)
from conftest import assert_matrix_equal, dense


class TestFloatMatrixCreation:
    """Test FloatMatrix creation."""

    def test_zeros(self):
        """Fresh matrix is zero filled with stride == rows."""
        mat = FloatMatrix.zeros(3, 4)
        assert mat.shape == (3, 4)
        assert mat.size() == (3, 4)
        assert mat.stride == 3
        assert len(mat) == 12
        assert mat.ownership is Ownership.OWNED
        assert all(mat.get_at(k) == 0.0 for k in range(12))

    def test_zeros_function(self):
        mat = zeros(2, 5)
        assert mat.shape == (2, 5)
        assert mat.data.size == 10

    def test_negative_size(self):
        with pytest.raises(InvalidSizeError):
            FloatMatrix(-1, 3)
        with pytest.raises(ValueError):
            zeros(3, -2)

    def test_zero_size(self):
        mat = FloatMatrix(0, 5)
        assert mat.is_empty
        assert len(mat) == 0
        assert mat.get(0, 0) == 0.0

    def test_from_list(self, small_matrix):
        assert small_matrix.shape == (3, 4)
        assert small_matrix.get(2, 0) == 5.0
        assert small_matrix.get(1, 3) == 4.0
        # column-major storage
        assert small_matrix.data.tolist()[:3] == [1.0, 0.0, 5.0]

    def test_from_list_jagged_pads_zero(self):
        mat = from_list([[1.0], [2.0, 3.0]])
        assert mat.shape == (2, 2)
        assert mat.get(0, 1) == 0.0

    def test_copy_is_owned_and_independent(self, small_matrix):
        dup = copy_of(small_matrix)
        assert dup.ownership is Ownership.OWNED
        assert dup.allclose(small_matrix)
        dup.set(0, 0, 99.0)
        assert small_matrix.get(0, 0) == 1.0


class TestFromBuffer:
    """Test wrapping caller supplied storage."""

    def test_numpy_buffer_is_aliased(self):
        buf = np.arange(6, dtype=np.float64)
        mat = from_buffer(2, 3, buf)
        assert mat.ownership is Ownership.BORROWED
        assert mat.get(1, 2) == 5.0
        mat.set(0, 0, 42.0)
        assert buf[0] == 42.0
        buf[3] = -1.0
        assert mat.get(1, 1) == -1.0

    def test_array_module_buffer(self):
        buf = array.array('d', [1.0, 2.0, 3.0, 4.0])
        mat = FloatMatrix.from_buffer(2, 2, buf)
        mat.set(1, 1, 8.0)
        assert buf[3] == 8.0

    def test_list_is_copied(self):
        values = [1.0, 2.0, 3.0, 4.0]
        mat = FloatMatrix.from_buffer(2, 2, values)
        assert mat.ownership is Ownership.OWNED
        mat.set(0, 0, 7.0)
        assert values[0] == 1.0

    def test_explicit_stride(self):
        buf = np.arange(12, dtype=np.float64)
        mat = from_buffer(2, 3, buf, stride=4)
        assert mat.stride == 4
        assert dense(mat) == [[0.0, 4.0, 8.0], [1.0, 5.0, 9.0]]

    def test_non_positive_stride_defaults_to_rows(self):
        mat = from_buffer(3, 2, np.zeros(6), stride=0)
        assert mat.stride == 3
        mat = from_buffer(3, 2, np.zeros(6), stride=-5)
        assert mat.stride == 3

    def test_capacity_too_small(self):
        with pytest.raises(CapacityError) as exc:
            from_buffer(3, 3, np.zeros(8))
        assert exc.value.code == ColmatError.ERROR_CAPACITY

    def test_capacity_uses_stride(self):
        with pytest.raises(CapacityError):
            from_buffer(2, 3, np.zeros(10), stride=4)

    def test_stride_smaller_than_rows(self):
        with pytest.raises(InvalidSizeError):
            from_buffer(4, 2, np.zeros(8), stride=2)

    def test_wrong_dtype(self):
        with pytest.raises(TypeError):
            from_buffer(2, 2, np.zeros(4, dtype=np.float32))

    def test_read_only_bytes_rejected(self):
        with pytest.raises(TypeError, match="read-only"):
            from_buffer(2, 2, bytes(32))

    def test_read_only_array_rejected(self):
        buf = np.zeros(4)
        buf.setflags(write=False)
        with pytest.raises(TypeError):
            from_buffer(2, 2, buf)

    def test_writable_bytearray(self):
        raw = bytearray(32)
        mat = from_buffer(2, 2, raw)
        mat.set(1, 1, 1.0)
        assert np.frombuffer(raw)[3] == 1.0


class TestElementAccess:
    """Test get/set and flat access."""

    def test_negative_indexing(self, small_matrix):
        assert small_matrix.get(-1, -1) == small_matrix.get(2, 3)
        assert small_matrix.get(-3, 0) == 1.0

    def test_out_of_range_get_is_nan(self, small_matrix):
        assert math.isnan(small_matrix.get(3, 0))
        assert math.isnan(small_matrix.get(0, 4))
        assert math.isnan(small_matrix.get(-4, 0))

    def test_out_of_range_set_is_noop(self, small_matrix):
        before = dense(small_matrix)
        small_matrix.set(3, 0, 9.0)
        small_matrix.set(0, -5, 9.0)
        assert dense(small_matrix) == before

    def test_negative_set(self, small_matrix):
        small_matrix.set(-1, -1, 11.0)
        assert small_matrix.get(2, 3) == 11.0

    def test_empty_matrix_get_returns_zero(self):
        mat = FloatMatrix(0, 0)
        assert mat.get(0, 0) == 0.0
        assert mat.get(5, 5) == 0.0
        mat.set(0, 0, 1.0)

    def test_flat_access_is_column_major(self, small_matrix):
        assert [small_matrix.get_at(k) for k in range(3)] == [1.0, 0.0, 5.0]
        assert small_matrix.get_at(3) == 0.0
        assert small_matrix.get_at(4) == 3.0
        assert small_matrix.get_at(-1) == 6.0
        assert math.isnan(small_matrix.get_at(12))
        assert math.isnan(small_matrix.get_at(-13))

    def test_flat_set(self, small_matrix):
        small_matrix.set_at(5, 7.0)
        assert small_matrix.get(2, 1) == 7.0
        small_matrix.set_at(-12, 8.0)
        assert small_matrix.get(0, 0) == 8.0
        small_matrix.set_at(12, 9.0)
        assert 9.0 not in small_matrix.data.tolist()

    def test_flat_access_on_view_uses_logical_order(self, indexed_matrix):
        view = indexed_matrix.submatrix(1, 2, 2, 2)
        assert [view.get_at(k) for k in range(4)] == [12.0, 22.0, 13.0, 23.0]

    def test_item_syntax(self, small_matrix):
        assert small_matrix[1, 1] == 3.0
        assert small_matrix[4] == 3.0
        small_matrix[0, 3] = 2.5
        assert small_matrix.get(0, 3) == 2.5
        small_matrix[-1] = 1.5
        assert small_matrix.get(2, 3) == 1.5
        with pytest.raises(TypeError):
            small_matrix["a"]


class TestCopyAndTranspose:
    """Test shape-checked copy and transpose."""

    def test_copy_from(self, small_matrix):
        dst = FloatMatrix(3, 4)
        dst.copy_from(small_matrix)
        assert dense(dst) == dense(small_matrix)

    def test_copy_shape_mismatch(self, small_matrix):
        dst = FloatMatrix(4, 3)
        with pytest.raises(ShapeMismatchError):
            dst.copy_from(small_matrix)
        assert all(v == 0.0 for v in dst.data.tolist())

    def test_copy_single_row_views(self, indexed_matrix):
        dst = FloatMatrix(2, 6)
        copy_into(dst.row(1), indexed_matrix.row(3))
        assert dense(dst) == [[0.0] * 6, [30.0, 31.0, 32.0, 33.0, 34.0, 35.0]]

    def test_copy_between_submatrices(self):
        a = FloatMatrix(9, 9)
        b = FloatMatrix(9, 9)
        b.set_from(ConstSource(2.0))
        sub_a = a.submatrix(1, 1, 7, 7)
        sub_b = b.submatrix(1, 1, 7, 7)
        sub_a.copy_from(sub_b)
        assert sub_a.allclose(sub_b)
        assert a.get(0, 0) == 0.0
        assert a.get(8, 8) == 0.0
        assert a.get(1, 1) == 2.0

    def test_transpose(self, small_matrix):
        dst = FloatMatrix(4, 3)
        transpose_into(dst, small_matrix)
        for i in range(3):
            for j in range(4):
                assert dst.get(j, i) == small_matrix.get(i, j)

    def test_transpose_shape_mismatch(self, small_matrix):
        with pytest.raises(ShapeMismatchError):
            FloatMatrix(3, 4).transpose_from(small_matrix)

    def test_transpose_into_view(self, indexed_matrix):
        src = from_list([[1.0, 2.0, 3.0]])
        indexed_matrix.column(0, 0, 3).transpose_from(src)
        assert [indexed_matrix.get(i, 0) for i in range(4)] == [1.0, 2.0, 3.0, 30.0]


class TestAllClose:
    """Test tolerance comparison."""

    def test_self_is_close(self, small_matrix):
        assert allclose(small_matrix, small_matrix)

    def test_nan_does_not_reject(self):
        a = from_list([[math.nan, 1.0]])
        assert a.allclose(a)

    def test_shape_mismatch_is_false(self):
        assert not FloatMatrix(2, 3).allclose(FloatMatrix(3, 2))

    def test_boundary(self):
        """Difference equal to abstol + reltol*|b| passes, larger fails."""
        b = from_list([[1.0]])
        assert from_list([[1.5]]).allclose(b, abstol=0.25, reltol=0.25)
        assert not from_list([[1.5000001]]).allclose(b, abstol=0.25, reltol=0.25)

    def test_default_tolerances(self):
        b = from_list([[0.0]])
        assert from_list([[1e-8]]).allclose(b)
        assert not from_list([[2e-8]]).allclose(b)

    def test_relative_tolerance_uses_second_operand(self):
        a = from_list([[100.0]])
        b = from_list([[100.0009]])
        assert a.allclose(b)
        assert not a.allclose(from_list([[100.002]]))


class TestRepresentation:
    """Test string rendering."""

    def test_to_string(self, small_matrix):
        text = small_matrix.to_string("%.1f")
        assert text == ("[1.0, 0.0, 2.0, 0.0]\n"
                        "[0.0, 3.0, 0.0, 4.0]\n"
                        "[5.0, 0.0, 0.0, 6.0]")

    def test_str_uses_default_format(self):
        mat = from_list([[1.0, -2.0]])
        assert str(mat) == "[ 1.00e+00, -2.00e+00]"

    def test_empty_to_string(self):
        assert FloatMatrix(0, 0).to_string() == ""

    def test_repr(self, small_matrix):
        assert repr(small_matrix) == "FloatMatrix(rows=3, cols=4, stride=3, ownership=owned)"

    def test_storage_info(self, indexed_matrix):
        info = indexed_matrix.submatrix(2, 1, 3, 2).storage_info()
        assert info.ownership is Ownership.VIEW
        assert info.shape == (3, 2)
        assert info.stride == 6
        assert info.offset == 2 + 6
        assert info.capacity == 36
        assert not info.is_contiguous

    def test_storage_info_empty(self, indexed_matrix):
        info = indexed_matrix.submatrix(6, 6).storage_info()
        assert info.ownership is Ownership.EMPTY
        assert info.capacity == 0


class TestNumpyInterop:
    """Test zero-copy numpy window."""

    def test_to_numpy_matches_elements(self, small_matrix):
        np.testing.assert_array_equal(small_matrix.to_numpy(), np.array(dense(small_matrix)))

    def test_to_numpy_aliases_view(self, indexed_matrix):
        view = indexed_matrix.submatrix(1, 1, 2, 3)
        arr = view.to_numpy()
        assert arr.shape == (2, 3)
        arr[0, 0] = -7.0
        assert indexed_matrix.get(1, 1) == -7.0

    def test_array_protocol(self, small_matrix):
        arr = np.asarray(small_matrix)
        assert arr.shape == (3, 4)
        assert_matrix_equal(small_matrix, arr)
