"""Tests for the Tensor container: ownership, access, broadcasting and slicing."""

import numpy as np
import pytest

import numcy as nc
from numcy import Axis


class TestConstruction:
    """Tests for building tensors."""

    def test_from_nested_list(self):
        t = nc.Tensor([[1.0, 2.0], [3.0, 4.0]])
        assert t.shape == nc.ShapeList.of(2, 2)
        assert t.dtype == nc.float64
        assert t.n == 4
        np.testing.assert_array_equal(t.numpy(), np.array([[1.0, 2.0], [3.0, 4.0]]))

    def test_vector_becomes_row(self):
        t = nc.Tensor([1, 2, 3])
        assert t.shape.dims == (1, 3)
        assert t.dtype == nc.int64

    def test_number_becomes_scalar(self):
        t = nc.Tensor(2.5)
        assert t.shape.dims == (1, 1)
        assert t[0] == 2.5

    def test_explicit_shape(self):
        t = nc.Tensor(np.arange(6), shape=[3, 2], dtype=nc.float32)
        assert t.shape.dims == (3, 2)
        assert t.dtype == nc.float32
        assert t.buffer.dtype == np.float32

    def test_data_with_zero_shape_fails(self):
        with pytest.raises(nc.MalformedShapeError):
            nc.Tensor([1, 2, 3], shape=[0, 3])

    def test_data_shape_mismatch_fails(self):
        with pytest.raises(nc.MalformedShapeError):
            nc.Tensor([1, 2, 3], shape=[2, 2])

    def test_placeholder(self):
        """No data with a valid shape gives a shape-only tensor."""
        t = nc.Tensor(None, [2, 3])
        assert t.shape.n == 6
        assert t.buffer is None
        assert t.is_empty

    def test_empty(self):
        t = nc.Tensor()
        assert t.shape.n == 0
        assert t.buffer is None
        assert t.reference_count == 1

    def test_caller_shape_is_copied(self):
        """The tensor owns its own shape."""
        shape = nc.ShapeList.of(2, 2)
        t = nc.Tensor([1, 2, 3, 4], shape=shape)
        t.release()
        assert shape.n == 4


class TestIndexedAccess:
    """Element access checks, in order."""

    def test_read_and_write(self, matrix34):
        assert matrix34[5] == 5.0
        matrix34[5] = 50.0
        assert matrix34[5] == 50.0

    def test_released_handle(self, matrix34):
        matrix34.release()
        with pytest.raises(nc.UninitializedAccessError):
            matrix34[0]

    def test_no_buffer(self):
        with pytest.raises(nc.EmptyArrayAccessError):
            nc.Tensor()[0]
        with pytest.raises(nc.EmptyArrayAccessError):
            nc.Tensor(None, [2, 2])[0]

    def test_out_of_range(self, matrix34):
        with pytest.raises(nc.IndexOutOfRangeError):
            matrix34[12]
        with pytest.raises(nc.IndexOutOfRangeError):
            matrix34[-1]
        with pytest.raises(nc.IndexOutOfRangeError):
            matrix34[12] = 1.0

    def test_matrix_view_writes_through(self, matrix34):
        view = matrix34.as_matrix()
        assert view.shape == (3, 4)
        view[1, 0] = -4.0
        assert matrix34[4] == -4.0

    def test_swap(self, matrix34):
        matrix34.swap(0, 11)
        assert matrix34[0] == 11.0
        assert matrix34[11] == 0.0


class TestOwnership:
    """Tests for alias, assign, copy and release."""

    def test_alias_shares_block(self, matrix34):
        """After aliasing both handles report the same count."""
        b = matrix34.alias()
        assert b.reference_count == matrix34.reference_count == 2

        b[0] = 42.0
        assert matrix34[0] == 42.0

    def test_release_one_alias(self, matrix34):
        """Releasing one handle leaves the other valid, count down by one."""
        b = matrix34.alias()
        b.release()
        assert matrix34.reference_count == 1
        assert matrix34[11] == 11.0
        assert b.reference_count == 0

    def test_assign(self, matrix34):
        other = nc.ones([2, 2])
        other.assign(matrix34)
        assert other.reference_count == 2
        assert other.shape == matrix34.shape
        assert other[3] == 3.0

    def test_self_assign_is_noop(self, matrix34):
        matrix34.assign(matrix34)
        assert matrix34.reference_count == 1
        b = matrix34.alias()
        b.assign(matrix34)
        assert matrix34.reference_count == 2

    def test_assign_from_released_fails(self, matrix34):
        other = nc.ones([2, 2])
        other.release()
        with pytest.raises(nc.UninitializedAccessError):
            matrix34.assign(other)

    def test_count_forwards_to_shape(self, matrix34):
        """Tensor and shape counts move in lockstep."""
        matrix34.increment_reference_count()
        assert matrix34.reference_count == 2
        assert matrix34.shape.ref_count == 2
        matrix34.decrement_reference_count()
        assert matrix34.shape.ref_count == 1

    def test_copy_is_deep(self, matrix34):
        dup = matrix34.copy()
        assert dup == matrix34
        assert dup.reference_count == 1
        dup[0] = -1.0
        assert matrix34[0] == 0.0
        dup.release()
        assert matrix34.shape.n == 12

    def test_copy_of_placeholder(self):
        dup = nc.Tensor(None, [2, 3]).copy()
        assert dup.shape.dims == (2, 3)
        assert dup.buffer is None

    def test_context_manager_releases(self, matrix34):
        with matrix34.alias() as b:
            assert b.reference_count == 2
        assert matrix34.reference_count == 1

    def test_release_returns_buffer(self, allocator):
        t = nc.ones([3, 4])
        assert allocator.live_buffers == 1
        assert allocator.live_elements == 12
        b = t.alias()
        t.release()
        assert allocator.live_buffers == 1
        b.release()
        assert allocator.live_buffers == 0
        assert allocator.live_elements == 0


class TestBroadcasting:
    """Tests for the arithmetic operators."""

    def test_scalar(self, matrix34):
        """A + s adds s[0] to every element."""
        s = nc.Tensor([[5.0]])
        result = matrix34 + s
        assert result.shape == matrix34.shape
        np.testing.assert_array_equal(result.numpy(), matrix34.numpy() + 5.0)

    def test_equal_shapes(self, matrix34):
        result = matrix34 * matrix34
        np.testing.assert_array_equal(result.numpy(), matrix34.numpy() ** 2)

    def test_row(self, matrix34):
        """R + M replicates R across M's rows."""
        row = nc.Tensor([[1.0, 2.0, 3.0, 4.0]])
        result = row + matrix34
        assert result.shape.dims == (3, 4)
        expected = np.tile(row.numpy(), (3, 1)) + matrix34.numpy()
        np.testing.assert_array_equal(result.numpy(), expected)

    def test_column(self, matrix34):
        column = nc.Tensor([[10.0], [20.0], [30.0]])
        result = matrix34 - column
        assert result.shape.dims == (3, 4)
        np.testing.assert_array_equal(result.numpy(), matrix34.numpy() - column.numpy())

    def test_row_over_stacked_shape(self):
        """Row counts flatten every axis but the last."""
        stacked = nc.ones([2, 3, 4])
        result = stacked + nc.Tensor([[1.0, 2.0, 3.0, 4.0]])
        assert result.shape.dims == (2, 3, 4)
        assert result[4] == 2.0

    def test_incompatible(self):
        with pytest.raises(nc.IncompatibleShapesError):
            nc.ones([2, 3]) + nc.ones([3, 2])

    def test_scalar_on_left_fails(self, matrix34):
        """Only the right operand broadcasts as a scalar."""
        with pytest.raises(nc.IncompatibleShapesError):
            nc.Tensor([[1.0]]) + matrix34

    def test_operands_untouched(self, matrix34):
        before = matrix34.numpy()
        _ = matrix34 + matrix34
        np.testing.assert_array_equal(matrix34.numpy(), before)

    def test_numbers(self, matrix34):
        np.testing.assert_array_equal((matrix34 + 1).numpy(), matrix34.numpy() + 1)
        np.testing.assert_array_equal((2 * matrix34).numpy(), 2 * matrix34.numpy())
        np.testing.assert_array_equal((10 - matrix34).numpy(), 10 - matrix34.numpy())
        np.testing.assert_array_equal((-matrix34).numpy(), -matrix34.numpy())

    def test_left_dtype_kept(self):
        result = nc.Tensor([1, 2]) * 2.5
        assert result.dtype == nc.int64
        assert result.tolist() == [[2, 5]]

    def test_idempotence(self):
        np.testing.assert_array_equal((nc.ones([2, 3]) * 1).numpy(), nc.ones([2, 3]).numpy())
        assert nc.ones([2, 3]) * 1 == nc.ones([2, 3])
        assert nc.zeros([2, 3]) + nc.zeros([2, 3]) == nc.zeros([2, 3])

    def test_divide(self, matrix34):
        result = matrix34 / nc.Tensor([[2.0]])
        np.testing.assert_allclose(result.numpy(), matrix34.numpy() / 2.0)

    def test_divide_by_zero(self, matrix34, allocator):
        """A single-element zero divisor fails and leaves the dividend alone."""
        before = matrix34.numpy()
        live = allocator.live_buffers
        with pytest.raises(nc.DivideByZeroError):
            matrix34 / nc.Tensor([[0.0]])
        with pytest.raises(ZeroDivisionError):
            matrix34 / 0
        np.testing.assert_array_equal(matrix34.numpy(), before)
        assert allocator.live_buffers == live + 1

    def test_divide_by_zero_elements(self):
        """Zeros inside a full divisor follow IEEE rules."""
        result = nc.ones([1, 2]) / nc.Tensor([[0.0, 2.0]])
        assert np.isinf(result[0])
        assert result[1] == 0.5

    def test_in_place_subtract(self, matrix34):
        alias = matrix34.alias()
        matrix34 -= nc.ones([3, 4])
        assert alias[0] == -1.0
        with pytest.raises(nc.IncompatibleShapesError):
            matrix34 -= nc.ones([1, 4])

    def test_matmul_operator(self, matrix34):
        result = matrix34 @ nc.ones([4, 2])
        np.testing.assert_array_equal(result.numpy(), matrix34.numpy() @ np.ones((4, 2)))


class TestSlice:
    """Tests for windows copied out of a tensor."""

    def test_final_elements(self, matrix34):
        """A window ending exactly at the last element succeeds."""
        tail = matrix34.slice(8, 4)
        assert tail.shape.dims == (1, 4)
        assert tail.tolist() == [[8.0, 9.0, 10.0, 11.0]]

    def test_one_past_the_end(self, matrix34):
        with pytest.raises(nc.RangeExceededError):
            matrix34.slice(9, 4)

    def test_zero_length(self, matrix34):
        with pytest.raises(nc.MalformedShapeError):
            matrix34.slice(0, 0)

    def test_shaped_window(self, matrix34):
        window = matrix34.slice(2, [2, 3])
        assert window.shape.dims == (2, 3)
        assert window.tolist() == [[2.0, 3.0, 4.0], [5.0, 6.0, 7.0]]

    def test_column_window(self, matrix34):
        """Each row of the window starts one source row further on."""
        window = matrix34.slice(1, [2, 2], Axis.COLUMN)
        assert window.tolist() == [[1.0, 2.0], [5.0, 6.0]]

    def test_column_window_out_of_range(self, matrix34):
        with pytest.raises(nc.RangeExceededError):
            matrix34.slice(9, [2, 2], Axis.COLUMN)
        with pytest.raises(nc.RangeExceededError):
            matrix34.slice(0, [1, 5], Axis.COLUMN)

    def test_column_window_wrapping_a_row(self, matrix34):
        """A window may not run off the end of a source row into the next."""
        with pytest.raises(nc.RangeExceededError):
            matrix34.slice(3, [2, 2], Axis.COLUMN)

    def test_unsupported_axis(self, matrix34):
        with pytest.raises(nc.UnsupportedAxisError):
            matrix34.slice(0, [1, 2], Axis.ROWS)

    def test_source_untouched(self, matrix34):
        window = matrix34.slice(0, 2)
        window[0] = 100.0
        assert matrix34[0] == 0.0


class TestDisplay:
    def test_repr(self, matrix34):
        assert repr(matrix34).startswith("Tensor(")
        matrix34.release()
        assert repr(matrix34) == "Tensor(<released>)"
