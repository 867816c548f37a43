"""Tests for the error taxonomy, breadcrumbs, allocator failures and config."""

import logging

import numpy as np
import pytest

import numcy as nc
from numcy.errors import breadcrumb


class TestTaxonomy:
    """Every error is a NumcyError and the closest builtin."""

    @pytest.mark.parametrize("error, builtin", [
        (nc.OutOfMemoryError, MemoryError),
        (nc.SizeLimitExceededError, MemoryError),
        (nc.MalformedShapeError, ValueError),
        (nc.IncompatibleShapesError, ValueError),
        (nc.IndexOutOfRangeError, IndexError),
        (nc.RangeExceededError, IndexError),
        (nc.RangeSizeError, ValueError),
        (nc.UninitializedAccessError, RuntimeError),
        (nc.EmptyArrayAccessError, RuntimeError),
        (nc.DivideByZeroError, ZeroDivisionError),
        (nc.UnsupportedAxisError, ValueError),
    ])
    def test_hierarchy(self, error, builtin):
        assert issubclass(error, nc.NumcyError)
        assert issubclass(error, builtin)


class TestBreadcrumbs:
    """Failures carry the path they travelled."""

    def test_context_manager(self):
        with pytest.raises(nc.IncompatibleShapesError) as info:
            with breadcrumb("outer"):
                with breadcrumb("inner"):
                    raise nc.IncompatibleShapesError("leaf")
        assert info.value.trail == ["outer", "inner"]
        assert str(info.value) == "outer -> inner -> leaf"

    def test_op_chain(self):
        """cosine -> dot -> matmul."""
        with pytest.raises(nc.IncompatibleShapesError) as info:
            nc.cosine(nc.ones([2, 3]), nc.ones([2, 3]))
        assert info.value.trail == ["cosine", "dot", "matmul"]
        assert str(info.value).startswith("cosine -> dot -> matmul -> ")

    def test_other_exceptions_untouched(self):
        with pytest.raises(KeyError):
            with breadcrumb("lookup"):
                raise KeyError("x")


class TestAllocatorFailures:
    """Allocation failures are reported and nothing leaks."""

    def test_size_limit(self, allocator, size_limit):
        nc.config.set_size_limit(4)
        with pytest.raises(nc.SizeLimitExceededError) as info:
            nc.ones([3, 4])
        assert info.value.trail == ["ones"]
        assert allocator.live_buffers == 0

    def test_allocator_limit_overrides_config(self):
        limited = nc.Allocator(size_limit=2)
        with pytest.raises(nc.SizeLimitExceededError):
            limited.allocate(3)
        assert limited.allocate(2).size == 2
        assert limited.live_buffers == 1

    def test_negative_count(self, allocator):
        with pytest.raises(nc.SizeLimitExceededError):
            allocator.allocate(-1)

    def test_huge_request(self, allocator):
        with pytest.raises((nc.OutOfMemoryError, nc.SizeLimitExceededError)):
            allocator.allocate(1 << 62)
        assert allocator.live_buffers == 0

    def test_scoped_releases_on_error(self, allocator):
        """A failure while filling the buffer hands it back."""
        with pytest.raises(ValueError):
            nc.Tensor(["a", "b"], dtype=nc.float64)
        assert allocator.live_buffers == 0
        assert allocator.total_allocations == 1

    def test_failed_ops_leave_counters(self, allocator, matrix34):
        live = allocator.live_buffers
        with pytest.raises(nc.IncompatibleShapesError):
            nc.concatenate(matrix34, nc.ones([2, 2]))
        with pytest.raises(nc.IncompatibleShapesError):
            nc.dot(matrix34, matrix34)
        with pytest.raises(nc.RangeExceededError):
            matrix34.slice(10, 5)
        assert allocator.live_buffers == live + 1


class TestConfig:
    """Tests for runtime defaults."""

    def test_default_dtype(self):
        assert nc.config.get_default_dtype() == nc.float64
        nc.config.set_default_dtype(nc.float32)
        try:
            assert nc.ones([2, 2]).dtype == nc.float32
            assert nc.randn([2, 2], seed=1).dtype == nc.float32
        finally:
            nc.config.set_default_dtype(None)

    def test_negative_size_limit(self):
        with pytest.raises(ValueError):
            nc.config.set_size_limit(-1)

    def test_dtype_from_numpy(self):
        assert nc.DType.from_numpy(np.float16) == nc.float32
        assert nc.DType.from_numpy(np.bool_) == nc.int64
        assert nc.DType.from_numpy(np.int32) == nc.int32
        with pytest.raises(TypeError):
            nc.DType.from_numpy(np.complex128)

    def test_dtype_round_trips_through_numpy(self):
        """Each element type maps to a NumPy dtype that maps back to it."""
        for dtype in nc.DType:
            assert nc.DType.from_numpy(dtype.numpy_dtype) is dtype
            assert nc.zeros([1, 2], dtype=dtype).buffer.dtype == dtype.numpy_dtype

    def test_setup_logging(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        nc.config.setup_logging(logging.DEBUG)
        assert calls["level"] == logging.DEBUG
        assert calls["format"] == '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
