"""Pytest configuration and fixtures."""

import numpy as np
import pytest

import numcy as nc


@pytest.fixture
def allocator():
    """Fresh process-wide allocator, restored after the test."""
    fresh = nc.Allocator()
    previous = nc.set_allocator(fresh)
    yield fresh
    nc.set_allocator(previous)


@pytest.fixture
def matrix34():
    """[3, 4] tensor holding 0..11."""
    return nc.Tensor(np.arange(12, dtype=np.float64).reshape(3, 4))


@pytest.fixture(params=[
    (2, 3),
    (2, 3, 4),
    (2, 1, 3, 2),
    (3, 2, 2, 1, 2),
    (2, 2, 3, 1, 2, 2),
])
def dims(request):
    """Shapes of rank 2 through 6."""
    return request.param


@pytest.fixture
def size_limit():
    """Restore the configured allocation limit after the test."""
    previous = nc.config.get_size_limit()
    yield
    nc.config.set_size_limit(previous)
