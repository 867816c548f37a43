"""Tensor factories: ranges, constants and conversion from array-likes."""

from __future__ import annotations
import math
from typing import Any, Optional

import numpy as np

from .. import config
from ..core.allocator import get_allocator
from ..core.shape_list import ShapeList, ShapeLike, as_shape
from ..core.storage import DType
from ..errors import MalformedShapeError, RangeSizeError, breadcrumb
from ..tensor import Tensor
from .base import emit


def _filled(shape: ShapeLike, value, dtype: Optional[DType]) -> Tensor:
    layout = as_shape(shape).copy()
    if layout.n == 0:
        raise MalformedShapeError("cannot create a tensor with zero elements")
    if dtype is None:
        dtype = config.get_default_dtype()
    with get_allocator().scoped(layout.n, dtype) as buf:
        buf.fill(value)
        return Tensor.adopt(buf, layout, dtype)


@breadcrumb("ones")
def ones(shape: ShapeLike, dtype: Optional[DType] = None) -> Tensor:
    """Tensor of ones."""
    return _filled(shape, 1, dtype)


@breadcrumb("zeros")
def zeros(shape: ShapeLike, dtype: Optional[DType] = None) -> Tensor:
    """Tensor of zeros."""
    return _filled(shape, 0, dtype)


@breadcrumb("arange")
def arange(
    start,
    stop=None,
    step=1,
    like: Optional[ShapeLike] = None,
    dtype: Optional[DType] = None,
) -> Tensor:
    """
    Evenly spaced values ``start, start + step, ...`` below ``stop``.

    ``arange(stop)`` counts from 0. Without ``like`` the result is
    ``[1, count]``; with it the result takes ``like``'s shape and the
    elements past ``count`` are zero.

    Raises:
        RangeSizeError: ``step`` is 0, or ``count`` exceeds ``like.n``
        MalformedShapeError: the range is empty
    """
    if stop is None:
        start, stop = 0, start
    if step == 0:
        raise RangeSizeError("arange step must not be zero")

    count = max(0, math.ceil((stop - start) / step))
    if count == 0:
        raise MalformedShapeError(f"arange({start}, {stop}, {step}) is empty")

    values = (start + step * np.arange(count)).astype(np.result_type(start, stop, step))
    if dtype is None:
        dtype = DType.from_numpy(values.dtype)

    if like is None:
        return emit(values, ShapeList.literal(count, 1), dtype)

    shape = as_shape(like).copy()
    if shape.n == 0:
        raise MalformedShapeError("arange target shape has zero elements")
    if count > shape.n:
        raise RangeSizeError(f"arange produces {count} values, target holds {shape.n}")
    padded = np.zeros(shape.n, dtype=values.dtype)
    padded[:count] = values
    return emit(padded, shape, dtype)


@breadcrumb("tensor")
def tensor(data: Any, dtype: Optional[DType] = None) -> Tensor:
    """Tensor holding a copy of ``data`` (nested sequence, array or number)."""
    return Tensor(data, dtype=dtype)


@breadcrumb("from_numpy")
def from_numpy(array: np.ndarray) -> Tensor:
    """Tensor holding a copy of a NumPy array, keeping its element type."""
    return Tensor(np.asarray(array))
