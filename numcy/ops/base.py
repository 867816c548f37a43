"""Shared helpers for the ops modules: operand checks and result emission."""

from __future__ import annotations
from typing import Optional

import numpy as np

from ..core.allocator import get_allocator
from ..core.shape_list import ShapeList
from ..core.storage import DType
from ..errors import EmptyArrayAccessError, MalformedShapeError
from ..tensor import Tensor


def operand(t: Tensor) -> np.ndarray:
    """
    Flat buffer of ``t``.

    Raises:
        MalformedShapeError: ``t`` has zero elements
        EmptyArrayAccessError: ``t`` is a shape-only placeholder
    """
    if t.shape.n == 0:
        raise MalformedShapeError("operand shape has zero elements")
    data = t.buffer
    if data is None:
        raise EmptyArrayAccessError("operand has no data buffer")
    return data


def matrix(t: Tensor) -> np.ndarray:
    """``t`` viewed as ``[rows, columns]``."""
    return operand(t).reshape(t.rows, t.columns)


def emit(values: np.ndarray, shape: ShapeList, dtype: Optional[DType] = None) -> Tensor:
    """
    Copy computed values into a freshly allocated buffer and wrap it.

    ``shape`` must be a shape nothing else owns; the result takes it over.
    The element type follows ``values`` unless ``dtype`` is given.
    """
    if shape.n == 0:
        raise MalformedShapeError("result shape has zero elements")
    values = np.asarray(values)
    if dtype is None:
        dtype = DType.from_numpy(values.dtype)
    with get_allocator().scoped(shape.n, dtype) as buf:
        buf[:] = values.reshape(-1)
        return Tensor.adopt(buf, shape, dtype)


def result_dtype(*tensors: Tensor) -> DType:
    """Promoted element type of several operands, NumPy rules."""
    return DType.from_numpy(np.result_type(*(t.dtype.numpy_dtype for t in tensors)))
