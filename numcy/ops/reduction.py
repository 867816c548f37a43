"""
Numcy Reductions
================

Sums, means and maxima. Column-wise results are ``[1, columns]`` rows;
whole-array results are ``[1, 1]``.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from ..core.axis import Axis, dispatch_axis
from ..core.shape_list import ShapeList
from ..errors import IncompatibleShapesError, IndexOutOfRangeError, breadcrumb
from ..tensor import Tensor
from .base import emit, matrix, operand, result_dtype


# =============================================================================
# Sum
# =============================================================================

def _sum_elementwise(a: Tensor, b: Tensor) -> Tensor:
    a_data = operand(a)
    b_data = operand(b)
    if b.n == 1:
        return emit(a_data + b_data[0], a.shape.copy(), result_dtype(a, b))
    if a.shape != b.shape:
        raise IncompatibleShapesError(
            f"sum needs equal shapes or a scalar, got {list(a.shape.dims)} and {list(b.shape.dims)}"
        )
    return emit(a_data + b_data, a.shape.copy(), result_dtype(a, b))


def _sum_rows(a: Tensor, b: Tensor) -> Tensor:
    operand(a)
    operand(b)
    if a.columns != b.columns:
        raise IncompatibleShapesError(
            f"row-wise sum needs equal column counts, got {a.columns} and {b.columns}"
        )
    longer, shorter = (a, b) if a.rows >= b.rows else (b, a)
    if longer.rows % shorter.rows:
        raise IncompatibleShapesError(
            f"cannot tile {shorter.rows} rows across {longer.rows}"
        )
    tiled = np.tile(matrix(shorter), (longer.rows // shorter.rows, 1))
    return emit(matrix(longer) + tiled, longer.shape.copy(), result_dtype(a, b))


_SUM_HANDLERS = {
    Axis.NONE: _sum_elementwise,
    Axis.ROWS: _sum_rows,
}


@breadcrumb("sum")
def sum(a: Tensor, b: Optional[Tensor] = None, axis: Axis = Axis.NONE) -> Tensor:
    """
    Add two tensors, or total one.

    - ``sum(a)``: total of every element, ``[1, 1]``
    - ``Axis.NONE``: equal shapes, or ``b`` a single element
    - ``Axis.ROWS``: equal column counts; the operand with fewer rows is
      tiled down the other

    Raises:
        IncompatibleShapesError: operands cannot be combined
        UnsupportedAxisError: any other axis
    """
    handler = dispatch_axis(_SUM_HANDLERS, axis)
    if b is None:
        return emit(np.sum(operand(a)), ShapeList.literal(1, 1), a.dtype)
    return handler(a, b)


# =============================================================================
# Mean and max
# =============================================================================

def _mean_rows(a: Tensor, like: Optional[Tensor]) -> Tensor:
    rows = matrix(a)
    if like is not None and not like.is_empty:
        index = operand(like).astype(np.int64)
        if np.any(index < 0) or np.any(index >= a.rows):
            raise IndexOutOfRangeError(
                f"row indices must lie in [0, {a.rows}), got {index.tolist()}"
            )
        rows = rows[index]
    return emit(rows.mean(axis=0), ShapeList.literal(a.columns, 1))


_MEAN_HANDLERS = {
    Axis.ROWS: _mean_rows,
}


@breadcrumb("mean")
def mean(a: Tensor, like: Optional[Tensor] = None, axis: Axis = Axis.ROWS) -> Tensor:
    """
    Column-wise average, ``[1, columns]``.

    When ``like`` holds row indices only those rows are averaged.
    """
    return dispatch_axis(_MEAN_HANDLERS, axis)(a, like)


@breadcrumb("max")
def max(a: Tensor) -> Tensor:
    """Largest element, ``[1, 1]``."""
    return emit(np.max(operand(a)), ShapeList.literal(1, 1), a.dtype)
