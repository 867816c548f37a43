"""Padding reshape and concatenation."""

from __future__ import annotations

import numpy as np

from ..core.axis import Axis, dispatch_axis
from ..core.shape_list import ShapeLike, ShapeList, as_shape
from ..errors import IncompatibleShapesError, MalformedShapeError, breadcrumb
from ..tensor import Tensor
from .base import emit, matrix, result_dtype


@breadcrumb("reshape")
def reshape(m1: Tensor, m2: ShapeLike) -> Tensor:
    """
    Copy ``m1`` into a zero-filled tensor shaped like ``m2``.

    Row ``i`` of ``m1`` lands at the start of row ``i`` of the result, so
    ``m1`` must fit: its column and row counts may not exceed ``m2``'s.
    This pads; it never reinterprets the buffer.
    """
    source = matrix(m1)
    shape = as_shape(m2).copy()
    if shape.n == 0:
        raise MalformedShapeError("reshape target has zero elements")
    if m1.columns > shape.columns or m1.rows > shape.rows:
        raise IncompatibleShapesError(
            f"{list(m1.shape.dims)} does not fit inside {list(shape.dims)}"
        )
    padded = np.zeros((shape.rows, shape.columns), dtype=source.dtype)
    padded[:m1.rows, :m1.columns] = source
    return emit(padded, shape, m1.dtype)


def _concatenate_columns(a: Tensor, b: Tensor) -> Tensor:
    if a.rows != b.rows:
        raise IncompatibleShapesError(
            f"column concatenation needs equal row counts, got {a.rows} and {b.rows}"
        )
    joined = np.hstack((matrix(a), matrix(b)))
    return emit(joined, ShapeList.literal(a.columns + b.columns, a.rows), result_dtype(a, b))


def _concatenate_rows(a: Tensor, b: Tensor) -> Tensor:
    if a.columns != b.columns:
        raise IncompatibleShapesError(
            f"row concatenation needs equal column counts, got {a.columns} and {b.columns}"
        )
    joined = np.vstack((matrix(a), matrix(b)))
    return emit(joined, ShapeList.literal(a.columns, a.rows + b.rows), result_dtype(a, b))


_CONCATENATE_HANDLERS = {
    Axis.COLUMN: _concatenate_columns,
    Axis.ROWS: _concatenate_rows,
}


@breadcrumb("concatenate")
def concatenate(a: Tensor, b: Tensor, axis: Axis = Axis.COLUMN) -> Tensor:
    """
    Join two tensors side by side (``Axis.COLUMN``) or one above the other
    (``Axis.ROWS``).
    """
    return dispatch_axis(_CONCATENATE_HANDLERS, axis)(a, b)
