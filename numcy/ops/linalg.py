"""
Numcy Linear Algebra
====================

Matrix product, norms, outer product, transpose and upper-triangular masking.
Every result is a new Tensor; inputs are never written.
"""

from __future__ import annotations
import logging

import numpy as np

from ..core.axis import Axis, dispatch_axis
from ..core.shape_list import ShapeList
from ..errors import IncompatibleShapesError, MalformedShapeError, breadcrumb
from ..tensor import Tensor
from .base import emit, matrix, operand, result_dtype

logger = logging.getLogger(__name__)


# =============================================================================
# Products
# =============================================================================

@breadcrumb("dot")
def dot(a: Tensor, b: Tensor) -> Tensor:
    """
    Matrix product of ``a`` and ``b``.

    When ``b`` holds a single element the result is ``a`` scaled by it.
    Otherwise ``a.columns`` must equal ``b.rows`` and the result is shaped
    ``[a.rows, b.columns]``.

    Raises:
        IncompatibleShapesError: inner dimensions differ
    """
    a_data = operand(a)
    b_data = operand(b)
    if b.n == 1:
        return emit(a_data * b_data[0], a.shape.copy(), result_dtype(a, b))
    return matmul(a, b)


@breadcrumb("matmul")
def matmul(a: Tensor, b: Tensor) -> Tensor:
    """Matrix product without the scalar shortcut of ``dot``."""
    if a.columns != b.rows:
        raise IncompatibleShapesError(
            f"columns of a ({a.columns}) must match rows of b ({b.rows})"
        )
    product = matrix(a) @ matrix(b)
    return emit(product, ShapeList.literal(b.columns, a.rows))


@breadcrumb("outer")
def outer(m1: Tensor, m2: Tensor) -> Tensor:
    """
    Outer product of the flattened operands.

    With ``M`` elements in ``m1`` and ``N`` in ``m2`` the result is ``[M, N]``.
    """
    a = operand(m1)
    b = operand(m2)
    return emit(np.outer(a, b), ShapeList.literal(b.size, a.size))


# =============================================================================
# Norms
# =============================================================================

@breadcrumb("enorm")
def enorm(x: Tensor) -> np.floating:
    """
    Euclidean norm of all elements.

    Returned as a NumPy scalar: float32 and float64 tensors keep their
    element type, integer tensors give float64.
    """
    data = operand(x)
    dtype = np.result_type(data.dtype, np.float32)
    values = data.astype(dtype, copy=False)
    return dtype.type(np.sqrt(np.sum(values * values)))


def _norm_whole(a: Tensor) -> Tensor:
    if a.shape.num_links != 1:
        raise MalformedShapeError(
            f"whole-array norm needs a 2-axis shape, got {list(a.shape.dims)}"
        )
    return emit(np.linalg.norm(operand(a)), ShapeList.literal(1, 1))


def _norm_columns(a: Tensor) -> Tensor:
    return emit(np.linalg.norm(matrix(a), axis=0), ShapeList.literal(a.columns, 1))


def _norm_rows(a: Tensor) -> Tensor:
    return emit(np.linalg.norm(matrix(a), axis=1), ShapeList.literal(a.rows, 1))


_NORM_HANDLERS = {
    Axis.NONE: _norm_whole,
    Axis.COLUMN: _norm_columns,
    Axis.ROWS: _norm_rows,
}


@breadcrumb("norm")
def norm(a: Tensor, axis: Axis = Axis.NONE) -> Tensor:
    """
    Euclidean norm along ``axis``.

    - ``Axis.NONE``: whole array, ``[1, 1]``
    - ``Axis.COLUMN``: one norm per column, ``[1, columns]``
    - ``Axis.ROWS``: one norm per row, ``[1, rows]``
    """
    return dispatch_axis(_NORM_HANDLERS, axis)(a)


# =============================================================================
# Layout
# =============================================================================

@breadcrumb("transpose")
def transpose(m: Tensor) -> Tensor:
    """
    Swap the last two axes.

    A matrix ``[rows, columns]`` becomes ``[columns, rows]``; higher ranks
    transpose every innermost 2D slice and keep the leading axes.
    """
    dims = m.shape.dims
    stack = operand(m).reshape(-1, dims[-2], dims[-1])
    return emit(np.swapaxes(stack, 1, 2), ShapeList.of(*dims[:-2], dims[-1], dims[-2]), m.dtype)


@breadcrumb("triu")
def triu(m: Tensor, k: int = 0, verbose: bool = False) -> Tensor:
    """
    Zero every entry below diagonal ``k`` of each innermost 2D slice.

    A ``[2, 3, 3]`` input is treated as two stacked ``3 x 3`` matrices.
    The result keeps the input shape.
    """
    data = operand(m)
    dims = m.shape.dims
    stack = data.reshape(-1, dims[-2], dims[-1])
    result = np.triu(stack, k)
    if verbose:
        for index, plane in enumerate(result):
            logger.info("triu slice %d (k=%d):\n%s", index, k, plane)
    return emit(result, m.shape.copy(), m.dtype)
