"""
Numcy Random
============

Random tensors drawn from ``numpy.random.Generator``. A seed of 0 means
"seed from OS entropy"; any other seed makes the draw reproducible.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .. import config
from ..core.axis import Axis, dispatch_axis
from ..core.shape_list import ShapeList, ShapeLike, as_shape
from ..core.storage import int64
from ..errors import MalformedShapeError, RangeSizeError, breadcrumb
from ..tensor import Tensor
from .base import emit, operand


def _generator(seed: int) -> np.random.Generator:
    return np.random.default_rng(None if seed == 0 else seed)


def _target_shape(like: ShapeLike) -> ShapeList:
    shape = as_shape(like).copy()
    if shape.n == 0:
        raise MalformedShapeError("random tensor shape has zero elements")
    return shape


def _fill_rows(samples: np.ndarray, shape: ShapeList) -> np.ndarray:
    return samples


def _fill_columns(samples: np.ndarray, shape: ShapeList) -> np.ndarray:
    # Consecutive draws run down each column
    return samples.reshape(shape.columns, shape.rows).T


_FILL_ORDER = {
    Axis.NONE: _fill_rows,
    Axis.COLUMN: _fill_columns,
}


@breadcrumb("randn")
def randn(like: ShapeLike, seed: int = 0, axis: Axis = Axis.NONE) -> Tensor:
    """
    Normally distributed samples shaped like ``like``.

    Mean and standard deviation come from ``config.DEFAULT_MEAN`` and
    ``config.DEFAULT_STANDARD_DEVIATION``.

    Args:
        like: Target shape, or a tensor whose shape to copy
        seed: 0 for a fresh OS seed, anything else for a fixed stream
        axis: ``Axis.NONE`` fills row by row, ``Axis.COLUMN`` column by column
    """
    fill = dispatch_axis(_FILL_ORDER, axis)
    shape = _target_shape(like)
    samples = _generator(seed).normal(
        config.DEFAULT_MEAN, config.DEFAULT_STANDARD_DEVIATION, size=shape.n
    )
    return emit(fill(samples, shape), shape, config.get_default_dtype())


@breadcrumb("randint")
def randint(low: int, high: int, like: ShapeLike, seed: int = 0) -> Tensor:
    """
    Integers drawn uniformly from ``[low, high)`` as an int64 tensor.

    Raises:
        RangeSizeError: ``high <= low``
    """
    if high <= low:
        raise RangeSizeError(f"empty integer range [{low}, {high})")
    shape = _target_shape(like)
    values = _generator(seed).integers(low, high, size=shape.n)
    return emit(values, shape, int64)


@breadcrumb("shuffle")
def shuffle(t: Tensor, n: Optional[int] = None, seed: int = 0) -> Tensor:
    """
    Copy of ``t`` with ``n`` random element swaps applied (default ``t.n``).

    The input is left untouched.
    """
    size = operand(t).size
    if n is None:
        n = size
    pairs = _generator(seed).integers(0, size, size=(n, 2))
    result = t.copy()
    for i, j in pairs:
        result.swap(int(i), int(j))
    return result
