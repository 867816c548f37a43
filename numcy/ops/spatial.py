"""Similarity and distance between tensors."""

from __future__ import annotations

import numpy as np

from ..errors import DivideByZeroError, breadcrumb
from ..tensor import Tensor
from .linalg import dot, enorm, transpose


@breadcrumb("cosine")
def cosine(u: Tensor, v: Tensor) -> float:
    """
    Cosine similarity ``dot(u, v)[0] / (enorm(u) * enorm(v))``.

    Two row vectors of the same shape are accepted as is; ``v`` is
    transposed before the product.

    Raises:
        DivideByZeroError: either operand has zero norm
    """
    if u.rows == 1 and u.n > 1 and u.shape == v.shape:
        with transpose(v) as vt, dot(u, vt) as product:
            numerator = product[0]
    else:
        with dot(u, v) as product:
            numerator = product[0]

    denominator = enorm(u) * enorm(v)
    if denominator == 0:
        raise DivideByZeroError("cosine of a zero-norm vector")
    return numerator / denominator


@breadcrumb("enorm_distance")
def enorm_distance(u: Tensor, v: Tensor) -> np.floating:
    """Euclidean distance ``enorm(u - v)``."""
    with u - v as difference:
        return enorm(difference)
