"""
Broadcast resolution shared by the Tensor arithmetic operators.

Only three kinds of replication are supported, tried in this order:

1. scalar: the right operand has exactly one element;
2. equal: both shapes are identical;
3. row: column counts match and one side has a single row;
4. column: row counts match and one side has a single column.

Anything else is an IncompatibleShapesError.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from .core.shape_list import ShapeList
from .errors import IncompatibleShapesError


class BroadcastKind(Enum):
    SCALAR = "scalar"
    EQUAL = "equal"
    ROW = "row"
    COLUMN = "column"


@dataclass
class BroadcastPlan:
    """How two operands line up, and the shape of the result."""
    kind: BroadcastKind
    target: ShapeList
    left_matrix: Tuple[int, int]
    right_matrix: Tuple[int, int]

    def operands(self, left: np.ndarray, right: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Views of the two flat buffers that NumPy can combine directly.

        Both buffers are read only; nothing is copied.
        """
        if self.kind is BroadcastKind.SCALAR:
            return left, right[0]
        if self.kind is BroadcastKind.EQUAL:
            return left, right
        return left.reshape(self.left_matrix), right.reshape(self.right_matrix)

    def apply(
        self,
        ufunc: np.ufunc,
        left: np.ndarray,
        right: np.ndarray,
        out: np.ndarray,
        reflected: bool = False,
    ) -> np.ndarray:
        """
        Run ``ufunc`` over the operands into the flat ``out`` buffer.

        With ``reflected`` the right operand is passed first, which is how
        ``number - tensor`` and ``number / tensor`` are computed.
        """
        lhs, rhs = self.operands(left, right)
        if reflected:
            lhs, rhs = rhs, lhs
        if self.kind in (BroadcastKind.ROW, BroadcastKind.COLUMN):
            target = out.reshape(self.target.rows, self.target.columns)
        else:
            target = out
        ufunc(lhs, rhs, out=target, casting='unsafe')
        return out


def resolve_broadcast(left: ShapeList, right: ShapeList) -> BroadcastPlan:
    """
    Decide how ``left`` and ``right`` combine.

    Returns:
        BroadcastPlan whose ``target`` is a fresh copy of the result shape:
        the left shape for scalar and equal operands, the larger side's shape
        for row and column replication.

    Raises:
        IncompatibleShapesError: no rule applies
    """
    left_matrix = (left.rows, left.columns)
    right_matrix = (right.rows, right.columns)

    if right.n == 1:
        return BroadcastPlan(BroadcastKind.SCALAR, left.copy(), left_matrix, right_matrix)

    if left == right:
        return BroadcastPlan(BroadcastKind.EQUAL, left.copy(), left_matrix, right_matrix)

    if left.columns == right.columns and left.rows != right.rows and 1 in (left.rows, right.rows):
        larger = right if left.rows == 1 else left
        return BroadcastPlan(BroadcastKind.ROW, larger.copy(), left_matrix, right_matrix)

    if left.rows == right.rows and left.columns != right.columns and 1 in (left.columns, right.columns):
        larger = right if left.columns == 1 else left
        return BroadcastPlan(BroadcastKind.COLUMN, larger.copy(), left_matrix, right_matrix)

    raise IncompatibleShapesError(
        f"cannot broadcast shape {list(left.dims)} with {list(right.dims)}"
    )
