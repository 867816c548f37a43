"""
ShapeVector: flat, reference-counted vector of axis sizes.

A 1-axis declaration is always materialised as ``[1, size]`` so every usable
vector has at least a row axis and a column axis. The empty vector (rank 0)
is legal and describes zero elements.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Iterable, Iterator, Optional, Tuple, Union

import numpy as np

from .. import config
from ..errors import (
    IndexOutOfRangeError,
    MalformedShapeError,
    UninitializedAccessError,
)
from .axis import Axis, dispatch_axis

# Axes implied by the innermost link: rows and columns
MIN_RANK = 2


@dataclass
class _DimsBlock:
    dims: Optional[np.ndarray]
    ref_count: int


class ShapeVector:
    """
    Flat descriptor of an array's axis sizes.

    Copies made with ``assign`` share one block and one reference count;
    ``copy()`` and ``ShapeVector(other)`` are deep.
    """

    def __init__(self, dims: Union['ShapeVector', Iterable[int], None] = None):
        if isinstance(dims, ShapeVector):
            dims = dims._require("ShapeVector()", MalformedShapeError)
            sizes = np.array(dims, dtype=np.intp)
        elif dims is None:
            sizes = np.empty(0, dtype=np.intp)
        else:
            sizes = np.array(list(dims), dtype=np.intp).reshape(-1)
        self._block = _DimsBlock(self._materialise(sizes), config.DEFAULT_REFERENCE_COUNT)

    @classmethod
    def wrap(cls, storage: np.ndarray) -> 'ShapeVector':
        """
        Adopt caller-owned storage without copying it.

        The caller hands over ownership; later changes to ``storage`` are
        visible through the vector.
        """
        vec = cls.__new__(cls)
        storage = np.asarray(storage)
        if storage.ndim != 1:
            raise MalformedShapeError(f"shape storage must be flat, got {storage.ndim} axes")
        vec._block = _DimsBlock(cls._materialise(storage), config.DEFAULT_REFERENCE_COUNT)
        return vec

    @staticmethod
    def _materialise(sizes: np.ndarray) -> np.ndarray:
        if np.any(sizes < 0):
            raise MalformedShapeError(f"axis sizes must be non-negative, got {sizes.tolist()}")
        if sizes.size == 1:
            return np.concatenate([np.ones(1, dtype=sizes.dtype), sizes])
        return sizes

    def _require(self, where: str, error=UninitializedAccessError) -> np.ndarray:
        if self._block is None or self._block.dims is None:
            raise error(f"{where}: shape vector is unset")
        return self._block.dims

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Rank (number of axes)."""
        if self._block is None or self._block.dims is None:
            return 0
        return int(self._block.dims.size)

    @property
    def rank(self) -> int:
        return self.size()

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> int:
        dims = self._require("ShapeVector[]")
        if not isinstance(index, (int, np.integer)) or index < 0 or index >= dims.size:
            raise IndexOutOfRangeError(f"axis {index} out of bounds for rank {dims.size}")
        return int(dims[index])

    def __iter__(self) -> Iterator[int]:
        for i in range(self.size()):
            yield self[i]

    def to_tuple(self) -> Tuple[int, ...]:
        return tuple(self)

    @property
    def is_empty(self) -> bool:
        return self.size() == 0

    @property
    def numel(self) -> int:
        """Product of all axis sizes; 0 for the empty vector."""
        if self.is_empty:
            return 0
        return math.prod(self.to_tuple())

    def _checked(self, where: str) -> np.ndarray:
        dims = self._require(where, MalformedShapeError)
        if dims.size < MIN_RANK:
            raise MalformedShapeError(f"{where}: needs at least {MIN_RANK} axes, got {dims.size}")
        return dims

    @property
    def inner_array_count(self) -> int:
        """Number of rows when the array is flattened to 2D."""
        dims = self._checked("inner_array_count")
        return math.prod(int(d) for d in dims[:-1])

    @property
    def inner_array_count_actual(self) -> int:
        """Size of the second-to-last axis."""
        return int(self._checked("inner_array_count_actual")[-2])

    @property
    def size_of_innermost(self) -> int:
        return int(self._checked("size_of_innermost")[-1])

    @property
    def column_count(self) -> int:
        return self.size_of_innermost

    # ------------------------------------------------------------------
    # Copy, assignment and reference counting
    # ------------------------------------------------------------------

    def copy(self) -> 'ShapeVector':
        return ShapeVector(self)

    def assign(self, other: 'ShapeVector') -> 'ShapeVector':
        """
        Share ``other``'s block instead of copying it.

        Raises:
            UninitializedAccessError: if either side is unset
        """
        if other is self or other._block is self._block:
            return self
        self._require("ShapeVector.assign")
        other._require("ShapeVector.assign")
        self.decrement_reference_count()
        self._block = other._block
        self.increment_reference_count()
        return self

    @property
    def ref_count(self) -> int:
        return 0 if self._block is None else self._block.ref_count

    def increment_reference_count(self):
        if self._block is not None:
            self._block.ref_count += 1

    def decrement_reference_count(self):
        block = self._block
        if block is None or block.ref_count == 0:
            return
        block.ref_count -= 1
        if block.ref_count == 0:
            block.dims = None

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, other: 'ShapeVector', axis: Axis = Axis.COLUMN) -> bool:
        """
        Check whether two shapes agree along ``axis``.

        With ``Axis.COLUMN`` every axis but the last must match, which is
        what column-wise combination of two arrays needs.
        """
        return dispatch_axis(_COMPARE_HANDLERS, axis)(self, other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShapeVector):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    __hash__ = None

    def __repr__(self) -> str:
        if self._block is None or self._block.dims is None:
            return "ShapeVector(<unset>)"
        return f"ShapeVector({list(self.to_tuple())})"


def _compare_columns(a: ShapeVector, b: ShapeVector) -> bool:
    if a.size() != b.size() or a.size() == 0:
        return False
    return a.to_tuple()[:-1] == b.to_tuple()[:-1]


_COMPARE_HANDLERS = {
    Axis.COLUMN: _compare_columns,
}
