"""
ShapeList: shape as a chain of ``(rows, columns)`` links.

Each link stands for one axis. Only the tail's ``columns`` is meaningful (the
innermost axis size); every other link has ``columns == 0`` and its ``rows``
holds one outer axis size. A ``[2, 3, 4]`` array is therefore::

    Link(rows=2, columns=0) -> Link(rows=3, columns=4)

The links are kept in one contiguous tuple. A single reference count covers
the whole chain.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
import numbers
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .. import config
from ..errors import MalformedShapeError, UninitializedAccessError
from .shape_vector import MIN_RANK, ShapeVector


class Link(NamedTuple):
    rows: int
    columns: int


@dataclass
class _ChainBlock:
    links: Tuple[Link, ...]
    ref_count: int


class ShapeBuilder:
    """Incremental construction of a link chain, one axis at a time."""

    def __init__(self):
        self._rows: List[int] = []

    def push(self, rows: int) -> 'ShapeBuilder':
        rows = int(rows)
        if rows < 0:
            raise MalformedShapeError(f"axis size must be non-negative, got {rows}")
        self._rows.append(rows)
        return self

    def close(self, columns: int) -> 'ShapeList':
        """Set the innermost axis size and emit the finished chain."""
        columns = int(columns)
        if not self._rows:
            raise MalformedShapeError("a shape needs at least one row axis before its columns")
        if columns < 0:
            raise MalformedShapeError(f"axis size must be non-negative, got {columns}")
        links = [Link(r, 0) for r in self._rows[:-1]]
        links.append(Link(self._rows[-1], columns))
        return ShapeList._from_links(tuple(links))


class ShapeList:
    """
    Link-per-axis shape descriptor.

    Build one with ``ShapeList.from_vector``, ``ShapeList.literal`` (a single
    ``rows x columns`` link) or ``ShapeList.of(*dims)``.
    """

    def __init__(self, vector: Optional[ShapeVector] = None):
        if vector is None:
            self._block = _ChainBlock((Link(0, 0),), config.DEFAULT_REFERENCE_COUNT)
        else:
            self._block = ShapeList.from_vector(vector)._block

    @classmethod
    def _from_links(cls, links: Tuple[Link, ...]) -> 'ShapeList':
        shape = cls.__new__(cls)
        shape._block = _ChainBlock(links, config.DEFAULT_REFERENCE_COUNT)
        return shape

    @classmethod
    def from_vector(cls, vector: ShapeVector) -> 'ShapeList':
        """
        One link per axis except the last; the last axis size becomes the
        tail's ``columns``.
        """
        if vector.size() < MIN_RANK:
            raise MalformedShapeError(
                f"ShapeList.from_vector: at least {MIN_RANK} axes (rows and columns) required, "
                f"got {vector.size()}"
            )
        dims = vector.to_tuple()
        builder = ShapeBuilder()
        for rows in dims[:-1]:
            builder.push(rows)
        return builder.close(dims[-1])

    @classmethod
    def literal(cls, columns: int, rows: int) -> 'ShapeList':
        """A single link describing a ``rows x columns`` matrix."""
        return ShapeBuilder().push(rows).close(columns)

    @classmethod
    def of(cls, *dims: int) -> 'ShapeList':
        """Shape from plain axis sizes, e.g. ``ShapeList.of(2, 3, 4)``."""
        if len(dims) == 1 and not isinstance(dims[0], numbers.Integral):
            dims = tuple(dims[0])
        return cls.from_vector(ShapeVector(dims))

    # ------------------------------------------------------------------
    # Node-like view
    # ------------------------------------------------------------------

    @property
    def links(self) -> Tuple[Link, ...]:
        if self._block is None:
            return ()
        return self._block.links

    @property
    def head(self) -> Optional[Link]:
        links = self.links
        return links[0] if links else None

    @property
    def tail(self) -> Optional[Link]:
        links = self.links
        return links[-1] if links else None

    @property
    def num_links(self) -> int:
        return len(self.links)

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------

    @property
    def n(self) -> int:
        """
        Total element count: every link's rows multiplied together, times
        the tail's columns. 0 for a released chain.
        """
        links = self.links
        if not links:
            return 0
        n = 1
        for link in links:
            n *= link.rows
        return n * links[-1].columns

    @property
    def columns(self) -> int:
        tail = self.tail
        return 0 if tail is None else tail.columns

    @property
    def rows(self) -> int:
        """Number of inner arrays: product of every axis but the last."""
        return math.prod(link.rows for link in self.links) if self.links else 0

    @property
    def dims(self) -> Tuple[int, ...]:
        links = self.links
        if not links:
            return ()
        return tuple(link.rows for link in links) + (links[-1].columns,)

    def to_vector(self) -> ShapeVector:
        """Flatten the chain into a ShapeVector (link count + 1 axes)."""
        if not self.links:
            raise MalformedShapeError("ShapeList.to_vector: malformed shape, link count is 0")
        return ShapeVector(self.dims)

    def copy(self) -> 'ShapeList':
        """Independent chain with its own reference count."""
        return ShapeList.from_vector(self.to_vector())

    # ------------------------------------------------------------------
    # Reference counting
    # ------------------------------------------------------------------

    @property
    def ref_count(self) -> int:
        return 0 if self._block is None else self._block.ref_count

    def reference_counts(self) -> List[int]:
        """One count per link; the chain shares a single count."""
        return [self.ref_count] * self.num_links

    def increment_reference_count(self):
        if self._block is not None:
            self._block.ref_count += 1

    def decrement_reference_count(self):
        block = self._block
        if block is None or block.ref_count == 0:
            return
        block.ref_count -= 1
        if block.ref_count == 0:
            block.links = ()

    def assign(self, other: 'ShapeList') -> 'ShapeList':
        """Share ``other``'s chain instead of copying it."""
        if other is self or other._block is self._block:
            return self
        if not self.links or not other.links:
            raise UninitializedAccessError("ShapeList.assign: source or destination shape is released")
        self.decrement_reference_count()
        self._block = other._block
        self.increment_reference_count()
        return self

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShapeList):
            return NotImplemented
        if self.n != other.n:
            return False
        if self.num_links != other.num_links:
            return False
        for mine, theirs in zip(self.links, other.links):
            if mine.rows != theirs.rows or mine.columns != theirs.columns:
                return False
        return True

    __hash__ = None

    def __repr__(self) -> str:
        if not self.links:
            return "ShapeList(<released>)"
        return f"ShapeList({list(self.dims)})"


ShapeLike = Union[ShapeList, ShapeVector, Sequence[int], int]


def as_shape(like) -> ShapeList:
    """
    Coerce a shape-like value to a ShapeList.

    Accepts a ShapeList (returned as is), a ShapeVector, a Tensor, a
    sequence of ints or a single int (a ``[1, n]`` row).
    """
    if isinstance(like, ShapeList):
        return like
    if isinstance(like, ShapeVector):
        return ShapeList.from_vector(like)
    shape = getattr(like, "shape", None)
    if isinstance(shape, ShapeList):
        return shape
    if isinstance(like, numbers.Integral):
        return ShapeList.of(like)
    if isinstance(like, Iterable):
        return ShapeList.of(*tuple(like))
    raise MalformedShapeError(f"cannot interpret {type(like).__name__} as a shape")
