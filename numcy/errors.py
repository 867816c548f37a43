"""
Numcy Errors
============

Error taxonomy for the runtime. Every error is a ``NumcyError`` and also
subclasses the closest builtin, so callers may catch either.

Failures are re-announced on the way up with the location they passed
through:

    >>> with breadcrumb("cosine"):
    ...     with breadcrumb("dot"):
    ...         raise IncompatibleShapesError("columns of a must match rows of b")
    IncompatibleShapesError: cosine -> dot -> columns of a must match rows of b
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import List


class NumcyError(Exception):
    """Base class for all runtime errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.trail: List[str] = []

    def add_breadcrumb(self, where: str) -> None:
        self.trail.insert(0, where)

    def __str__(self) -> str:
        return " -> ".join(self.trail + [self.message])


class OutOfMemoryError(NumcyError, MemoryError):
    """The allocator could not provide the requested buffer."""


class SizeLimitExceededError(NumcyError, MemoryError):
    """The requested buffer is larger than the allocator allows."""


class MalformedShapeError(NumcyError, ValueError):
    """Shape has zero elements or too few axes for the operation."""


class IncompatibleShapesError(NumcyError, ValueError):
    """Operand shapes cannot be combined."""


class IndexOutOfRangeError(NumcyError, IndexError):
    """Index falls outside the array."""


class RangeExceededError(NumcyError, IndexError):
    """Requested slice window falls outside the array."""


class RangeSizeError(NumcyError, ValueError):
    """Generated range does not fit the requested capacity."""


class UninitializedAccessError(NumcyError, RuntimeError):
    """Handle has no shared block (released or never initialised)."""


class EmptyArrayAccessError(NumcyError, RuntimeError):
    """Shared block has no data buffer."""


class DivideByZeroError(NumcyError, ZeroDivisionError):
    """Scalar divisor is zero."""


class UnsupportedAxisError(NumcyError, ValueError):
    """Axis tag is not implemented by the operation."""


@contextmanager
def breadcrumb(where: str):
    """
    Prefix ``where`` to any NumcyError raised inside the block.

    Usable as a context manager or as a decorator. The exception class is
    preserved; nothing is swallowed.
    """
    try:
        yield
    except NumcyError as e:
        e.add_breadcrumb(where)
        raise


__all__ = [
    'NumcyError',
    'OutOfMemoryError',
    'SizeLimitExceededError',
    'MalformedShapeError',
    'IncompatibleShapesError',
    'IndexOutOfRangeError',
    'RangeExceededError',
    'RangeSizeError',
    'UninitializedAccessError',
    'EmptyArrayAccessError',
    'DivideByZeroError',
    'UnsupportedAxisError',
    'breadcrumb',
]
