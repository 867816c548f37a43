"""
Numcy Core: DType and Storage
=============================

Element types and the shared properties block that every Tensor handle
points at.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

import numpy as np

from .. import config
from .allocator import Allocator, get_allocator
from .shape_list import ShapeList

logger = logging.getLogger(__name__)


class DType(Enum):
    FLOAT32 = ("float32", np.float32)
    FLOAT64 = ("float64", np.float64)
    INT32 = ("int32", np.int32)
    INT64 = ("int64", np.int64)

    def __init__(self, name: str, numpy_dtype):
        self._name = name
        self.numpy_dtype = numpy_dtype

    @classmethod
    def from_numpy(cls, dtype) -> 'DType':
        """
        Closest DType for a NumPy dtype.

        Booleans and unsigned ints widen to int64; float16 widens to float32.
        """
        dtype = np.dtype(dtype)
        if dtype.kind == 'f':
            return cls.FLOAT32 if dtype.itemsize <= 4 else cls.FLOAT64
        if dtype.kind == 'i':
            return cls.INT32 if dtype.itemsize <= 4 else cls.INT64
        if dtype.kind in ('u', 'b'):
            return cls.INT64
        raise TypeError(f"unsupported element type {dtype}")

    def __repr__(self) -> str:
        return f"numcy.{self._name}"


float32 = DType.FLOAT32
float64 = DType.FLOAT64
int32 = DType.INT32
int64 = DType.INT64


class Storage:
    """
    Shared properties block: element buffer, shape and reference count.

    Every Tensor handle that aliases another points at the same Storage.
    The shape's own count moves with the block's so both reach zero together.
    """

    def __init__(
        self,
        buffer: Optional[np.ndarray],
        shape: ShapeList,
        dtype: Optional[DType] = None,
        allocator: Optional[Allocator] = None,
    ):
        self.buffer = buffer
        self.shape = shape
        if dtype is None:
            dtype = DType.from_numpy(buffer.dtype) if buffer is not None else config.get_default_dtype()
        self.dtype = dtype
        self.allocator = allocator if allocator is not None else get_allocator()
        self.ref_count = config.DEFAULT_REFERENCE_COUNT

    @property
    def is_released(self) -> bool:
        return self.ref_count == 0

    def increment(self):
        self.ref_count += 1
        self.shape.increment_reference_count()

    def decrement(self):
        """Drop one reference; at zero the buffer goes back to the allocator."""
        if self.ref_count == 0:
            return
        self.ref_count -= 1
        self.shape.decrement_reference_count()
        if self.ref_count == 0:
            logger.debug("releasing storage block of %d elements", self.shape_size)
            self.allocator.deallocate(self.buffer)
            self.buffer = None

    @property
    def shape_size(self) -> int:
        return 0 if self.buffer is None else int(self.buffer.size)

    def __repr__(self) -> str:
        return f"Storage(n={self.shape_size}, dtype={self.dtype!r}, refs={self.ref_count})"
