"""
Numcy Allocator
===============

Hands out flat typed buffers (NumPy arrays) and takes them back. Failures
are reported as OutOfMemoryError or SizeLimitExceededError so callers can
tell them apart.

Every allocation site in the runtime goes through ``scoped``, which returns
the buffer to the allocator if the block raises:

    with get_allocator().scoped(n, dtype) as buf:
        buf[:] = ...
        return Tensor.adopt(buf, shape)
"""

from __future__ import annotations
from contextlib import contextmanager
import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from .. import config
from ..errors import OutOfMemoryError, SizeLimitExceededError

if TYPE_CHECKING:
    from .storage import DType

logger = logging.getLogger(__name__)


class Allocator:
    """Buffer allocator with live-allocation bookkeeping."""

    def __init__(self, size_limit: Optional[int] = None):
        """
        Args:
            size_limit: Largest element count per buffer. None defers to
                config.get_size_limit().
        """
        self._size_limit = size_limit
        self.live_buffers = 0
        self.live_elements = 0
        self.total_allocations = 0

    @property
    def size_limit(self) -> Optional[int]:
        if self._size_limit is not None:
            return self._size_limit
        return config.get_size_limit()

    def allocate(self, count: int, dtype: Optional['DType'] = None) -> np.ndarray:
        """
        Allocate an uninitialised flat buffer of ``count`` elements.

        Raises:
            SizeLimitExceededError: count is negative or above the limit
            OutOfMemoryError: the host could not provide the memory
        """
        if dtype is None:
            dtype = config.get_default_dtype()
        count = int(count)
        if count < 0:
            raise SizeLimitExceededError(f"cannot allocate a negative number of elements ({count})")
        limit = self.size_limit
        if limit is not None and count > limit:
            raise SizeLimitExceededError(
                f"requested {count} elements exceeds the allocator limit of {limit}"
            )
        try:
            buf = np.empty(count, dtype=dtype.numpy_dtype)
        except MemoryError as e:
            raise OutOfMemoryError(f"unable to allocate {count} x {dtype!r}: {e}") from e
        except ValueError as e:
            # NumPy refuses sizes that overflow the address space
            raise SizeLimitExceededError(f"unable to allocate {count} x {dtype!r}: {e}") from e

        self.live_buffers += 1
        self.live_elements += count
        self.total_allocations += 1
        logger.debug("allocated %d x %r (live buffers: %d)", count, dtype, self.live_buffers)
        return buf

    def deallocate(self, buffer: Optional[np.ndarray]):
        if buffer is None:
            return
        self.live_buffers -= 1
        self.live_elements -= buffer.size
        logger.debug("released %d elements (live buffers: %d)", buffer.size, self.live_buffers)

    @contextmanager
    def scoped(self, count: int, dtype: Optional['DType'] = None):
        """
        Allocate a buffer that is released again if the block raises.

        On normal exit ownership passes to whoever kept the buffer.
        """
        buf = self.allocate(count, dtype)
        try:
            yield buf
        except BaseException:
            self.deallocate(buf)
            raise


_allocator = Allocator()


def get_allocator() -> Allocator:
    """The process-wide allocator used by tensors and ops."""
    return _allocator


def set_allocator(allocator: Allocator) -> Allocator:
    """
    Replace the process-wide allocator.

    Returns:
        The allocator that was active before
    """
    global _allocator
    previous = _allocator
    _allocator = allocator
    return previous
