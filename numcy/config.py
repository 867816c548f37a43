"""
Numcy runtime defaults.

Module-level settings with setter functions. Nothing here reads the
environment; callers change defaults explicitly.

Usage:
    from numcy import config

    config.set_default_dtype(numcy.float32)
    config.set_size_limit(1 << 20)
    config.setup_logging()
"""

from __future__ import annotations
import logging
import sys
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .core.storage import DType

# Count a freshly built shape, shape vector or storage block starts with
DEFAULT_REFERENCE_COUNT = 1

# Normal sampler parameters used by ops.random.randn
DEFAULT_MEAN = 0.0
DEFAULT_STANDARD_DEVIATION = 1.0

_default_dtype: Optional['DType'] = None
_size_limit: Optional[int] = None


def get_default_dtype() -> 'DType':
    """Element type used when none is given (float64 unless changed)."""
    if _default_dtype is None:
        from .core.storage import float64
        return float64
    return _default_dtype


def set_default_dtype(dtype: 'DType'):
    global _default_dtype
    _default_dtype = dtype


def get_size_limit() -> Optional[int]:
    """Largest buffer, in elements, the default allocator hands out."""
    return _size_limit


def set_size_limit(limit: Optional[int]):
    """
    Cap the number of elements a single allocation may request.

    Args:
        limit: Maximum element count, or None for no cap
    """
    global _size_limit
    if limit is not None and limit < 0:
        raise ValueError(f"size limit must be non-negative, got {limit}")
    _size_limit = limit


def setup_logging(level: int = logging.INFO):
    """
    Configure the root logger.

    Uses the format "timestamp - logger name - level - message" and a
    StreamHandler on stdout.
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
