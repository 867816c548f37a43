"""
Numcy: A Reference-Counted Tensor Runtime
=========================================

NumPy-like multi-dimensional arrays with value semantics, explicit shared
ownership and scalar/row/column broadcasting.

Example:
    >>> import numcy as nc
    >>> a = nc.arange(12, like=[3, 4])
    >>> b = a.alias()          # shares the block
    >>> c = a + nc.ones([1, 4])  # row broadcast
    >>> nc.transpose(c).shape
    ShapeList([4, 3])
"""

__version__ = "0.1.0"

from . import config
from .errors import (
    NumcyError,
    OutOfMemoryError,
    SizeLimitExceededError,
    MalformedShapeError,
    IncompatibleShapesError,
    IndexOutOfRangeError,
    RangeExceededError,
    RangeSizeError,
    UninitializedAccessError,
    EmptyArrayAccessError,
    DivideByZeroError,
    UnsupportedAxisError,
)

# Shapes, storage and allocation
from .core import (
    Axis,
    Allocator,
    get_allocator,
    set_allocator,
    ShapeVector,
    ShapeList,
    ShapeBuilder,
    Link,
    DType,
    Storage,
    float32,
    float64,
    int32,
    int64,
)

from .tensor import Tensor
from .broadcast import BroadcastKind, resolve_broadcast

# Operations
from . import ops
from .ops import (
    dot, matmul, outer, enorm, norm, transpose, triu,
    cosine, enorm_distance,
    randn, randint, shuffle,
    arange, ones, zeros, tensor, from_numpy,
    sign, sin, cos, exp, sigmoid, subtract, divide,
    sum, mean, max,
    reshape, concatenate,
)
