"""Core shape, storage and allocation infrastructure for Numcy."""

from .axis import Axis, dispatch_axis
from .allocator import Allocator, get_allocator, set_allocator
from .shape_vector import ShapeVector
from .shape_list import Link, ShapeBuilder, ShapeList, as_shape
from .storage import (
    DType,
    Storage,
    float32,
    float64,
    int32,
    int64,
)

__all__ = [
    'Axis',
    'dispatch_axis',
    'Allocator',
    'get_allocator',
    'set_allocator',
    'ShapeVector',
    'Link',
    'ShapeBuilder',
    'ShapeList',
    'as_shape',
    'DType',
    'Storage',
    'float32',
    'float64',
    'int32',
    'int64',
]
