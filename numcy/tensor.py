"""
Numcy Tensor
============

Reference-counted array container. A Tensor is a handle onto a shared
Storage block (flat buffer, shape, count). ``alias()`` and ``assign()``
share the block; ``copy()`` deep-copies it.

    a = Tensor([[1., 2.], [3., 4.]])
    b = a.alias()          # same block, count 2
    c = a.copy()           # independent block
    b.release()            # count back to 1, ``a`` still valid
"""

from __future__ import annotations
import numbers
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from . import config
from .broadcast import resolve_broadcast
from .core.allocator import get_allocator
from .core.axis import Axis, dispatch_axis
from .core.shape_list import ShapeList, ShapeLike, as_shape
from .core.storage import DType, Storage
from .errors import (
    DivideByZeroError,
    EmptyArrayAccessError,
    IncompatibleShapesError,
    IndexOutOfRangeError,
    MalformedShapeError,
    RangeExceededError,
    UninitializedAccessError,
    breadcrumb,
)

Operand = Union['Tensor', numbers.Number]


def _infer_shape(array: np.ndarray) -> ShapeList:
    if array.ndim == 0:
        return ShapeList.literal(1, 1)
    if array.ndim == 1:
        return ShapeList.literal(array.shape[0], 1)
    return ShapeList.of(*array.shape)


class Tensor:
    """
    Shape-carrying array with shared ownership.

    Elements live in a flat buffer; the shape is a ShapeList. A shape with
    zero elements never carries a buffer, and a buffer always holds exactly
    ``shape.n`` elements.
    """

    def __init__(
        self,
        data: Any = None,
        shape: Optional[ShapeLike] = None,
        dtype: Optional[DType] = None,
    ):
        """
        Create a Tensor.

        Args:
            data: Nested sequence, NumPy array or number. None creates an
                empty tensor, or a shape-only placeholder when ``shape`` is set.
            shape: Shape of the result. Inferred from ``data`` when omitted.
            dtype: Element type. Inferred from ``data`` when omitted.

        Raises:
            MalformedShapeError: data given with a zero-element shape, or
                data and shape disagree on the element count
        """
        if data is None:
            layout = ShapeList() if shape is None else as_shape(shape).copy()
            if dtype is None:
                dtype = config.get_default_dtype()
            self._storage: Optional[Storage] = Storage(None, layout, dtype)
            return

        array = data.numpy() if isinstance(data, Tensor) else np.asarray(data)
        layout = _infer_shape(array) if shape is None else as_shape(shape).copy()
        if layout.n == 0:
            raise MalformedShapeError("Tensor(): data given with a zero-element shape")
        if array.size != layout.n:
            raise MalformedShapeError(
                f"Tensor(): data has {array.size} elements, shape {list(layout.dims)} needs {layout.n}"
            )
        if dtype is None:
            dtype = DType.from_numpy(array.dtype)

        with get_allocator().scoped(layout.n, dtype) as buf:
            buf[:] = array.reshape(-1)
        self._storage = Storage(buf, layout, dtype)

    @classmethod
    def adopt(cls, buffer: np.ndarray, shape: ShapeList, dtype: Optional[DType] = None) -> 'Tensor':
        """
        Wrap an allocator-issued buffer without copying it.

        Ownership of both ``buffer`` and ``shape`` passes to the new Tensor.
        """
        if buffer.size != shape.n:
            raise MalformedShapeError(
                f"Tensor.adopt: buffer has {buffer.size} elements, shape {list(shape.dims)} needs {shape.n}"
            )
        if shape.n == 0:
            get_allocator().deallocate(buffer)
            buffer = None
        tensor = cls.__new__(cls)
        tensor._storage = Storage(buffer, shape, dtype)
        return tensor

    # ------------------------------------------------------------------
    # Block access
    # ------------------------------------------------------------------

    def _block(self) -> Storage:
        if self._storage is None or self._storage.is_released:
            raise UninitializedAccessError("tensor has no shared block")
        return self._storage

    def _data(self) -> np.ndarray:
        block = self._block()
        if block.buffer is None:
            raise EmptyArrayAccessError("tensor has no data buffer")
        return block.buffer

    @property
    def shape(self) -> ShapeList:
        return self._block().shape

    @property
    def dtype(self) -> DType:
        return self._block().dtype

    @property
    def n(self) -> int:
        return self.shape.n

    @property
    def numel(self) -> int:
        return self.n

    @property
    def rows(self) -> int:
        return self.shape.rows

    @property
    def columns(self) -> int:
        return self.shape.columns

    @property
    def buffer(self) -> Optional[np.ndarray]:
        """The flat element buffer itself (None for empty and placeholder tensors)."""
        return self._block().buffer

    @property
    def is_empty(self) -> bool:
        return self._storage is None or self._storage.buffer is None

    def as_matrix(self) -> np.ndarray:
        """View of the buffer as ``[rows, columns]``; writes go through."""
        return self._data().reshape(self.rows, self.columns)

    def numpy(self) -> np.ndarray:
        """Copy of the elements laid out in the tensor's full shape."""
        return self._data().reshape(self.shape.dims).copy()

    def tolist(self) -> List:
        return self.numpy().tolist()

    # ------------------------------------------------------------------
    # Indexed access
    # ------------------------------------------------------------------

    def _check_index(self, index) -> Tuple[np.ndarray, int]:
        data = self._data()
        if not isinstance(index, (int, np.integer)) or isinstance(index, bool):
            raise IndexOutOfRangeError(f"flat index must be an integer, got {type(index).__name__}")
        if index < 0 or index >= self.n:
            raise IndexOutOfRangeError(f"index {index} out of range for {self.n} elements")
        return data, int(index)

    def __getitem__(self, index: int):
        data, index = self._check_index(index)
        return data[index].item()

    def __setitem__(self, index: int, value):
        data, index = self._check_index(index)
        data[index] = value

    def swap(self, i: int, j: int):
        """Exchange two elements in place."""
        data, i = self._check_index(i)
        _, j = self._check_index(j)
        data[i], data[j] = data[j], data[i]

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    @property
    def reference_count(self) -> int:
        if self._storage is None:
            return 0
        return self._storage.ref_count

    def increment_reference_count(self):
        self._block().increment()

    def decrement_reference_count(self):
        self._block().decrement()

    def alias(self) -> 'Tensor':
        """New handle on the same block."""
        block = self._block()
        block.increment()
        other = Tensor.__new__(Tensor)
        other._storage = block
        return other

    def assign(self, other: 'Tensor') -> 'Tensor':
        """
        Make this handle share ``other``'s block.

        Drops this handle's previous reference first; assigning a tensor to
        itself, or to another handle on the same block, changes nothing.
        """
        if other is self or other._storage is self._storage:
            return self
        block = other._block()
        if self._storage is not None:
            self._storage.decrement()
        self._storage = block
        block.increment()
        return self

    def release(self):
        """Drop this handle's reference and detach it from the block."""
        if self._storage is not None:
            self._storage.decrement()
            self._storage = None

    def __enter__(self) -> 'Tensor':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    @breadcrumb("copy")
    def copy(self) -> 'Tensor':
        """Deep copy: new buffer, new shape, count 1."""
        block = self._block()
        if block.buffer is None:
            return Tensor(None, block.shape if block.shape.n else None, block.dtype)
        with get_allocator().scoped(block.buffer.size, block.dtype) as buf:
            np.copyto(buf, block.buffer)
            return Tensor.adopt(buf, block.shape.copy(), block.dtype)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _operand(self, other: Operand) -> Tuple[np.ndarray, ShapeList]:
        if isinstance(other, Tensor):
            return other._data(), other.shape
        if isinstance(other, numbers.Number):
            return np.asarray([other]), ShapeList.literal(1, 1)
        raise TypeError(f"unsupported operand type {type(other).__name__}")

    def _binary(self, other: Operand, ufunc: np.ufunc, reflected: bool = False) -> 'Tensor':
        left = self._data()
        right, right_shape = self._operand(other)
        plan = resolve_broadcast(self.shape, right_shape)
        with get_allocator().scoped(plan.target.n, self.dtype) as out:
            plan.apply(ufunc, left, right, out, reflected=reflected)
            return Tensor.adopt(out, plan.target, self.dtype)

    @breadcrumb("add")
    def __add__(self, other: Operand) -> 'Tensor':
        return self._binary(other, np.add)

    @breadcrumb("subtract")
    def __sub__(self, other: Operand) -> 'Tensor':
        return self._binary(other, np.subtract)

    @breadcrumb("multiply")
    def __mul__(self, other: Operand) -> 'Tensor':
        return self._binary(other, np.multiply)

    @breadcrumb("divide")
    def __truediv__(self, other: Operand) -> 'Tensor':
        right, right_shape = self._operand(other)
        if right_shape.n == 1 and right[0] == 0:
            raise DivideByZeroError("divisor is a single-element zero")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._binary(other, np.true_divide)

    def __radd__(self, other: numbers.Number) -> 'Tensor':
        return self + other

    def __rmul__(self, other: numbers.Number) -> 'Tensor':
        return self * other

    @breadcrumb("subtract")
    def __rsub__(self, other: numbers.Number) -> 'Tensor':
        return self._binary(other, np.subtract, reflected=True)

    @breadcrumb("divide")
    def __rtruediv__(self, other: numbers.Number) -> 'Tensor':
        data = self._data()
        if data.size == 1 and data[0] == 0:
            raise DivideByZeroError("divisor is a single-element zero")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._binary(other, np.true_divide, reflected=True)

    def __neg__(self) -> 'Tensor':
        return self * -1

    @breadcrumb("subtract")
    def __isub__(self, other: 'Tensor') -> 'Tensor':
        """In-place subtraction; aliases of this tensor see the change."""
        data = self._data()
        if not isinstance(other, Tensor):
            raise TypeError(f"unsupported operand type {type(other).__name__}")
        if self.shape != other.shape:
            raise IncompatibleShapesError(
                f"in-place subtraction needs equal shapes, got {list(self.shape.dims)} "
                f"and {list(other.shape.dims)}"
            )
        np.subtract(data, other._data(), out=data, casting='unsafe')
        return self

    def __matmul__(self, other: 'Tensor') -> 'Tensor':
        from .ops.linalg import dot
        return dot(self, other)

    # ------------------------------------------------------------------
    # Slicing
    # ------------------------------------------------------------------

    @breadcrumb("slice")
    def slice(self, start: int, extent: Union[int, ShapeLike], axis: Axis = Axis.NONE) -> 'Tensor':
        """
        Copy a window of elements into a new tensor.

        Args:
            start: Flat index of the first element
            extent: Element count (result ``[1, extent]``) or a shape-like
                value describing the window
            axis: ``Axis.NONE`` for a contiguous run, ``Axis.COLUMN`` for
                ``like.rows`` rows of ``like.columns`` elements, each row
                starting ``self.columns`` elements after the previous one

        Raises:
            MalformedShapeError: window has zero elements
            RangeExceededError: window falls outside the tensor, or a window
                row runs past the end of a source row
        """
        data = self._data()
        if isinstance(extent, (int, np.integer)):
            if extent <= 0:
                raise MalformedShapeError(f"slice length must be positive, got {extent}")
            like = ShapeList.literal(int(extent), 1)
        else:
            like = as_shape(extent)
            if like.n == 0:
                raise MalformedShapeError("slice window has zero elements")
        start = int(start)
        if start < 0:
            raise RangeExceededError(f"slice start {start} is negative")
        return dispatch_axis(_SLICE_HANDLERS, axis)(self, data, start, like)

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def equals(self, other: 'Tensor') -> bool:
        """Same shape and same element values."""
        if self.shape != other.shape:
            return False
        if self.is_empty or other.is_empty:
            return self.is_empty and other.is_empty
        return bool(np.array_equal(self._data(), other._data()))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        if self._storage is None or self._storage.is_released:
            return "Tensor(<released>)"
        if self._storage.buffer is None:
            return f"Tensor(<empty>, shape={list(self.shape.dims)})"
        data_str = np.array2string(self.numpy(), precision=4, suppress_small=True)
        return f"Tensor({data_str}, dtype={self.dtype!r})"


def _slice_contiguous(tensor: Tensor, data: np.ndarray, start: int, like: ShapeList) -> Tensor:
    stop = start + like.n
    if stop > data.size:
        raise RangeExceededError(
            f"slice [{start}, {stop}) exceeds {data.size} elements"
        )
    with get_allocator().scoped(like.n, tensor.dtype) as buf:
        buf[:] = data[start:stop]
        return Tensor.adopt(buf, like.copy(), tensor.dtype)


def _slice_columns(tensor: Tensor, data: np.ndarray, start: int, like: ShapeList) -> Tensor:
    stride = tensor.columns
    if like.columns > stride:
        raise RangeExceededError(
            f"slice width {like.columns} exceeds the row width {stride}"
        )
    if start % stride + like.columns > stride:
        raise RangeExceededError(
            f"slice window at column {start % stride} runs past the end of a {stride}-wide row"
        )
    last = start + (like.rows - 1) * stride + like.columns
    if last > data.size:
        raise RangeExceededError(
            f"slice of {like.rows} rows from {start} ends at {last}, past {data.size} elements"
        )
    rows = np.arange(like.rows) * stride + start
    index = rows[:, None] + np.arange(like.columns)
    with get_allocator().scoped(like.n, tensor.dtype) as buf:
        buf[:] = data[index.reshape(-1)]
        return Tensor.adopt(buf, ShapeList.literal(like.columns, like.rows), tensor.dtype)


_SLICE_HANDLERS = {
    Axis.NONE: _slice_contiguous,
    Axis.COLUMN: _slice_columns,
}
