"""Axis tags and per-axis handler dispatch."""

from __future__ import annotations
from enum import Enum
from typing import Callable, Mapping, TypeVar

from ..errors import UnsupportedAxisError

T = TypeVar('T')


class Axis(Enum):
    """Which axis an operation works along."""
    NONE = "none"
    ROWS = "rows"
    COLUMN = "column"

    def __repr__(self) -> str:
        return f"Axis.{self.name}"


def dispatch_axis(handlers: Mapping[Axis, Callable[..., T]], axis: Axis) -> Callable[..., T]:
    """
    Look up the handler registered for ``axis``.

    Raises:
        UnsupportedAxisError: if the operation has no handler for ``axis``
    """
    try:
        return handlers[axis]
    except (KeyError, TypeError):
        supported = ", ".join(a.name for a in handlers)
        raise UnsupportedAxisError(
            f"axis {axis!r} is not supported here (supported: {supported})"
        ) from None
