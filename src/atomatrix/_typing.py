"""
atomatrix Type Definitions.

Type aliases for positions and callbacks, the callback signature
selector, and the range normalization used by submatrix views.

Callbacks passed to ``apply`` (and the ``seed`` of a new matrix) come
in two shapes. The caller states which one with CallbackKind rather
than having the library inspect the function:

    CallbackKind.VALUE           fn(value) -> int
    CallbackKind.VALUE_POSITION  fn(value, (row, col)) -> int
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Tuple, Union

from ._errors import BoundsError

__all__ = [
    'Position',
    'CallbackKind',
    'ValueCallback',
    'PositionCallback',
    'Callback',
    'RangeLike',
    'normalize_range',
]


Position = Tuple[int, int]

ValueCallback = Callable[[int], int]
PositionCallback = Callable[[int, Position], int]
Callback = Union[ValueCallback, PositionCallback]

RangeLike = Union[range, slice]


class CallbackKind(IntEnum):
    """Signature of a per-cell callback."""
    VALUE = 1             # fn(value)
    VALUE_POSITION = 2    # fn(value, (row, col))

    def invoke(self, fn: Callback, value: int, position: Position) -> int:
        if self is CallbackKind.VALUE:
            return fn(value)
        return fn(value, position)


def normalize_range(bounds: RangeLike, length: int, axis: str = "row") -> range:
    """
    Convert a ``range`` or ``slice`` into a non-empty step-1 range
    lying inside ``[0, length)``.

    Slices follow Python semantics (open ends, negative indices);
    ranges must already be explicit.

    Raises:
        BoundsError: If the result is empty, stepped, or out of bounds
    """
    if isinstance(bounds, slice):
        start, stop, step = bounds.indices(length)
        bounds = range(start, stop, step)
    elif not isinstance(bounds, range):
        raise BoundsError(f"{axis} bounds must be a range or slice, got {type(bounds).__name__}")

    if bounds.step != 1:
        raise BoundsError(f"{axis} range must have step 1, got {bounds.step}")
    if len(bounds) == 0:
        raise BoundsError(f"{axis} range {bounds} is empty")
    if bounds.start < 0 or bounds.stop > length:
        raise BoundsError(f"{axis} range {bounds} outside [0, {length})")
    return bounds
