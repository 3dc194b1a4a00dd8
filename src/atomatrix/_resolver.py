"""
Position Resolver

Translates logical ``(row, col)`` positions of a view into physical
offsets of the backing storage by walking the view stack from the
most recent record to the oldest, and manages pushing and popping
records on that stack.

The stack is an immutable tuple, most recent record first. Pushing
or popping always builds a new tuple, so matrices that share storage
never share a mutable access path.

Complexity:
    position_to_index   O(depth)
    index_to_position   O(1), relative to the current shape only
"""

import operator
from typing import Tuple

from ._changes import Change, Reshape
from ._errors import BoundsError, InternalError
from ._typing import Position

__all__ = [
    'Position',
    'Changes',
    'position_to_index',
    'index_to_position',
    'resolve_shape',
    'push_change',
    'pop_change',
    'collapse_reshape',
    'check_position',
]

Changes = Tuple[Change, ...]


def check_position(rows: int, columns: int, position) -> Position:
    """
    Validate ``position`` against a ``rows x columns`` shape.

    Raises:
        BoundsError: If the position is malformed or out of range
    """
    try:
        row, col = position
        row, col = operator.index(row), operator.index(col)
    except (TypeError, ValueError):
        raise BoundsError(f"Position must be a (row, col) pair, got {position!r}") from None
    if not (0 <= row < rows and 0 <= col < columns):
        raise BoundsError(
            f"Position ({row}, {col}) out of bounds for shape ({rows}, {columns})"
        )
    return row, col


def position_to_index(rows: int, columns: int, changes: Changes, position) -> int:
    """
    Resolve a logical position to a 0-based storage index.

    Args:
        rows, columns: Current (view) shape
        changes: View stack, most recent first
        position: ``(row, col)`` inside the current shape

    Raises:
        BoundsError: If position is outside the current shape
        InternalError: If a record cannot resolve (broken stack)
    """
    row, col = check_position(rows, columns, position)

    for change in changes:
        rows, columns, row, col = change.resolve(rows, columns, row, col)

    if not (0 <= row < rows and 0 <= col < columns):
        raise InternalError(
            f"Resolved position ({row}, {col}) outside storage shape ({rows}, {columns})"
        )
    return row * columns + col


def index_to_position(columns: int, index: int) -> Position:
    """Row-major position of a 0-based flat index in a shape with ``columns`` columns."""
    return divmod(index, columns)


def resolve_shape(rows: int, columns: int, changes: Changes) -> Tuple[int, int]:
    """Shape of the base storage layout underneath ``changes``."""
    for change in changes:
        rows, columns = change.prior_shape(rows, columns)
    return rows, columns


def push_change(changes: Changes, change: Change) -> Changes:
    """
    Return ``changes`` with ``change`` pushed on top.

    An involution pushed onto an identical record cancels it instead.
    """
    if change.is_involution and changes and changes[0] == change:
        return changes[1:]
    return (change,) + changes


def pop_change(rows: int, columns: int, changes: Changes) -> Tuple[int, int, Changes]:
    """
    Remove the top record and restore the shape it replaced.

    Returns:
        (rows, columns, remaining_changes); unchanged on an empty stack
    """
    if not changes:
        return rows, columns, changes
    top = changes[0]
    rows, columns = top.prior_shape(rows, columns)
    return rows, columns, changes[1:]


def collapse_reshape(rows: int, columns: int, changes: Changes) -> Tuple[int, int, Changes]:
    """Pop a top-of-stack Reshape so consecutive reshapes fold into one record."""
    if changes and isinstance(changes[0], Reshape):
        return pop_change(rows, columns, changes)
    return rows, columns, changes
