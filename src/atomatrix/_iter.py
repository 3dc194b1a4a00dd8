"""
Sequence Protocol for Matrices

Exposes a matrix as a finite, restartable sequence of values in
row-major logical order. Each traversal keeps its own counter and
resolves ``index -> position -> storage`` per element, so it sees
the shape fixed at creation but may observe concurrent value writes.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional, Tuple

from ._errors import BoundsError

if TYPE_CHECKING:
    from ._matrix import Matrix

__all__ = ['MatrixIterator', 'Reduce', 'slice_values', 'reduce_while', 'iter_positions']


class MatrixIterator:
    """
    Iterator over the values of a matrix in row-major order.

    Suspending is simply not calling ``next``; resuming continues from
    the stored counter.
    """

    __slots__ = ('_matrix', '_index', '_stop')

    def __init__(self, matrix: 'Matrix', start: int = 0, stop: Optional[int] = None):
        self._matrix = matrix
        self._index = start
        self._stop = matrix.count() if stop is None else stop

    def __iter__(self) -> 'MatrixIterator':
        return self

    def __next__(self) -> int:
        if self._index >= self._stop:
            raise StopIteration
        matrix = self._matrix
        value = matrix.get(matrix.index_to_position(self._index))
        self._index += 1
        return value

    def __length_hint__(self) -> int:
        return max(0, self._stop - self._index)


class Reduce(Enum):
    """Control signal returned by a ``reduce_while`` step."""
    CONT = 'cont'
    HALT = 'halt'


def slice_values(matrix: 'Matrix', start: int, length: int) -> List[int]:
    """
    Values of the contiguous row-major range ``[start, start + length)``.

    Raises:
        BoundsError: If the range does not fit in the matrix
    """
    count = matrix.count()
    if start < 0 or length < 0 or start + length > count:
        raise BoundsError(f"Slice [{start}, {start + length}) outside [0, {count})")
    return list(MatrixIterator(matrix, start, start + length))


def reduce_while(
    matrix: 'Matrix',
    fun: Callable[[int, Any], Tuple[Reduce, Any]],
    acc: Any,
) -> Any:
    """
    Fold over the values until ``fun`` returns ``(Reduce.HALT, acc)``.

    Example:
        >>> # first value greater than 10, or None
        >>> reduce_while(m, lambda v, acc: (Reduce.HALT, v) if v > 10 else (Reduce.CONT, acc), None)
    """
    for value in MatrixIterator(matrix):
        signal, acc = fun(value, acc)
        if signal is Reduce.HALT:
            break
    return acc


def iter_positions(rows: int, columns: int) -> Iterator[Tuple[int, int]]:
    """All positions of a ``rows x columns`` shape in row-major order."""
    for row in range(rows):
        for col in range(columns):
            yield row, col
