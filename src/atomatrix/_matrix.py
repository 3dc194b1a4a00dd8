"""
Atomic Integer Matrix

Matrix is an immutable value holding a shape, a view stack (access
path) and a handle to an AtomicArray. Cell values are mutable and
may be shared with other matrices; the metadata never is.

Architecture:

    Matrix (shape, changes) ──> Resolver ──> AtomicArray (flat cells)
        │
        ├── addressing:  get / put / add / sub / exchange / compare_exchange
        ├── views:       transpose / submatrix / reshape / diagonal / row /
        │                column / flip_lr / flip_ud / drop_row / drop_column
        ├── aggregates:  sum / min / max / argmin / argmax / find / trace
        └── materialize: copy

View builders never move data. They return a new Matrix that shares
storage with the original and carries one more record on its access
path. ``copy`` is the only way to get independent storage.

Example:
    >>> from atomatrix import Matrix, CallbackKind
    >>> m = Matrix(7, 4, seed=lambda _, pos: pos[0] + pos[1],
    ...            seed_kind=CallbackKind.VALUE_POSITION)
    >>> m.submatrix(range(5, 7), range(1, 4)).to_list_of_lists()
    [[6, 7, 8], [7, 8, 9]]
    >>> t = m.transpose()
    >>> t.put((0, 6), 100)      # writes through to m
    >>> m.get((6, 0))
    100
"""

import logging
import operator
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._array import AtomicArray
from ._changes import (
    Change,
    Column,
    Diagonal,
    DropColumn,
    DropRow,
    FlipLR,
    FlipUD,
    Reshape,
    Row,
    Submatrix,
    Transpose,
)
from ._config import config
from ._dtypes import DType, check_in_domain
from ._errors import BoundsError, DomainError, ShapeMismatchError
from ._iter import MatrixIterator, iter_positions
from ._ownership import Ownership, tracker
from ._resolver import (
    Changes,
    collapse_reshape,
    pop_change,
    position_to_index,
    push_change,
    resolve_shape,
)
from ._typing import Callback, CallbackKind, Position, RangeLike, normalize_range

__all__ = ['Matrix', 'new', 'identity', 'from_list_of_lists', 'from_numpy']

logger = logging.getLogger("atomatrix.matrix")


def _check_dimension(value, name: str) -> int:
    try:
        value = operator.index(value)
    except TypeError:
        raise ShapeMismatchError(f"{name} must be an integer, got {type(value).__name__}") from None
    if value < 1:
        raise ShapeMismatchError(f"{name} must be positive, got {value}")
    return value


def _check_index(value, length: int, what: str) -> int:
    try:
        value = operator.index(value)
    except TypeError:
        raise BoundsError(f"{what} must be an integer, got {type(value).__name__}") from None
    if not 0 <= value < length:
        raise BoundsError(f"{what} {value} out of bounds [0, {length})")
    return value


class Matrix:
    """
    Fixed-shape 64-bit integer matrix over atomic storage.

    Attributes:
        rows, columns: Current (view) shape
        signed: Domain of the storage (fixed at creation)
        domain_min, domain_max: Domain bounds
        changes: Access path, most recent record first
    """

    __slots__ = ('_storage', '_rows', '_columns', '_changes', '__weakref__')

    def __init__(
        self,
        rows: int,
        columns: int,
        signed: Optional[bool] = None,
        seed: Optional[Callback] = None,
        seed_kind: CallbackKind = CallbackKind.VALUE,
    ):
        """
        Allocate a zero-filled ``rows x columns`` matrix.

        Args:
            rows: Number of rows (positive)
            columns: Number of columns (positive)
            signed: Signed (default from config) or unsigned 64-bit values
            seed: Optional callback applied to every cell, see ``apply``
            seed_kind: Signature of ``seed``

        Raises:
            ShapeMismatchError: If a dimension is not a positive integer
        """
        rows = _check_dimension(rows, "rows")
        columns = _check_dimension(columns, "columns")
        if signed is None:
            signed = config.matrix.signed

        self._init(AtomicArray(rows * columns, signed), rows, columns, ())

        if seed is not None:
            self.apply(seed, seed_kind)

    def _init(self, storage: AtomicArray, rows: int, columns: int, changes: Changes) -> None:
        self._storage = storage
        self._rows = rows
        self._columns = columns
        self._changes = changes
        tracker.register(storage, self)

    def _derive(self, rows: int, columns: int, changes: Changes) -> 'Matrix':
        """New matrix on the same storage with a different access path."""
        obj = Matrix.__new__(Matrix)
        obj._init(self._storage, rows, columns, changes)
        return obj

    @classmethod
    def _from_storage(cls, storage: AtomicArray, rows: int, columns: int) -> 'Matrix':
        obj = cls.__new__(cls)
        obj._init(storage, rows, columns, ())
        return obj

    # =========================================================================
    # Alternate Constructors
    # =========================================================================

    @classmethod
    def from_list_of_lists(
        cls,
        data: Sequence[Sequence[int]],
        signed: Optional[bool] = None,
    ) -> 'Matrix':
        """
        Build a matrix from nested rows.

        Raises:
            ShapeMismatchError: If ``data`` is empty or ragged
            DomainError: If a value does not fit the domain
        """
        rows = len(data)
        if rows == 0:
            raise ShapeMismatchError("Cannot build a matrix from an empty list")
        columns = len(data[0])
        for i, row in enumerate(data):
            if len(row) != columns:
                raise ShapeMismatchError(
                    f"Row {i} has {len(row)} values, expected {columns}"
                )

        matrix = cls(rows, columns, signed)
        storage = matrix._storage
        index = 0
        for row in data:
            for value in row:
                storage.put(index, value)
                index += 1
        return matrix

    @classmethod
    def from_numpy(cls, array, signed: Optional[bool] = None) -> 'Matrix':
        """
        Build a matrix from a 2-D integer numpy array (values are copied).

        ``signed`` defaults to False for unsigned numpy dtypes.
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise ShapeMismatchError(f"Expected a 2-D array, got {array.ndim}-D")
        if not np.issubdtype(array.dtype, np.integer):
            raise DomainError(f"Expected an integer array, got dtype {array.dtype}")
        if signed is None and np.issubdtype(array.dtype, np.unsignedinteger):
            signed = False
        return cls.from_list_of_lists(array.tolist(), signed)

    @classmethod
    def identity(cls, size: int, signed: Optional[bool] = None) -> 'Matrix':
        """Square matrix with ones on the diagonal."""
        return cls(
            size, size, signed,
            seed=lambda _, pos: 1 if pos[0] == pos[1] else 0,
            seed_kind=CallbackKind.VALUE_POSITION,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def storage(self) -> AtomicArray:
        """Backing storage (possibly shared)."""
        return self._storage

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._columns

    @property
    def dtype(self) -> DType:
        return self._storage.dtype

    @property
    def signed(self) -> bool:
        return self._storage.signed

    @property
    def domain_min(self) -> int:
        """Smallest value the storage can hold."""
        return self._storage.min

    @property
    def domain_max(self) -> int:
        """Largest value the storage can hold."""
        return self._storage.max

    @property
    def changes(self) -> Tuple[Change, ...]:
        return self._changes

    @property
    def ownership(self) -> Ownership:
        return Ownership.VIEW if self._changes else Ownership.OWNED

    @property
    def share_count(self) -> int:
        """Number of live matrices using this storage (including self)."""
        return tracker.share_count(self._storage)

    def shares_storage(self, other: 'Matrix') -> bool:
        return self._storage is other._storage

    def count(self) -> int:
        """Number of cells in the current view."""
        return self._rows * self._columns

    # =========================================================================
    # Position Resolution
    # =========================================================================

    def position_to_index(self, position: Position) -> int:
        """
        0-based storage index of ``position`` through the access path.

        Raises:
            BoundsError: If position is outside the current shape
        """
        return position_to_index(self._rows, self._columns, self._changes, position)

    def index_to_position(self, index: int) -> Position:
        """Row-major position of the 0-based logical ``index`` in the current shape."""
        index = _check_index(index, self.count(), "Index")
        return divmod(index, self._columns)

    # =========================================================================
    # Addressing
    # =========================================================================

    def get(self, position: Position) -> int:
        return self._storage.get(self.position_to_index(position))

    def put(self, position: Position, value: int) -> None:
        self._storage.put(self.position_to_index(position), value)

    def add(self, position_or_matrices, incr: Optional[int] = None) -> None:
        """
        Atomically add ``incr`` at ``position``.

        Called with a list of matrices instead (``m.add([a, b])``), adds
        each operand cell by cell in list order. Every operand must have
        this matrix's shape. Each cell update is atomic; the whole
        operation is not.

        Raises:
            BoundsError, DomainError, ShapeMismatchError
        """
        if incr is None:
            self._combine(position_or_matrices, self._storage.add, "add")
            return
        self._storage.add(self.position_to_index(position_or_matrices), incr)

    def add_get(self, position: Position, incr: int) -> int:
        """Atomically add ``incr`` at ``position`` and return the result."""
        return self._storage.add_get(self.position_to_index(position), incr)

    def sub(self, position_or_matrices, decr: Optional[int] = None) -> None:
        """Atomically subtract ``decr`` at ``position``, or subtract a list of matrices."""
        if decr is None:
            self._combine(position_or_matrices, self._storage.sub, "sub")
            return
        self._storage.sub(self.position_to_index(position_or_matrices), decr)

    def sub_get(self, position: Position, decr: int) -> int:
        return self._storage.sub_get(self.position_to_index(position), decr)

    def exchange(self, position: Position, value: int) -> int:
        """Atomically replace the value at ``position``; returns the previous value."""
        return self._storage.exchange(self.position_to_index(position), value)

    def compare_exchange(self, position: Position, expected: int, desired: int) -> Optional[int]:
        """
        Atomically write ``desired`` if the value at ``position`` equals ``expected``.

        Returns:
            None when ``desired`` was written, otherwise the actual value.
        """
        return self._storage.compare_exchange(self.position_to_index(position), expected, desired)

    def _combine(self, matrices, op, name: str) -> None:
        if isinstance(matrices, Matrix) or not isinstance(matrices, (list, tuple)):
            raise TypeError(f"{name}() expects a position and a value, or a list of matrices")
        for other in matrices:
            if not isinstance(other, Matrix):
                raise TypeError(f"{name}() operands must be Matrix, got {type(other).__name__}")
            if other.shape != self.shape:
                raise ShapeMismatchError(
                    f"Operand shape {other.shape} does not match {self.shape}"
                )

        logger.debug("Bulk %s of %d matrices into %s", name, len(matrices), self.shape)
        for other in matrices:
            for position in iter_positions(self._rows, self._columns):
                op(self.position_to_index(position), other.get(position))

    # =========================================================================
    # Python Protocols
    # =========================================================================

    def __getitem__(self, key):
        """
        ``m[row, col]`` returns a value; ``m[rows, cols]`` with slices
        or ranges returns a submatrix view.
        """
        if not isinstance(key, tuple) or len(key) != 2:
            raise BoundsError(f"Matrix index must be a (row, col) pair, got {key!r}")
        row_key, col_key = key
        if isinstance(row_key, (slice, range)) or isinstance(col_key, (slice, range)):
            return self.submatrix(
                self._as_range(row_key, self._rows),
                self._as_range(col_key, self._columns),
            )
        return self.get(key)

    def __setitem__(self, key, value) -> None:
        self.put(key, value)

    @staticmethod
    def _as_range(key, length: int) -> RangeLike:
        if isinstance(key, (slice, range)):
            return key
        try:
            index = operator.index(key)
        except TypeError:
            raise BoundsError(f"Invalid index {key!r}") from None
        # Negative integers count from the end, as slices do
        if index < 0:
            index += length
        return range(index, index + 1)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[int]:
        return MatrixIterator(self)

    def __contains__(self, value) -> bool:
        return self.member(value)

    def __repr__(self) -> str:
        head = f"shape={self.shape}, dtype={self.dtype}, changes={len(self._changes)}"
        if self.count() <= 36:
            return f"Matrix({self.to_list_of_lists()}, {head})"
        return f"Matrix({head})"

    def __str__(self) -> str:
        return self.__repr__()

    # =========================================================================
    # Aggregates & Search
    # =========================================================================

    def sum(self) -> int:
        return sum(MatrixIterator(self))

    def _extreme(self, better, limit: int) -> Tuple[int, Position]:
        # First row-major occurrence wins ties; stop early at the domain limit.
        best_value = self.get((0, 0))
        best_position = (0, 0)
        if best_value == limit:
            return best_value, best_position
        for index in range(1, self.count()):
            position = divmod(index, self._columns)
            value = self.get(position)
            if better(value, best_value):
                best_value, best_position = value, position
                if value == limit:
                    break
        return best_value, best_position

    def min(self) -> int:
        return self._extreme(operator.lt, self._storage.min)[0]

    def max(self) -> int:
        return self._extreme(operator.gt, self._storage.max)[0]

    def argmin(self) -> Position:
        """Position of the smallest value (first in row-major order)."""
        return self._extreme(operator.lt, self._storage.min)[1]

    def argmax(self) -> Position:
        """Position of the largest value (first in row-major order)."""
        return self._extreme(operator.gt, self._storage.max)[1]

    def find(self, value: int) -> Optional[Position]:
        """
        Position of the first row-major occurrence of ``value``, or None.

        Raises:
            DomainError: If ``value`` is not an integer
        """
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            value = operator.index(value)
            lo, hi = self.dtype.bounds
            if value < lo or value > hi:
                return None
        value = check_in_domain(value, self.dtype)
        for index in range(self.count()):
            position = divmod(index, self._columns)
            if self.get(position) == value:
                return position
        return None

    def member(self, value) -> bool:
        """Whether ``value`` occurs in the matrix."""
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            return False
        return self.find(value) is not None

    def trace(self) -> int:
        """Sum of the main diagonal."""
        return self.diagonal().sum()

    def apply(self, fn: Callback, kind: CallbackKind = CallbackKind.VALUE) -> None:
        """
        Replace every cell with the callback's result.

        Args:
            fn: ``fn(value)`` or ``fn(value, (row, col))``
            kind: Which of the two signatures ``fn`` has

        Example:
            >>> m.apply(lambda v: v * 2)
            >>> m.apply(lambda v, pos: pos[0] * pos[1], CallbackKind.VALUE_POSITION)
        """
        kind = CallbackKind(kind)
        for index in range(self.count()):
            position = divmod(index, self._columns)
            self.put(position, kind.invoke(fn, self.get(position), position))

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_list(self) -> List[int]:
        """Flat row-major list of the current view."""
        return list(MatrixIterator(self))

    def to_list_of_lists(self) -> List[List[int]]:
        return [
            [self.get((row, col)) for col in range(self._columns)]
            for row in range(self._rows)
        ]

    def row_to_list(self, row: int) -> List[int]:
        row = _check_index(row, self._rows, "Row index")
        return [self.get((row, col)) for col in range(self._columns)]

    def column_to_list(self, col: int) -> List[int]:
        col = _check_index(col, self._columns, "Column index")
        return [self.get((row, col)) for row in range(self._rows)]

    def to_numpy(self) -> np.ndarray:
        """2-D numpy snapshot of the current view."""
        return np.array(self.to_list_of_lists(), dtype=self.dtype.numpy_dtype)

    # =========================================================================
    # Materialization
    # =========================================================================

    def copy(self) -> 'Matrix':
        """
        Materialize the current view into fresh, independent storage.

        The result has an empty access path and the same logical contents.
        """
        if not self._changes:
            storage = self._storage.copy()
        else:
            storage = AtomicArray(self.count(), self.dtype)
            for index, position in enumerate(iter_positions(self._rows, self._columns)):
                storage.put(index, self.get(position))
        logger.debug(
            "Materialized %dx%d view through %d changes",
            self._rows, self._columns, len(self._changes),
        )
        return Matrix._from_storage(storage, self._rows, self._columns)

    # =========================================================================
    # View Builders
    # =========================================================================

    def transpose(self) -> 'Matrix':
        return self._derive(
            self._columns, self._rows, push_change(self._changes, Transpose())
        )

    def flip_lr(self) -> 'Matrix':
        """Reverse the column order."""
        return self._derive(self._rows, self._columns, push_change(self._changes, FlipLR()))

    def flip_ud(self) -> 'Matrix':
        """Reverse the row order."""
        return self._derive(self._rows, self._columns, push_change(self._changes, FlipUD()))

    def submatrix(self, row_range: RangeLike, col_range: RangeLike) -> 'Matrix':
        """
        View of a rectangular block.

        Args:
            row_range: ``range`` or ``slice`` of rows (half-open, step 1)
            col_range: ``range`` or ``slice`` of columns

        Raises:
            BoundsError: If a range is empty, stepped or outside the shape
        """
        row_range = normalize_range(row_range, self._rows, "row")
        col_range = normalize_range(col_range, self._columns, "column")
        change = Submatrix(self._rows, self._columns, row_range, col_range)
        return self._derive(len(row_range), len(col_range), push_change(self._changes, change))

    def reshape(self, rows: int, columns: int) -> 'Matrix':
        """
        Reinterpret the row-major sequence with a new shape.

        A reshape on top of a reshape replaces it, and reshaping back to
        the shape before it removes the record entirely.

        Raises:
            ShapeMismatchError: If ``rows * columns`` differs from the cell count
        """
        rows = _check_dimension(rows, "rows")
        columns = _check_dimension(columns, "columns")
        if rows * columns != self.count():
            raise ShapeMismatchError(
                f"Cannot reshape {self.shape} ({self.count()} cells) to ({rows}, {columns})"
            )

        prior_rows, prior_columns, changes = collapse_reshape(
            self._rows, self._columns, self._changes
        )
        if (rows, columns) == (prior_rows, prior_columns):
            return self._derive(rows, columns, changes)
        change = Reshape(prior_rows, prior_columns)
        return self._derive(rows, columns, push_change(changes, change))

    def diagonal(self) -> 'Matrix':
        """One-row view of the main diagonal (length ``min(rows, columns)``)."""
        length = min(self._rows, self._columns)
        change = Diagonal(self._rows, self._columns)
        return self._derive(1, length, push_change(self._changes, change))

    def row(self, index: int) -> 'Matrix':
        index = _check_index(index, self._rows, "Row index")
        change = Row(self._rows, self._columns, index)
        return self._derive(1, self._columns, push_change(self._changes, change))

    def column(self, index: int) -> 'Matrix':
        index = _check_index(index, self._columns, "Column index")
        change = Column(self._rows, self._columns, index)
        return self._derive(self._rows, 1, push_change(self._changes, change))

    def drop_row(self, index: int) -> 'Matrix':
        """
        View without the row at ``index``.

        Raises:
            ShapeMismatchError: If only one row is left
            BoundsError: If index is out of range
        """
        if self._rows < 2:
            raise ShapeMismatchError("Cannot drop the only row of a matrix")
        index = _check_index(index, self._rows, "Row index")
        return self._derive(
            self._rows - 1, self._columns, push_change(self._changes, DropRow(index))
        )

    def drop_column(self, index: int) -> 'Matrix':
        """View without the column at ``index``."""
        if self._columns < 2:
            raise ShapeMismatchError("Cannot drop the only column of a matrix")
        index = _check_index(index, self._columns, "Column index")
        return self._derive(
            self._rows, self._columns - 1, push_change(self._changes, DropColumn(index))
        )

    def clear_last_change(self) -> 'Matrix':
        """Undo the most recent view record (values are untouched)."""
        rows, columns, changes = pop_change(self._rows, self._columns, self._changes)
        return self._derive(rows, columns, changes)

    def clear_changes(self) -> 'Matrix':
        """Undo every view record, returning to the storage layout."""
        rows, columns = resolve_shape(self._rows, self._columns, self._changes)
        return self._derive(rows, columns, ())

    # =========================================================================
    # Row / Column Assignment
    # =========================================================================

    def set_row(self, index: int, row_matrix: 'Matrix') -> 'Matrix':
        """
        Overwrite row ``index`` with the values of a ``1 x columns`` matrix.

        Returns:
            self
        """
        if row_matrix.shape != (1, self._columns):
            raise ShapeMismatchError(
                f"Expected a (1, {self._columns}) row matrix, got {row_matrix.shape}"
            )
        self.row(index).apply(
            lambda _, pos: row_matrix.get(pos), CallbackKind.VALUE_POSITION
        )
        return self

    def set_column(self, index: int, column_matrix: 'Matrix') -> 'Matrix':
        """Overwrite column ``index`` with the values of a ``rows x 1`` matrix."""
        if column_matrix.shape != (self._rows, 1):
            raise ShapeMismatchError(
                f"Expected a ({self._rows}, 1) column matrix, got {column_matrix.shape}"
            )
        self.column(index).apply(
            lambda _, pos: column_matrix.get(pos), CallbackKind.VALUE_POSITION
        )
        return self


# =============================================================================
# Factory Functions
# =============================================================================

def new(
    rows_or_data: Union[int, Sequence[Sequence[int]]],
    columns: Optional[int] = None,
    signed: Optional[bool] = None,
    seed: Optional[Callback] = None,
    seed_kind: CallbackKind = CallbackKind.VALUE,
) -> Matrix:
    """
    Create a matrix from a shape or from nested rows.

    Example:
        >>> new(10, 5)
        >>> new(10, 5, signed=False)
        >>> new([[1, 2, 3], [4, 5, 6]])
    """
    if columns is None:
        if seed is not None:
            raise TypeError("seed is only accepted together with an explicit shape")
        return Matrix.from_list_of_lists(rows_or_data, signed)
    return Matrix(rows_or_data, columns, signed, seed, seed_kind)


def identity(size: int, signed: Optional[bool] = None) -> Matrix:
    """Square identity matrix."""
    return Matrix.identity(size, signed)


def from_list_of_lists(data: Sequence[Sequence[int]], signed: Optional[bool] = None) -> Matrix:
    return Matrix.from_list_of_lists(data, signed)


def from_numpy(array, signed: Optional[bool] = None) -> Matrix:
    return Matrix.from_numpy(array, signed)
