"""
View Records (Access Path)

A matrix view is a stack of records, most recent first. Each record
describes one zero-copy transformation and knows how to map a
position in the shape *after* it was applied back to a position in
the shape *before* it was applied. Nothing here touches storage.

Record Types:

    Record        Stored state                         Involution
    ----------------------------------------------------------------
    Transpose     -                                    yes
    FlipLR        -                                    yes
    FlipUD        -                                    yes
    Reshape       prior shape                          no
    Submatrix     prior shape, row range, col range    no
    Diagonal      prior shape                          no
    Row           prior shape, row index               no
    Column        prior shape, column index            no
    DropRow       dropped row index                    no
    DropColumn    dropped column index                 no

Records with no stored shape recover it from the current shape
(Transpose swaps it, flips keep it, drops add one row/column).
"""

from dataclasses import dataclass
from typing import ClassVar, Tuple

from ._errors import InternalError

__all__ = [
    'Change',
    'Transpose',
    'FlipLR',
    'FlipUD',
    'Reshape',
    'Submatrix',
    'Diagonal',
    'Row',
    'Column',
    'DropRow',
    'DropColumn',
]


# (rows, columns, row, col)
Resolved = Tuple[int, int, int, int]


class Change:
    """
    Base class of all view records.

    Subclasses implement ``prior_shape`` and ``resolve``. ``resolve``
    receives the current shape and a position inside it and returns
    the prior shape together with the rewritten position.
    """

    __slots__ = ()

    is_involution: ClassVar[bool] = False
    name: ClassVar[str] = 'change'

    def prior_shape(self, rows: int, columns: int) -> Tuple[int, int]:
        raise NotImplementedError

    def resolve(self, rows: int, columns: int, row: int, col: int) -> Resolved:
        raise NotImplementedError

    def _broken(self, rows: int, columns: int, row: int, col: int):
        return InternalError(
            f"{self.name} record {self!r} cannot resolve position "
            f"({row}, {col}) in shape ({rows}, {columns})"
        )


# =============================================================================
# Involutions
# =============================================================================

@dataclass(frozen=True)
class Transpose(Change):
    is_involution: ClassVar[bool] = True
    name: ClassVar[str] = 'transpose'

    def prior_shape(self, rows, columns):
        return columns, rows

    def resolve(self, rows, columns, row, col):
        return columns, rows, col, row


@dataclass(frozen=True)
class FlipLR(Change):
    is_involution: ClassVar[bool] = True
    name: ClassVar[str] = 'flip_lr'

    def prior_shape(self, rows, columns):
        return rows, columns

    def resolve(self, rows, columns, row, col):
        return rows, columns, row, columns - 1 - col


@dataclass(frozen=True)
class FlipUD(Change):
    is_involution: ClassVar[bool] = True
    name: ClassVar[str] = 'flip_ud'

    def prior_shape(self, rows, columns):
        return rows, columns

    def resolve(self, rows, columns, row, col):
        return rows, columns, rows - 1 - row, col


# =============================================================================
# Shape-carrying records
# =============================================================================

@dataclass(frozen=True)
class Reshape(Change):
    prior_rows: int
    prior_columns: int

    name: ClassVar[str] = 'reshape'

    def prior_shape(self, rows, columns):
        return self.prior_rows, self.prior_columns

    def resolve(self, rows, columns, row, col):
        if rows * columns != self.prior_rows * self.prior_columns:
            raise self._broken(rows, columns, row, col)
        prior_row, prior_col = divmod(row * columns + col, self.prior_columns)
        return self.prior_rows, self.prior_columns, prior_row, prior_col


@dataclass(frozen=True)
class Submatrix(Change):
    prior_rows: int
    prior_columns: int
    row_range: range
    col_range: range

    name: ClassVar[str] = 'submatrix'

    def prior_shape(self, rows, columns):
        return self.prior_rows, self.prior_columns

    def resolve(self, rows, columns, row, col):
        if row >= len(self.row_range) or col >= len(self.col_range):
            raise self._broken(rows, columns, row, col)
        return (
            self.prior_rows, self.prior_columns,
            row + self.row_range.start, col + self.col_range.start,
        )


@dataclass(frozen=True)
class Diagonal(Change):
    prior_rows: int
    prior_columns: int

    name: ClassVar[str] = 'diagonal'

    def prior_shape(self, rows, columns):
        return self.prior_rows, self.prior_columns

    def resolve(self, rows, columns, row, col):
        if rows != 1:
            raise self._broken(rows, columns, row, col)
        return self.prior_rows, self.prior_columns, col, col


@dataclass(frozen=True)
class Row(Change):
    prior_rows: int
    prior_columns: int
    row_index: int

    name: ClassVar[str] = 'row'

    def prior_shape(self, rows, columns):
        return self.prior_rows, self.prior_columns

    def resolve(self, rows, columns, row, col):
        if rows != 1 or columns != self.prior_columns:
            raise self._broken(rows, columns, row, col)
        return self.prior_rows, self.prior_columns, self.row_index, col


@dataclass(frozen=True)
class Column(Change):
    prior_rows: int
    prior_columns: int
    col_index: int

    name: ClassVar[str] = 'column'

    def prior_shape(self, rows, columns):
        return self.prior_rows, self.prior_columns

    def resolve(self, rows, columns, row, col):
        if columns != 1 or rows != self.prior_rows:
            raise self._broken(rows, columns, row, col)
        return self.prior_rows, self.prior_columns, row, self.col_index


# =============================================================================
# Deletions
# =============================================================================

@dataclass(frozen=True)
class DropRow(Change):
    dropped_index: int

    name: ClassVar[str] = 'drop_row'

    def prior_shape(self, rows, columns):
        return rows + 1, columns

    def resolve(self, rows, columns, row, col):
        if row >= self.dropped_index:
            row += 1
        return rows + 1, columns, row, col


@dataclass(frozen=True)
class DropColumn(Change):
    dropped_index: int

    name: ClassVar[str] = 'drop_column'

    def prior_shape(self, rows, columns):
        return rows, columns + 1

    def resolve(self, rows, columns, row, col):
        if col >= self.dropped_index:
            col += 1
        return rows, columns + 1, row, col
