"""
atomatrix - Atomic Integer Matrices

Fixed-shape 64-bit integer matrices over atomically updatable
storage, with zero-copy views:

- Lock-striped atomic cells: get / put / add / sub / exchange / compare_exchange
- Zero-copy views: transpose, submatrix, reshape, diagonal, row, column,
  flips and row/column deletion
- Materialization of any view into fresh storage with ``copy``

Architecture:
    ┌──────────────────────────────────────────────┐
    │         Matrix (shape + access path)         │
    ├──────────────────────────────────────────────┤
    │  Resolver: view records -> storage index     │
    ├──────────────────────────────────────────────┤
    │  AtomicArray: flat int64 / uint64 cells      │
    └──────────────────────────────────────────────┘

Example:
    >>> import atomatrix
    >>> m = atomatrix.new(5, 5, seed=lambda _, pos: pos[0] * pos[1],
    ...                   seed_kind=atomatrix.CallbackKind.VALUE_POSITION)
    >>> m.argmax(), m.sum()
    ((4, 4), 100)
    >>> view = m.transpose()           # shares storage, no data moved
    >>> owned = view.copy()            # independent storage
    >>> owned.ownership
    Ownership.OWNED
"""

__version__ = '0.3.4'

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
from ._config import (
    AtomatrixConfig,
    MatrixConfig,
    StorageConfig,
    config,
    get_config,
)
from ._dtypes import DType, int64, uint64
from ._errors import (
    BoundsError,
    DomainError,
    InternalError,
    MatrixError,
    ShapeMismatchError,
)
from ._iter import MatrixIterator, Reduce, reduce_while, slice_values
from ._matrix import Matrix, from_list_of_lists, from_numpy, identity, new
from ._ownership import Ownership
from ._typing import CallbackKind

__all__ = [
    # Version
    '__version__',

    # Core classes
    'Matrix',
    'AtomicArray',
    'MatrixIterator',

    # Factories
    'new',
    'identity',
    'from_list_of_lists',
    'from_numpy',

    # Enums
    'CallbackKind',
    'Ownership',
    'Reduce',
    'DType',
    'int64',
    'uint64',

    # View records
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

    # Sequence helpers
    'slice_values',
    'reduce_while',

    # Errors
    'MatrixError',
    'BoundsError',
    'ShapeMismatchError',
    'DomainError',
    'InternalError',

    # Configuration
    'AtomatrixConfig',
    'StorageConfig',
    'MatrixConfig',
    'config',
    'get_config',
]
