"""
Atomic Integer Array

Fixed-length array of 64-bit integer cells in one aligned ctypes
buffer. Every cell can be read and updated atomically by concurrent
threads; read-modify-write sequences are serialized through a small
table of striped locks so unrelated cells rarely contend.

Indices are 0-based. Addressing a cell outside ``[0, size)`` is a
broken invariant and raises InternalError.
"""

import ctypes
import logging
import threading
from typing import Dict, List, Optional, Union

import numpy as np

from ._config import check_alignment, config
from ._dtypes import DType, dtype_for, check_in_domain
from ._errors import InternalError

__all__ = ['AtomicArray']

logger = logging.getLogger("atomatrix.storage")


class AtomicArray:
    """
    Contiguous array of atomically updatable 64-bit integers.

    Attributes:
        dtype (DType): int64 (signed) or uint64 (unsigned)
        size (int): Number of cells
        min (int): Smallest representable value
        max (int): Largest representable value

    Example:
        >>> arr = AtomicArray(4)
        >>> arr.add_get(0, 5)
        5
        >>> arr.compare_exchange(0, 5, 7) is None
        True
        >>> arr.get(0)
        7
    """

    __slots__ = (
        '_size', '_dtype', '_ctype', '_itemsize', '_data', '_owner',
        '_locks', '_stripes', '__weakref__',
    )

    def __init__(
        self,
        size: int,
        signed: Union[bool, DType] = True,
        lock_stripes: Optional[int] = None,
        align: Optional[int] = None,
    ):
        """
        Allocate a zero-initialized array.

        Args:
            size: Number of cells (positive)
            signed: Domain selector, or a DType
            lock_stripes: Number of locks (default: config.storage.lock_stripes)
            align: Buffer alignment in bytes (default: config.storage.alignment)
        """
        if size < 1:
            raise ValueError(f"AtomicArray size must be positive, got {size}")

        storage_cfg = config.storage
        if lock_stripes is None:
            lock_stripes = storage_cfg.lock_stripes
        if align is None:
            align = storage_cfg.alignment
        check_alignment(align)

        self._size = size
        self._dtype = dtype_for(signed)
        self._ctype = self._dtype.ctype
        self._itemsize = ctypes.sizeof(self._ctype)

        # Over-allocate so the cell block can start on an aligned address
        nbytes = size * self._itemsize
        buffer = (ctypes.c_uint8 * (nbytes + align))()
        addr = ctypes.addressof(buffer)
        aligned_addr = (addr + align - 1) & ~(align - 1)
        self._data = (self._ctype * size).from_address(aligned_addr)
        self._owner = buffer  # Keep reference to prevent GC

        self._stripes = max(1, min(lock_stripes, size))
        self._locks = [threading.Lock() for _ in range(self._stripes)]

        logger.debug(
            "Allocated %d %s cells (%d lock stripes)",
            size, self._dtype.value, self._stripes,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of cells."""
        return self._size

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def signed(self) -> bool:
        return self._dtype.signed

    @property
    def min(self) -> int:
        return self._dtype.bounds[0]

    @property
    def max(self) -> int:
        return self._dtype.bounds[1]

    @property
    def nbytes(self) -> int:
        return self._size * self._itemsize

    def info(self) -> Dict[str, int]:
        """Return size, bounds, cell bytes and allocated bytes (including alignment padding)."""
        return {
            'size': self._size,
            'min': self.min,
            'max': self.max,
            'nbytes': self.nbytes,
            'memory': ctypes.sizeof(self._owner),
        }

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _lock(self, index: int) -> threading.Lock:
        if index < 0 or index >= self._size:
            raise InternalError(f"Storage index {index} out of bounds [0, {self._size})")
        return self._locks[index % self._stripes]

    def _value(self, value, what: str = "value") -> int:
        return check_in_domain(value, self._dtype, what)

    # -------------------------------------------------------------------------
    # Atomic Operations
    # -------------------------------------------------------------------------

    def get(self, index: int) -> int:
        with self._lock(index):
            return self._data[index]

    def put(self, index: int, value: int) -> None:
        value = self._value(value)
        with self._lock(index):
            self._data[index] = value

    def add(self, index: int, incr: int) -> None:
        self.add_get(index, incr)

    def add_get(self, index: int, incr: int) -> int:
        """Add ``incr`` to the cell and return the new value (wrapping)."""
        incr = self._value(incr, "increment")
        with self._lock(index):
            new = self._dtype.wrap(self._data[index] + incr)
            self._data[index] = new
            return new

    def sub(self, index: int, decr: int) -> None:
        self.sub_get(index, decr)

    def sub_get(self, index: int, decr: int) -> int:
        """Subtract ``decr`` from the cell and return the new value (wrapping)."""
        decr = self._value(decr, "decrement")
        with self._lock(index):
            new = self._dtype.wrap(self._data[index] - decr)
            self._data[index] = new
            return new

    def exchange(self, index: int, value: int) -> int:
        """Store ``value`` and return the previous value."""
        value = self._value(value)
        with self._lock(index):
            old = self._data[index]
            self._data[index] = value
            return old

    def compare_exchange(self, index: int, expected: int, desired: int) -> Optional[int]:
        """
        Store ``desired`` if the cell equals ``expected``.

        Returns:
            None if ``desired`` was written, otherwise the current value.
        """
        expected = self._value(expected, "expected")
        desired = self._value(desired, "desired")
        with self._lock(index):
            current = self._data[index]
            if current != expected:
                return current
            self._data[index] = desired
            return None

    # -------------------------------------------------------------------------
    # Bulk Helpers
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def to_list(self) -> List[int]:
        """Snapshot of all cells (not atomic across cells)."""
        return [self.get(i) for i in range(self._size)]

    def to_numpy(self) -> np.ndarray:
        """Snapshot of all cells as a 1-D numpy array."""
        return np.array(self.to_list(), dtype=self._dtype.numpy_dtype)

    def copy(self) -> 'AtomicArray':
        """Create an independent array with the same contents."""
        new = AtomicArray(self._size, self._dtype, lock_stripes=self._stripes)
        for i in range(self._size):
            new._data[i] = self.get(i)
        return new

    def __repr__(self) -> str:
        if self._size <= 6:
            data_str = str(self.to_list())
        else:
            preview = [self.get(i) for i in range(3)] + ['...'] + \
                [self.get(i) for i in range(self._size - 3, self._size)]
            data_str = str(preview)
        return f"AtomicArray({data_str}, dtype={self._dtype})"
