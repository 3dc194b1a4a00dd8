"""Ownership and Storage Sharing.

A matrix created by construction or ``copy`` owns a fresh storage.
View builders derive new matrices that point at the same storage,
so one AtomicArray may be reachable from many matrices. This module
tracks those sharers without keeping any of them alive.

Key Concepts:
    - OWNED: empty access path, logical layout equals the storage layout
    - VIEW: pending transformations on top of a (possibly shared) storage
    - Sharers: live matrices referencing one storage, tracked weakly;
      the storage itself is freed by the garbage collector when the
      last sharer goes away.
"""

import threading
from enum import Enum
from typing import Any
from weakref import WeakKeyDictionary, WeakSet

__all__ = [
    'Ownership',
    'StorageTracker',
    'tracker',
]


class Ownership(Enum):
    """Relationship between a matrix and its storage layout."""
    OWNED = 'owned'
    VIEW = 'view'

    def __repr__(self) -> str:
        return f"Ownership.{self.name}"


class StorageTracker:
    """Tracks which live matrices reference each storage.

    Example:
        >>> m = atomatrix.new(3, 3)
        >>> t = m.transpose()
        >>> tracker.share_count(m.storage)
        2
        >>> del t
        >>> tracker.share_count(m.storage)
        1
    """

    def __init__(self):
        self._sharers: "WeakKeyDictionary[Any, WeakSet]" = WeakKeyDictionary()
        self._lock = threading.Lock()

    def register(self, storage: Any, matrix: Any) -> None:
        """Record that ``matrix`` references ``storage``."""
        with self._lock:
            sharers = self._sharers.get(storage)
            if sharers is None:
                sharers = WeakSet()
                self._sharers[storage] = sharers
            sharers.add(matrix)

    def share_count(self, storage: Any) -> int:
        """Number of live matrices referencing ``storage``."""
        with self._lock:
            sharers = self._sharers.get(storage)
            return 0 if sharers is None else len(sharers)

    def is_shared(self, storage: Any) -> bool:
        return self.share_count(storage) > 1

    def __repr__(self) -> str:
        return f"StorageTracker(storages={len(self._sharers)})"


# Process-wide tracker used by Matrix
tracker = StorageTracker()
