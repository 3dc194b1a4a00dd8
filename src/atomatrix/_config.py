"""
atomatrix Config - Runtime Configuration

Controls defaults that are not part of any single call signature:
the lock striping of atomic storage and the default value domain of
new matrices. Configuration can be set globally or overridden per
thread with a context manager.

Environment:
    ATOMATRIX_LOCK_STRIPES  Number of lock stripes per storage (int > 0)
    ATOMATRIX_UNSIGNED      '1'/'true'/'yes' makes unsigned the default domain
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List

logger = logging.getLogger("atomatrix.config")


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class StorageConfig:
    """Configuration for atomic storage allocation."""
    lock_stripes: int = 64         # Locks shared by all cells of one storage
    alignment: int = 64            # Buffer alignment in bytes


@dataclass
class MatrixConfig:
    """Configuration for matrix construction."""
    signed: bool = True            # Default value domain


def check_alignment(value: int) -> int:
    """
    Validate a buffer alignment.

    Raises:
        ValueError: If ``value`` is not a positive power of two
    """
    if not isinstance(value, int) or value < 1 or value & (value - 1):
        raise ValueError(f"alignment must be a positive power of two, got {value!r}")
    return value


# =============================================================================
# Global Configuration Manager
# =============================================================================

class AtomatrixConfig:
    """
    Global configuration manager for atomatrix.

    Example:
        # Global configuration
        atomatrix.config.matrix = MatrixConfig(signed=False)

        # Local configuration (context manager, current thread only)
        with atomatrix.config.local(storage=StorageConfig(lock_stripes=8)):
            m = atomatrix.new(100, 100)
    """

    def __init__(self):
        self._global_storage = StorageConfig()
        self._global_matrix = MatrixConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration."""
        if getattr(self._local, "storage", None) is not None:
            return self._local.storage
        return self._global_storage

    @storage.setter
    def storage(self, value: StorageConfig):
        if value.lock_stripes < 1:
            raise ValueError(f"lock_stripes must be positive, got {value.lock_stripes}")
        check_alignment(value.alignment)
        self._global_storage = value

    @property
    def matrix(self) -> MatrixConfig:
        """Get matrix configuration."""
        if getattr(self._local, "matrix", None) is not None:
            return self._local.matrix
        return self._global_matrix

    @matrix.setter
    def matrix(self, value: MatrixConfig):
        self._global_matrix = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (storage, matrix)
        """
        unknown = set(kwargs) - {"storage", "matrix"}
        if unknown:
            raise TypeError(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Environment / Reset / Serialization
    # -------------------------------------------------------------------------

    def load_env(self, environ=None):
        """Apply ATOMATRIX_* environment overrides to the global config."""
        environ = os.environ if environ is None else environ

        stripes = environ.get("ATOMATRIX_LOCK_STRIPES")
        if stripes:
            try:
                value = int(stripes)
                if value < 1:
                    raise ValueError(value)
            except ValueError:
                logger.warning("Ignoring invalid ATOMATRIX_LOCK_STRIPES=%r", stripes)
            else:
                self._global_storage = StorageConfig(
                    lock_stripes=value,
                    alignment=self._global_storage.alignment,
                )

        unsigned = environ.get("ATOMATRIX_UNSIGNED", "").lower()
        if unsigned in ("1", "true", "yes"):
            self._global_matrix = MatrixConfig(signed=False)

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_storage = StorageConfig()
        self._global_matrix = MatrixConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "storage": {
                "lock_stripes": self.storage.lock_stripes,
                "alignment": self.storage.alignment,
            },
            "matrix": {
                "signed": self.matrix.signed,
            },
        }

    def __repr__(self) -> str:
        return f"AtomatrixConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: AtomatrixConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())

    def __enter__(self):
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._clear_local(self._keys)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = AtomatrixConfig()
config.load_env()


def get_config() -> AtomatrixConfig:
    """Get the global configuration instance."""
    return config


__all__ = [
    "StorageConfig",
    "MatrixConfig",
    "AtomatrixConfig",
    "config",
    "get_config",
    "check_alignment",
]
