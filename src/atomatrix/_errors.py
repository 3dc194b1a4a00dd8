"""
Error handling for atomatrix.

Every error carries a numeric code so callers can branch on the
category without matching on message text. The concrete classes
also derive from the matching builtin (IndexError, ValueError,
RuntimeError) so ordinary ``except`` clauses keep working.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
ATOMATRIX_OK = 0

# General errors (1-9)
ATOMATRIX_ERROR_UNKNOWN = 1
ATOMATRIX_ERROR_INTERNAL = 2

# Argument errors (10-19)
ATOMATRIX_ERROR_INVALID_ARGUMENT = 10
ATOMATRIX_ERROR_DIMENSION_MISMATCH = 11
ATOMATRIX_ERROR_DOMAIN_ERROR = 12
ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS = 14


_ERROR_MESSAGES = {
    ATOMATRIX_OK: "Success",
    ATOMATRIX_ERROR_UNKNOWN: "Unknown error",
    ATOMATRIX_ERROR_INTERNAL: "Internal error",
    ATOMATRIX_ERROR_INVALID_ARGUMENT: "Invalid argument",
    ATOMATRIX_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    ATOMATRIX_ERROR_DOMAIN_ERROR: "Domain error",
    ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
}


# =============================================================================
# Exception Classes
# =============================================================================

class MatrixError(Exception):
    """
    Base exception for all atomatrix errors.

    Attributes:
        code: Numeric error category (one of the ATOMATRIX_* constants)
        message: Human readable detail
    """

    OK = ATOMATRIX_OK
    ERROR_UNKNOWN = ATOMATRIX_ERROR_UNKNOWN
    ERROR_INTERNAL = ATOMATRIX_ERROR_INTERNAL
    ERROR_INVALID_ARGUMENT = ATOMATRIX_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = ATOMATRIX_ERROR_DIMENSION_MISMATCH
    ERROR_DOMAIN_ERROR = ATOMATRIX_ERROR_DOMAIN_ERROR
    ERROR_INDEX_OUT_OF_BOUNDS = ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS

    default_code = ATOMATRIX_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"atomatrix error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "MatrixError":
        """Create the exception class registered for ``code``."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        exc_cls = _CODE_TO_CLASS.get(code, cls)
        return exc_cls(msg, code)


class BoundsError(MatrixError, IndexError):
    """Position, index or range outside the current shape."""
    default_code = ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS


class ShapeMismatchError(MatrixError, ValueError):
    """Operand shapes or cell counts do not agree."""
    default_code = ATOMATRIX_ERROR_DIMENSION_MISMATCH


class DomainError(MatrixError, ValueError):
    """Value outside the signed/unsigned 64-bit domain of the storage."""
    default_code = ATOMATRIX_ERROR_DOMAIN_ERROR


class InternalError(MatrixError, RuntimeError):
    """
    A broken internal invariant.

    Raised when storage is addressed outside ``[0, size)`` or when a
    view record finds a shape it could never have been pushed onto.
    These are programming errors and are not meant to be handled.
    """
    default_code = ATOMATRIX_ERROR_INTERNAL


_CODE_TO_CLASS = {
    ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS: BoundsError,
    ATOMATRIX_ERROR_DIMENSION_MISMATCH: ShapeMismatchError,
    ATOMATRIX_ERROR_DOMAIN_ERROR: DomainError,
    ATOMATRIX_ERROR_INTERNAL: InternalError,
}


__all__ = [
    "ATOMATRIX_OK",
    "ATOMATRIX_ERROR_UNKNOWN",
    "ATOMATRIX_ERROR_INTERNAL",
    "ATOMATRIX_ERROR_INVALID_ARGUMENT",
    "ATOMATRIX_ERROR_DIMENSION_MISMATCH",
    "ATOMATRIX_ERROR_DOMAIN_ERROR",
    "ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS",
    "MatrixError",
    "BoundsError",
    "ShapeMismatchError",
    "DomainError",
    "InternalError",
]
