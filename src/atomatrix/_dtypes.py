"""
Value Domains

A matrix stores 64-bit integers, either signed or unsigned. The
domain is chosen when storage is created and never changes.
"""

import ctypes
from enum import Enum
from typing import Tuple, Union

import numpy as np

from ._errors import DomainError

__all__ = ['DType', 'int64', 'uint64', 'dtype_for', 'domain_bounds', 'check_in_domain']


class DType(Enum):
    """
    Storage value domain.

    Example:
        >>> from atomatrix import DType
        >>> DType.int64.bounds
        (-9223372036854775808, 9223372036854775807)
    """

    int64 = 'int64'
    uint64 = 'uint64'

    @property
    def signed(self) -> bool:
        return self is DType.int64

    @property
    def bounds(self) -> Tuple[int, int]:
        """Inclusive (min, max) of representable values."""
        if self is DType.int64:
            return -(1 << 63), (1 << 63) - 1
        return 0, (1 << 64) - 1

    @property
    def ctype(self):
        return ctypes.c_int64 if self is DType.int64 else ctypes.c_uint64

    @property
    def numpy_dtype(self):
        return np.int64 if self is DType.int64 else np.uint64

    def wrap(self, value: int) -> int:
        """Reduce an arbitrary integer into the domain modulo 2**64."""
        value &= (1 << 64) - 1
        if self is DType.int64 and value >= (1 << 63):
            value -= 1 << 64
        return value

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


int64 = DType.int64
uint64 = DType.uint64


def dtype_for(signed: Union[bool, DType]) -> DType:
    """Map a ``signed`` flag (or a DType) to its DType."""
    if isinstance(signed, DType):
        return signed
    return DType.int64 if signed else DType.uint64


def domain_bounds(signed: bool) -> Tuple[int, int]:
    """Inclusive bounds for the signed or unsigned domain."""
    return dtype_for(signed).bounds


def check_in_domain(value, dtype: DType, what: str = "value") -> int:
    """
    Validate that ``value`` is an integer inside ``dtype``.

    Raises:
        DomainError: If value is not an integer or lies outside the domain
    """
    # bool is an int subclass; reject it along with floats
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, np.integer):
            value = int(value)
        else:
            raise DomainError(f"{what} must be an integer, got {type(value).__name__}")

    lo, hi = dtype.bounds
    if value < lo or value > hi:
        raise DomainError(f"{what} {value} outside {dtype.value} domain [{lo}, {hi}]")
    return value
