"""
Tests for error codes and exception hierarchy.
"""

import pytest

from atomatrix import (
    BoundsError,
    DomainError,
    InternalError,
    Matrix,
    MatrixError,
    ShapeMismatchError,
)
from atomatrix._errors import (
    ATOMATRIX_ERROR_DIMENSION_MISMATCH,
    ATOMATRIX_ERROR_DOMAIN_ERROR,
    ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS,
    ATOMATRIX_ERROR_INTERNAL,
    ATOMATRIX_ERROR_UNKNOWN,
)


@pytest.mark.parametrize("exc_cls, code, builtin", [
    (BoundsError, ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS, IndexError),
    (ShapeMismatchError, ATOMATRIX_ERROR_DIMENSION_MISMATCH, ValueError),
    (DomainError, ATOMATRIX_ERROR_DOMAIN_ERROR, ValueError),
    (InternalError, ATOMATRIX_ERROR_INTERNAL, RuntimeError),
])
def test_default_codes(exc_cls, code, builtin):
    err = exc_cls()
    assert err.code == code
    assert isinstance(err, MatrixError)
    assert isinstance(err, builtin)


def test_message_format():
    err = DomainError("value 5 outside domain")
    assert err.message == "value 5 outside domain"
    assert str(err) == "atomatrix error 12: value 5 outside domain"


def test_default_message():
    assert BoundsError().message == "Index out of bounds"


def test_from_code():
    err = MatrixError.from_code(ATOMATRIX_ERROR_DIMENSION_MISMATCH, "reshape")
    assert type(err) is ShapeMismatchError
    assert err.message == "reshape: Dimension mismatch"


def test_from_unknown_code():
    err = MatrixError.from_code(999)
    assert type(err) is MatrixError
    assert err.code == 999
    assert MatrixError().code == ATOMATRIX_ERROR_UNKNOWN


def test_raised_errors_carry_codes():
    m = Matrix(2, 2)
    with pytest.raises(MatrixError) as info:
        m.get((5, 5))
    assert info.value.code == ATOMATRIX_ERROR_INDEX_OUT_OF_BOUNDS

    with pytest.raises(MatrixError) as info:
        m.reshape(3, 3)
    assert info.value.code == ATOMATRIX_ERROR_DIMENSION_MISMATCH
