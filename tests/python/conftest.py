"""
Pytest configuration and shared fixtures for atomatrix tests.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import atomatrix  # noqa: E402
from atomatrix import CallbackKind, Matrix  # noqa: E402


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def row_plus_col():
    """7x4 matrix with value row + col.

    [[0, 1, 2, 3],
     [1, 2, 3, 4],
     ...
     [6, 7, 8, 9]]
    """
    return Matrix(7, 4, seed=lambda _, pos: pos[0] + pos[1],
                  seed_kind=CallbackKind.VALUE_POSITION)


@pytest.fixture
def row_times_col():
    """5x5 matrix with value row * col."""
    return Matrix(5, 5, seed=lambda _, pos: pos[0] * pos[1],
                  seed_kind=CallbackKind.VALUE_POSITION)


@pytest.fixture
def row_index():
    """5x5 matrix where every cell holds its row index."""
    return Matrix(5, 5, seed=lambda _, pos: pos[0],
                  seed_kind=CallbackKind.VALUE_POSITION)


@pytest.fixture
def counting():
    """3x4 matrix holding 0..11 in row-major order."""
    return atomatrix.new([[0, 1, 2, 3], [4, 5, 6, 7], [8, 9, 10, 11]])


@pytest.fixture(autouse=True)
def reset_config():
    """Keep global configuration changes from leaking between tests."""
    yield
    atomatrix.config.reset()


# =============================================================================
# Helper Functions
# =============================================================================

def all_positions(matrix):
    """Every (row, col) of a matrix in row-major order."""
    return [(r, c) for r in range(matrix.rows) for c in range(matrix.columns)]
