"""
Tests for zero-copy views and the access path.
"""

import pytest

import atomatrix
from atomatrix import (
    BoundsError,
    Column,
    FlipLR,
    FlipUD,
    Ownership,
    Reshape,
    ShapeMismatchError,
)


class TestInvolutions:
    """Transpose and flips cancel when applied twice in a row."""

    def test_double_transpose_is_identity(self, counting):
        back = counting.transpose().transpose()
        assert back.changes == ()
        assert back.ownership is Ownership.OWNED
        assert back.to_list_of_lists() == counting.to_list_of_lists()

    def test_transpose_shape(self, counting):
        t = counting.transpose()
        assert t.shape == (4, 3)
        assert t.ownership is Ownership.VIEW
        assert t.to_list_of_lists() == [[0, 4, 8], [1, 5, 9], [2, 6, 10], [3, 7, 11]]

    def test_flip_lr(self, counting):
        assert counting.flip_lr().to_list_of_lists() == [
            [3, 2, 1, 0], [7, 6, 5, 4], [11, 10, 9, 8],
        ]
        assert counting.flip_lr().flip_lr().changes == ()

    def test_flip_ud(self, counting):
        assert counting.flip_ud().to_list_of_lists() == [
            [8, 9, 10, 11], [4, 5, 6, 7], [0, 1, 2, 3],
        ]

    def test_interleaved_flips_do_not_cancel(self, counting):
        view = counting.flip_lr().flip_ud().flip_lr()
        assert view.changes == (FlipLR(), FlipUD(), FlipLR())
        assert view.to_list_of_lists() == counting.flip_ud().to_list_of_lists()


class TestReshape:

    def test_reshape_values(self, counting):
        assert counting.reshape(2, 6).to_list_of_lists() == [
            [0, 1, 2, 3, 4, 5], [6, 7, 8, 9, 10, 11],
        ]
        assert counting.reshape(12, 1).column_to_list(0) == list(range(12))

    def test_reshape_collapses(self, counting):
        view = counting.reshape(2, 6).reshape(6, 2)
        assert view.changes == (Reshape(3, 4),)
        assert view.row_to_list(5) == [10, 11]

    def test_reshape_back_pops(self, counting):
        view = counting.reshape(2, 6).reshape(3, 4)
        assert view.changes == ()
        assert view.shape == (3, 4)

    def test_reshape_after_column_collapses(self, row_index):
        view = row_index.column(2).reshape(1, 5).reshape(5, 1)
        assert view.changes == (Column(5, 5, 2),)

    def test_reshape_cell_count(self, counting):
        with pytest.raises(ShapeMismatchError):
            counting.reshape(5, 5)
        with pytest.raises(ShapeMismatchError):
            counting.reshape(0, 12)

    def test_reshape_of_transpose(self, counting):
        # row-major order of the transposed view, not of storage
        assert counting.transpose().reshape(1, 12).row_to_list(0) == [
            0, 4, 8, 1, 5, 9, 2, 6, 10, 3, 7, 11,
        ]


class TestSubmatrix:

    def test_ranges(self, counting):
        assert counting.submatrix(range(1, 3), range(2, 4)).to_list_of_lists() == [
            [6, 7], [10, 11],
        ]

    def test_slices(self, counting):
        assert counting[-1:, :].to_list_of_lists() == [[8, 9, 10, 11]]
        assert counting[:2, 3].to_list_of_lists() == [[3], [7]]

    def test_nested_submatrix(self, counting):
        inner = counting.submatrix(range(1, 3), range(1, 4)).submatrix(range(1, 2), range(0, 2))
        assert inner.to_list_of_lists() == [[9, 10]]

    def test_submatrix_of_transpose(self, counting):
        view = counting.transpose().submatrix(range(1, 3), range(0, 2))
        assert view.to_list_of_lists() == [[1, 5], [2, 6]]

    @pytest.mark.parametrize("rows, cols", [
        (range(1, 1), range(0, 2)),     # empty
        (range(0, 4), range(0, 2)),     # past the last row
        (range(0, 3, 2), range(0, 2)),  # stepped
        (range(0, 2), range(-1, 2)),    # negative start
    ])
    def test_invalid_ranges(self, counting, rows, cols):
        with pytest.raises(BoundsError):
            counting.submatrix(rows, cols)

    def test_rejects_lists(self, counting):
        with pytest.raises(BoundsError):
            counting.submatrix([0, 1], range(0, 2))


class TestDiagonalRowColumn:

    def test_diagonal_wide(self, counting):
        d = counting.diagonal()
        assert d.shape == (1, 3)
        assert d.to_list() == [0, 5, 10]

    def test_diagonal_tall(self, counting):
        assert counting.transpose().diagonal().to_list() == [0, 5, 10]

    def test_trace(self, counting, row_times_col):
        assert counting.trace() == 15
        assert row_times_col.trace() == 0 + 1 + 4 + 9 + 16
        assert atomatrix.identity(4).trace() == 4

    def test_row(self, counting):
        assert counting.row(1).to_list_of_lists() == [[4, 5, 6, 7]]
        with pytest.raises(BoundsError):
            counting.row(3)

    def test_column(self, counting):
        assert counting.column(3).to_list_of_lists() == [[3], [7], [11]]
        with pytest.raises(BoundsError):
            counting.column(4)

    def test_row_of_transpose_is_column(self, counting):
        assert counting.transpose().row(2).to_list() == counting.column_to_list(2)


class TestDrop:

    def test_drop_row(self, counting):
        view = counting.drop_row(1)
        assert view.shape == (2, 4)
        assert view.to_list_of_lists() == [[0, 1, 2, 3], [8, 9, 10, 11]]

    def test_drop_column(self, counting):
        assert counting.drop_column(0).to_list_of_lists() == [
            [1, 2, 3], [5, 6, 7], [9, 10, 11],
        ]

    def test_drop_twice(self, counting):
        view = counting.drop_column(3).drop_column(0)
        assert view.to_list_of_lists() == [[1, 2], [5, 6], [9, 10]]

    def test_drop_last_row_rejected(self, counting):
        with pytest.raises(ShapeMismatchError):
            counting.row(0).drop_row(0)
        with pytest.raises(ShapeMismatchError):
            counting.column(0).drop_column(0)

    def test_drop_out_of_bounds(self, counting):
        with pytest.raises(BoundsError):
            counting.drop_row(3)
        with pytest.raises(BoundsError):
            counting.drop_column(-1)


class TestClearChanges:

    def test_clear_last_change(self, counting):
        view = counting.drop_row(1).clear_last_change()
        assert view.shape == (3, 4)
        assert view.to_list_of_lists() == counting.to_list_of_lists()

    def test_clear_last_change_on_owned(self, counting):
        assert counting.clear_last_change().shape == (3, 4)

    def test_clear_last_change_reshape(self, row_index):
        view = row_index.column(2).reshape(1, 5).clear_last_change()
        assert view.shape == (5, 1)

    def test_clear_changes(self, counting):
        view = counting.transpose().submatrix(range(1, 3), range(0, 2)).flip_lr()
        base = view.clear_changes()
        assert base.changes == ()
        assert base.shape == (3, 4)
        assert base.to_list_of_lists() == counting.to_list_of_lists()

    def test_clear_changes_after_diagonal(self, counting):
        assert counting.diagonal().clear_changes().shape == (3, 4)


class TestSharingAndCopy:

    def test_write_through_transpose(self, counting):
        counting.transpose().put((0, 2), 100)
        assert counting.get((2, 0)) == 100

    def test_write_through_submatrix(self, row_plus_col):
        block = row_plus_col.submatrix(range(5, 7), range(1, 4))
        block.add((0, 0), 10)
        assert row_plus_col.get((5, 1)) == 16

    def test_write_through_dropped_view(self, counting):
        counting.drop_row(0).put((0, 0), -1)
        assert counting.get((1, 0)) == -1

    def test_copy_fidelity(self, counting):
        view = counting.transpose().flip_lr().drop_row(0)
        owned = view.copy()
        assert owned.changes == ()
        assert owned.shape == view.shape
        assert owned.to_list_of_lists() == view.to_list_of_lists()
        assert not owned.shares_storage(counting)

    def test_copy_is_independent(self, counting):
        owned = counting.copy()
        owned.put((0, 0), 42)
        assert counting.get((0, 0)) == 0
        assert owned.signed == counting.signed

    @pytest.mark.parametrize("build", [
        lambda m: m.transpose(),
        lambda m: m.flip_lr().submatrix(range(1, 3), range(0, 3)),
        lambda m: m.reshape(6, 2).drop_row(2),
        lambda m: m.diagonal(),
        lambda m: m.column(1).reshape(1, 3),
    ])
    def test_physical_index_holds_same_value(self, counting, build):
        view = build(counting)
        for index in range(view.count()):
            position = view.index_to_position(index)
            physical = view.position_to_index(position)
            assert counting.storage.get(physical) == view.get(position)
            assert counting.get(counting.index_to_position(physical)) == view.get(position)

    def test_copy_keeps_domain(self):
        m = atomatrix.new(2, 2, signed=False).transpose()
        assert not m.copy().signed


class TestRowColumnAssignment:

    def test_set_row(self, counting):
        result = counting.set_row(1, atomatrix.new([[9, 9, 9, 9]]))
        assert result is counting
        assert counting.row_to_list(1) == [9, 9, 9, 9]
        assert counting.row_to_list(0) == [0, 1, 2, 3]

    def test_set_column(self, counting):
        counting.set_column(0, atomatrix.new([[1], [2], [3]]))
        assert counting.column_to_list(0) == [1, 2, 3]

    def test_set_column_through_view(self, counting):
        counting.transpose().set_column(0, atomatrix.new([[7], [7], [7], [7]]))
        assert counting.row_to_list(0) == [7, 7, 7, 7]

    def test_shape_mismatch(self, counting):
        with pytest.raises(ShapeMismatchError):
            counting.set_row(0, atomatrix.new([[1, 2, 3]]))
        with pytest.raises(ShapeMismatchError):
            counting.set_column(0, atomatrix.new([[1, 2, 3]]))

    def test_bad_index(self, counting):
        with pytest.raises(BoundsError):
            counting.set_row(5, atomatrix.new([[1, 2, 3, 4]]))
