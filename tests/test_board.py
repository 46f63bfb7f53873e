# tests/test_board.py
import numpy as np
import pytest

from stepsudoku.board import (
    CELL_COUNT,
    Board,
    GenerationError,
    generate,
    to_coords,
    to_index,
)


class ScriptedRng:
    """Stands in for numpy's Generator, replaying fixed position and digit draws."""

    def __init__(self, positions, digits):
        self.positions = list(positions)
        self.digits = list(digits)

    def integers(self, low, high):
        if high == CELL_COUNT:
            return self.positions.pop(0) if len(self.positions) > 1 else self.positions[0]
        return self.digits.pop(0) if len(self.digits) > 1 else self.digits[0]


def test_index_math():
    assert to_index(0, 0) == 0
    assert to_index(8, 0) == 8
    assert to_index(0, 1) == 9
    assert to_index(8, 8) == 80
    assert to_coords(40) == (4, 4)
    assert to_coords(17) == (8, 1)


@pytest.mark.parametrize("col,row", [(-1, 0), (9, 0), (0, 9), (3, -2)])
def test_out_of_range_coordinates_fail_fast(col, row):
    board = Board.create_empty()
    with pytest.raises(ValueError):
        board.value(col, row)
    with pytest.raises(ValueError):
        board.row_legal(col, row, 1)


def test_empty_board():
    board = Board.create_empty()
    cells = list(board.iter_cells())
    assert len(cells) == 81
    assert cells[0] == (0, 0, None, False)
    assert cells[10] == (1, 1, None, False)
    assert all(value is None and not fixed for _, _, value, fixed in cells)
    assert board.filled_count() == 0
    assert not board.is_complete()
    assert board.conflicts() == []


def test_legality_checks_see_other_cells_only():
    board = Board.create_empty()
    board.place(0, 0, 5)

    assert not board.row_legal(6, 0, 5)
    assert not board.column_legal(0, 7, 5)
    assert not board.box_legal(2, 2, 5)
    assert board.box_legal(3, 0, 5)
    assert board.row_legal(6, 1, 5)
    assert board.column_legal(1, 7, 5)

    # The cell's own value does not count against it
    assert board.row_legal(0, 0, 5)
    assert board.column_legal(0, 0, 5)
    assert board.box_legal(0, 0, 5)
    assert board.is_legal(0, 0, 5)

    assert not board.is_legal(4, 0, 5)
    assert board.is_legal(4, 4, 5)


def test_box_is_located_by_truncating_division():
    board = Board.create_empty()
    board.place(4, 4, 7)  # centre box
    assert not board.box_legal(3, 3, 7)
    assert not board.box_legal(5, 5, 7)
    assert board.box_legal(6, 5, 7)
    assert board.box_legal(2, 4, 7)


def test_cell_accessors():
    grid = np.zeros((9, 9), dtype=int)
    grid[2, 7] = 4  # row 2, column 7
    board = Board.from_grid(grid)

    assert board.value(7, 2) == 4
    assert board.is_fixed(7, 2)
    assert board.cell(7, 2) == (4, True)
    assert board.cell(2, 7) == (None, False)
    assert board.cells[to_index(7, 2)] == 4
    np.testing.assert_array_equal(board.to_grid(), grid)


def test_place_and_clear_respect_givens():
    grid = np.zeros((9, 9), dtype=int)
    grid[0, 0] = 5
    board = Board.from_grid(grid)

    with pytest.raises(ValueError):
        board.place(0, 0, 3)
    with pytest.raises(ValueError):
        board.clear(0, 0)
    with pytest.raises(ValueError):
        board.place(1, 0, 10)

    board.place(1, 0, 3)
    assert board.cell(1, 0) == (3, False)
    board.clear(1, 0)
    assert board.value(1, 0) is None


def test_from_grid_accepts_corrupt_givens():
    grid = np.zeros((9, 9), dtype=int)
    grid[0, 1] = 6
    grid[0, 5] = 6
    board = Board.from_grid(grid)

    assert board.is_fixed(1, 0) and board.is_fixed(5, 0)
    assert board.conflicts() == ["Row 0 has duplicate digit 6"]


def test_from_grid_reports_each_kind_of_conflict():
    grid = np.zeros((9, 9), dtype=int)
    grid[0, 0] = 2
    grid[8, 0] = 2  # same column
    grid[4, 4] = 9
    grid[5, 5] = 9  # same box
    notes = Board.from_grid(grid).conflicts()

    assert "Column 0 has duplicate digit 2" in notes
    assert "Box (1, 1) has duplicate digit 9" in notes
    assert not any(note.startswith("Row") for note in notes)


def test_from_grid_with_explicit_mask():
    grid = np.zeros((9, 9), dtype=int)
    grid[0, 0] = 1
    grid[0, 1] = 2
    mask = np.zeros((9, 9), dtype=bool)
    mask[0, 0] = True
    board = Board.from_grid(grid, fixed=mask)

    assert board.cell(0, 0) == (1, True)
    assert board.cell(1, 0) == (2, False)

    mask[3, 3] = True
    with pytest.raises(ValueError):
        Board.from_grid(grid, fixed=mask)


@pytest.mark.parametrize("grid", [np.zeros((9, 8)), np.zeros(81), np.full((9, 9), 10)])
def test_from_grid_rejects_bad_input(grid):
    with pytest.raises(ValueError):
        Board.from_grid(grid)


def test_copy_is_independent():
    board = Board.create_empty()
    clone = board.copy()
    clone.place(3, 3, 3)
    assert board.value(3, 3) is None
    assert clone.value(3, 3) == 3


def test_create_random_places_legal_givens():
    board = Board.create_random(17, np.random.default_rng(2024))

    assert int(board.fixed.sum()) == 17
    assert board.filled_count() == 17
    assert np.all(board.cells[board.fixed] != 0)
    assert np.all(board.cells[~board.fixed] == 0)
    assert board.conflicts() == []


def test_create_random_is_reproducible_under_a_seed():
    a = generate(12, seed=99)
    b = generate(12, rng=np.random.default_rng(99))
    c = generate(12, seed=100)

    np.testing.assert_array_equal(a.cells, b.cells)
    np.testing.assert_array_equal(a.fixed, b.fixed)
    assert not np.array_equal(a.cells, c.cells)


def test_create_random_with_zero_givens_is_empty():
    board = Board.create_random(0, np.random.default_rng(0))
    assert board.filled_count() == 0
    assert not board.fixed.any()


@pytest.mark.parametrize("n_fixed", [-1, 82])
def test_create_random_rejects_impossible_counts(n_fixed):
    with pytest.raises(ValueError):
        Board.create_random(n_fixed, np.random.default_rng(0))


def test_create_random_redraws_taken_positions_and_illegal_digits():
    # position 0 twice (redrawn to 1), digit 5 twice at (1, 0) (redrawn to 6)
    rng = ScriptedRng(positions=[0, 0, 1], digits=[5, 5, 6])
    board = Board.create_random(2, rng)

    assert board.cell(0, 0) == (5, True)
    assert board.cell(1, 0) == (6, True)


def test_create_random_gives_up_after_retry_ceiling():
    # Every draw lands on cell 0, which is taken after the first given
    rng = ScriptedRng(positions=[0], digits=[5])
    with pytest.raises(GenerationError):
        Board.create_random(2, rng, max_retries=3)


def test_create_random_gives_up_when_no_digit_fits():
    # Second given lands in the same row and can only ever draw 5
    rng = ScriptedRng(positions=[0, 1], digits=[5])
    with pytest.raises(GenerationError):
        Board.create_random(2, rng, max_retries=20)
