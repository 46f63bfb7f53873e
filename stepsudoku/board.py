"""
Sudoku board state: 81 cells, given/mutable marking and the three legality checks.

Cells are addressed by (column, row) with both coordinates in 0..8 and stored
in a flat numpy array at index ``column + row * 9``. A value of 0 marks an
empty cell; the public accessors report empty cells as ``None``.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .config import MAX_GENERATION_RETRIES

SIZE = 9
BOX = 3
CELL_COUNT = SIZE * SIZE


class GenerationError(RuntimeError):
    """Raised when random generation runs out of retries for a given."""


def to_index(col: int, row: int) -> int:
    """Linear index of the cell at (col, row)."""
    if not (0 <= col < SIZE and 0 <= row < SIZE):
        raise ValueError(f"Cell ({col}, {row}) is outside the 9x9 grid")
    return col + row * SIZE


def to_coords(index: int) -> Tuple[int, int]:
    """(col, row) of a linear cell index."""
    if not 0 <= index < CELL_COUNT:
        raise ValueError(f"Cell index {index} is outside 0..{CELL_COUNT - 1}")
    return index % SIZE, index // SIZE


def check_digit(value: int) -> None:
    if not 1 <= value <= SIZE:
        raise ValueError(f"Digit {value} is outside 1..9")


class Board:
    """
    A 9x9 puzzle with fixed (given) cells and mutable cells.

    The board knows nothing about searching; it only stores digits and
    answers whether a digit may go into a cell given the other filled cells.
    """

    def __init__(self, cells: Optional[np.ndarray] = None, fixed: Optional[np.ndarray] = None):
        self.cells = np.zeros(CELL_COUNT, dtype=np.int8) if cells is None else cells
        self.fixed = np.zeros(CELL_COUNT, dtype=bool) if fixed is None else fixed
        # [row, col] view sharing memory with self.cells
        self._grid = self.cells.reshape(SIZE, SIZE)

    @classmethod
    def create_empty(cls) -> "Board":
        return cls()

    @classmethod
    def create_random(cls, n_fixed: int, rng: np.random.Generator,
                      max_retries: Optional[int] = MAX_GENERATION_RETRIES) -> "Board":
        """
        Build a board with ``n_fixed`` givens at random positions.

        Positions are drawn uniformly from all 81 cells, redrawing any cell
        that is already a given. Each given gets a uniformly random digit,
        redrawn until it is legal against the givens placed so far.

        Args:
            n_fixed: Number of givens (0..81)
            rng: Random source, e.g. ``np.random.default_rng(seed)``
            max_retries: Redraws allowed for a single given before giving up.
                ``None`` retries forever.

        Raises:
            ValueError: if n_fixed is outside 0..81
            GenerationError: if a given exhausts its retries
        """
        if not 0 <= n_fixed <= CELL_COUNT:
            raise ValueError(f"n_fixed must be within 0..{CELL_COUNT}, got {n_fixed}")

        board = cls.create_empty()

        for placed in range(n_fixed):
            redraws = 0

            index = int(rng.integers(0, CELL_COUNT))
            while board.fixed[index]:
                redraws += 1
                if max_retries is not None and redraws > max_retries:
                    raise GenerationError(f"No free cell found for given {placed + 1} of {n_fixed}")
                index = int(rng.integers(0, CELL_COUNT))

            col, row = to_coords(index)
            value = int(rng.integers(1, SIZE + 1))
            while not board.is_legal(col, row, value):
                redraws += 1
                if max_retries is not None and redraws > max_retries:
                    raise GenerationError(
                        f"No legal digit found for cell ({col}, {row}) "
                        f"after {max_retries} retries (given {placed + 1} of {n_fixed})"
                    )
                value = int(rng.integers(1, SIZE + 1))

            board.cells[index] = value
            board.fixed[index] = True

        return board

    @classmethod
    def from_grid(cls, grid, fixed=None) -> "Board":
        """
        Build a board from a 9x9 array indexed ``[row, col]`` (0 = empty).

        Non-zero cells become givens unless an explicit boolean ``fixed`` mask
        is supplied. The digits are not checked against each other, so this
        can build boards that no search will complete.
        """
        grid = np.asarray(grid)
        if grid.shape != (SIZE, SIZE):
            raise ValueError(f"Expected a 9x9 grid, got shape {grid.shape}")
        if grid.min() < 0 or grid.max() > SIZE:
            raise ValueError("Grid digits must be within 0..9")

        cells = grid.astype(np.int8).reshape(CELL_COUNT).copy()
        if fixed is None:
            mask = cells != 0
        else:
            mask = np.asarray(fixed, dtype=bool)
            if mask.shape != (SIZE, SIZE):
                raise ValueError(f"Expected a 9x9 fixed mask, got shape {mask.shape}")
            mask = mask.reshape(CELL_COUNT).copy()
            if np.any(mask & (cells == 0)):
                raise ValueError("Fixed cells must hold a digit")

        return cls(cells, mask)

    def copy(self) -> "Board":
        return Board(self.cells.copy(), self.fixed.copy())

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------

    def row_legal(self, col: int, row: int, value: int) -> bool:
        """False if ``value`` sits in another cell of the row."""
        to_index(col, row)
        matches = self._grid[row, :] == value
        matches[col] = False
        return not matches.any()

    def column_legal(self, col: int, row: int, value: int) -> bool:
        """False if ``value`` sits in another cell of the column."""
        to_index(col, row)
        matches = self._grid[:, col] == value
        matches[row] = False
        return not matches.any()

    def box_legal(self, col: int, row: int, value: int) -> bool:
        """False if ``value`` sits in another cell of the 3x3 box."""
        to_index(col, row)
        r0 = (row // BOX) * BOX
        c0 = (col // BOX) * BOX
        matches = self._grid[r0:r0 + BOX, c0:c0 + BOX] == value
        matches[row - r0, col - c0] = False
        return not matches.any()

    def is_legal(self, col: int, row: int, value: int) -> bool:
        return (self.row_legal(col, row, value)
                and self.column_legal(col, row, value)
                and self.box_legal(col, row, value))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def value(self, col: int, row: int) -> Optional[int]:
        v = int(self.cells[to_index(col, row)])
        return v if v != 0 else None

    def is_fixed(self, col: int, row: int) -> bool:
        return bool(self.fixed[to_index(col, row)])

    def cell(self, col: int, row: int) -> Tuple[Optional[int], bool]:
        return self.value(col, row), self.is_fixed(col, row)

    def iter_cells(self) -> Iterator[Tuple[int, int, Optional[int], bool]]:
        """Yield (col, row, value, is_fixed) for every cell in row-major order."""
        for index in range(CELL_COUNT):
            col, row = to_coords(index)
            v = int(self.cells[index])
            yield col, row, (v if v != 0 else None), bool(self.fixed[index])

    def to_grid(self) -> np.ndarray:
        """Copy of the digits as a 9x9 array indexed [row, col], 0 = empty."""
        return self._grid.copy()

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def is_complete(self) -> bool:
        return self.filled_count() == CELL_COUNT

    def conflicts(self) -> List[str]:
        """Describe every duplicated digit in a row, column or box (empty if legal)."""
        notes = []
        for i in range(SIZE):
            for label, values in (("Row", self._grid[i, :]), ("Column", self._grid[:, i])):
                for d in _duplicates(values):
                    notes.append(f"{label} {i} has duplicate digit {d}")

        for br in range(BOX):
            for bc in range(BOX):
                block = self._grid[br * BOX:(br + 1) * BOX, bc * BOX:(bc + 1) * BOX]
                for d in _duplicates(block.ravel()):
                    notes.append(f"Box ({bc}, {br}) has duplicate digit {d}")

        return notes

    # ------------------------------------------------------------------
    # Mutation (search only)
    # ------------------------------------------------------------------

    def place(self, col: int, row: int, value: int) -> None:
        index = to_index(col, row)
        check_digit(value)
        if self.fixed[index]:
            raise ValueError(f"Cell ({col}, {row}) is a given and cannot be changed")
        self.cells[index] = value

    def clear(self, col: int, row: int) -> None:
        index = to_index(col, row)
        if self.fixed[index]:
            raise ValueError(f"Cell ({col}, {row}) is a given and cannot be cleared")
        self.cells[index] = 0


def _duplicates(values: np.ndarray) -> List[int]:
    digits, counts = np.unique(values[values != 0], return_counts=True)
    return [int(d) for d in digits[counts > 1]]


def generate(fixed_count: int, rng: Optional[np.random.Generator] = None,
             seed: Optional[int] = None) -> Board:
    """Random puzzle with ``fixed_count`` givens; seed or pass ``rng`` for reproducible boards."""
    if rng is None:
        rng = np.random.default_rng(seed)
    return Board.create_random(fixed_count, rng)
