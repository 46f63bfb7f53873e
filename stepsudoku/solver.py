"""
Step-wise backtracking solver.

Each call to `StepSolver.step` performs exactly one unit of search work:
place a digit and move forward, skip a given and move forward, or undo the
previous placement and move back. Between calls the board and cursor are a
consistent snapshot, so the caller decides how fast the search runs.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from .board import SIZE, CELL_COUNT, Board, check_digit, to_coords, to_index

ORIGIN = (0, 0)
LAST_CELL = (SIZE - 1, SIZE - 1)


class SolveState(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    IN_PROGRESS = "in_progress"


class StepSolver:
    """
    Depth-first search over one board, one cell per step.

    The cursor scans cells in row-major order. ``resume_value[i]`` is the next
    digit to try at cell ``i`` when the search comes back to it, so digits
    already ruled out there are never retried until the cell is reached
    fresh again.
    """

    def __init__(self, board: Board, verbose: bool = False):
        self.board = board
        self.cursor = ORIGIN
        self.resume_value = np.ones(CELL_COUNT, dtype=np.int8)
        self.steps = 0
        self.exhausted = False
        self.verbose = verbose

    @property
    def solved(self) -> bool:
        return self.cursor == LAST_CELL and self.board.value(*LAST_CELL) is not None

    @property
    def finished(self) -> bool:
        return self.solved or self.exhausted

    def attempt_place(self, col: int, row: int, value: int) -> SolveState:
        """Write ``value`` into an empty cell if all three constraints allow it."""
        check_digit(value)
        board = self.board
        if board.value(col, row) is not None or not board.is_legal(col, row, value):
            return SolveState.FAILURE

        board.place(col, row, value)
        return SolveState.SUCCESS

    def _advance(self):
        col, row = self.cursor
        self.cursor = (0, row + 1) if col == SIZE - 1 else (col + 1, row)

    def _retreat(self) -> bool:
        """Move back to the nearest earlier mutable cell. False if there is none."""
        index = to_index(*self.cursor) - 1
        while index >= 0 and self.board.fixed[index]:
            index -= 1

        if index < 0:
            self.cursor = ORIGIN
            return False

        self.cursor = to_coords(index)
        return True

    def step(self) -> SolveState:
        """Run one unit of the search and report where it stands."""
        if self.exhausted:
            return SolveState.FAILURE

        self.steps += 1
        col, row = self.cursor
        index = to_index(col, row)

        if self.verbose:
            print(f"{self.cursor}, resume value: {self.resume_value[index]}")

        if self.cursor == LAST_CELL and self.board.cells[index] != 0:
            return SolveState.SUCCESS

        if self.board.fixed[index]:
            self._advance()
            return SolveState.IN_PROGRESS

        for value in range(int(self.resume_value[index]), SIZE + 1):
            if self.attempt_place(col, row, value) is SolveState.SUCCESS:
                if self.verbose:
                    print(f"Added {value} to {self.cursor}")
                self.resume_value[index] = value + 1

                if self.cursor == LAST_CELL:
                    return SolveState.SUCCESS

                self._advance()
                return SolveState.IN_PROGRESS

        # Dead end: this cell starts from 1 next time it is reached going forward.
        self.resume_value[index] = 1

        if not self._retreat():
            self.exhausted = True
            if self.verbose:
                print("Search exhausted: no earlier placement left to retry")
            return SolveState.FAILURE

        self.board.clear(*self.cursor)
        return SolveState.FAILURE

    def solve(self) -> SolveState:
        """Step until the board is complete or the whole search space is spent."""
        while True:
            state = self.step()
            if state is SolveState.SUCCESS:
                return state
            if state is SolveState.FAILURE and self.exhausted:
                return state

    def solve_up_to(self, max_steps: int) -> SolveState:
        """Like `solve`, but hand control back after ``max_steps`` steps."""
        if max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {max_steps}")

        for _ in range(max_steps):
            state = self.step()
            if state is SolveState.SUCCESS:
                return state
            if state is SolveState.FAILURE and self.exhausted:
                return state

        return SolveState.IN_PROGRESS


def attach(board: Board, verbose: bool = False) -> StepSolver:
    return StepSolver(board, verbose=verbose)


def solve_puzzle(grid: np.ndarray, max_steps: int = 200000) -> tuple[np.ndarray | None, str]:
    """
    Return a solved copy of a 9x9 grid, or (None, reason).

    Non-zero digits are treated as givens. The search is capped at
    ``max_steps`` steps to avoid runaway searches on hard or broken inputs.
    """
    board = Board.from_grid(grid)
    solver = StepSolver(board)
    state = solver.solve_up_to(max_steps)

    if state is SolveState.SUCCESS:
        return board.to_grid(), f"Solved in {solver.steps} steps"
    if state is SolveState.IN_PROGRESS:
        return None, f"Stopped after {solver.steps} steps (limit {max_steps})"
    return None, "No solution found"
