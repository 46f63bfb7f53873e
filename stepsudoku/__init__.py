"""
Step Sudoku - animated backtracking Sudoku solver

This package contains modules for:
- Random puzzle generation and the 9x9 board with its legality checks
- A backtracking solver that advances one search step per call
- Board rendering (terminal text and OpenCV images)
- An interactive / headless driver
"""

from .board import Board, GenerationError, generate
from .solver import SolveState, StepSolver, attach, solve_puzzle

__version__ = "1.0.0"

__all__ = [
    "Board",
    "GenerationError",
    "SolveState",
    "StepSolver",
    "attach",
    "generate",
    "solve_puzzle",
]
