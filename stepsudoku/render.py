"""
Board rendering for the terminal and for the OpenCV window.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from .board import BOX, SIZE, Board
from .config import (
    BACKGROUND_COLOR,
    CURSOR_COLOR,
    FIXED_COLOR,
    FONT_SCALE,
    FONT_THICKNESS,
    GRID_COLOR,
    SEARCH_COLOR,
    WINDOW_SIZE,
)


def format_board(board: Board) -> str:
    """Render the 9x9 board as a human-friendly string."""
    grid = board.to_grid()
    lines = []
    for r, row in enumerate(grid):
        parts = []
        for c, val in enumerate(row):
            parts.append(str(val) if val != 0 else ".")
            if c in {2, 5}:
                parts.append("|")
        line = " ".join(parts)
        lines.append(line)
        if r in {2, 5}:
            lines.append("-" * len(line))
    return "\n".join(lines)


def render_board(board: Board, size: int = WINDOW_SIZE,
                 cursor: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Draw the board onto a square BGR image.

    Givens are drawn in the fixed colour, digits placed by the search in the
    search colour. Box borders are drawn thicker than cell borders. When
    ``cursor`` is given, that cell is shaded to show where the search stands.

    Args:
        board: Board to draw
        size: Width and height of the output image in pixels
        cursor: (col, row) of the cell to highlight, or None

    Returns:
        numpy.ndarray: size x size x 3 uint8 image
    """
    canvas = np.full((size, size, 3), BACKGROUND_COLOR, dtype=np.uint8)
    cell = size // SIZE
    font = cv2.FONT_HERSHEY_SIMPLEX

    if cursor is not None:
        cx, cy = cursor
        cv2.rectangle(canvas, (cx * cell, cy * cell), ((cx + 1) * cell, (cy + 1) * cell),
                      CURSOR_COLOR, -1)

    for col, row, val, fixed in board.iter_cells():
        if val is None:
            continue
        color = FIXED_COLOR if fixed else SEARCH_COLOR
        text = str(val)
        text_size, _ = cv2.getTextSize(text, font, FONT_SCALE, FONT_THICKNESS)
        x = col * cell + (cell - text_size[0]) // 2
        y = row * cell + (cell + text_size[1]) // 2
        cv2.putText(canvas, text, (x, y), font, FONT_SCALE, color, FONT_THICKNESS, cv2.LINE_AA)

    for i in range(SIZE + 1):
        thickness = 3 if i % BOX == 0 else 1
        pos = min(i * cell, size - 1)
        cv2.line(canvas, (0, pos), (size - 1, pos), GRID_COLOR, thickness)
        cv2.line(canvas, (pos, 0), (pos, size - 1), GRID_COLOR, thickness)

    return canvas


def render_status(image: np.ndarray, text: str) -> np.ndarray:
    """Return a copy of ``image`` with a status band underneath."""
    band_height = 30
    h, w = image.shape[:2]
    canvas = np.full((h + band_height, w, 3), BACKGROUND_COLOR, dtype=np.uint8)
    canvas[:h] = image
    cv2.putText(canvas, text, (8, h + 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                GRID_COLOR, 1, cv2.LINE_AA)
    return canvas
