"""
Default settings for the solver window and the command-line driver.

Every value here is only a default: the command-line flags in `app.py`
override them per run.
"""

WINDOW_TITLE = "Sudoku Solver"
WINDOW_SIZE = 450  # pixels, square

# Text rendering (cv2.putText)
FONT_SCALE = 0.9
FONT_THICKNESS = 2

# BGR colours
BACKGROUND_COLOR = (255, 255, 255)
FIXED_COLOR = (255, 0, 0)      # blue - givens
SEARCH_COLOR = (0, 0, 0)       # black - digits placed by the search
GRID_COLOR = (0, 0, 0)
CURSOR_COLOR = (0, 215, 255)   # amber highlight under the cursor

# Puzzle generation
DEFAULT_FIXED = 10
MAX_GENERATION_RETRIES = 10000

# Frame pacing
FRAME_DELAY_MS = 16
STEPS_PER_FRAME = 1
GIF_FRAME_MS = 40
