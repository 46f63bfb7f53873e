"""
Step Sudoku - interactive and headless driver

Generates a random puzzle and animates the backtracking search in an OpenCV
window, one search step (or a batch of steps) per frame.
"""

import argparse
import os
import sys

import cv2
import numpy as np
from PIL import Image

from .board import CELL_COUNT, Board, GenerationError
from .config import (
    DEFAULT_FIXED,
    FRAME_DELAY_MS,
    GIF_FRAME_MS,
    STEPS_PER_FRAME,
    WINDOW_SIZE,
    WINDOW_TITLE,
)
from .render import format_board, render_board, render_status
from .solver import SolveState, attach

KEY_SPACE = 32
KEY_ESC = 27
# cv2.waitKeyEx codes for the right arrow differ per backend (GTK, Windows, Cocoa)
KEYS_RIGHT = {65363, 2555904, 63235}
KEYS_STEP = KEYS_RIGHT | {ord('n')}
KEYS_QUIT = {KEY_ESC, ord('q')}
KEY_NEW = ord('r')


class FrameRecorder:
    """
    Collects rendered frames as numbered PNG files and/or one animated GIF.
    """

    def __init__(self, frames_dir=None, gif_path=None, frame_ms=GIF_FRAME_MS):
        self.frames_dir = frames_dir
        self.gif_path = gif_path
        self.frame_ms = frame_ms
        self.count = 0
        self._gif_frames = []

        if frames_dir:
            os.makedirs(frames_dir, exist_ok=True)

    @property
    def active(self):
        return bool(self.frames_dir or self.gif_path)

    def add(self, frame: np.ndarray) -> None:
        if not self.active:
            return
        self.count += 1
        if self.frames_dir:
            cv2.imwrite(os.path.join(self.frames_dir, f"frame_{self.count:05d}.png"), frame)
        if self.gif_path:
            self._gif_frames.append(Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)))

    def close(self) -> None:
        if self.frames_dir:
            print(f"Saved {self.count} frames to: {self.frames_dir}/")

        if self.gif_path and self._gif_frames:
            parent = os.path.dirname(self.gif_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            first, rest = self._gif_frames[0], self._gif_frames[1:]
            first.save(
                self.gif_path,
                save_all=True,
                append_images=rest,
                duration=self.frame_ms,
                loop=0,
                optimize=False,
            )
            print(f"Wrote {self.gif_path} with {len(self._gif_frames)} frames.")
            self._gif_frames = []


class SolverApp:
    """
    Owns the current puzzle and its solver, and drives the search.

    A new puzzle replaces the solver entirely; the old search state is
    never reused.
    """

    def __init__(self, fixed=DEFAULT_FIXED, seed=None, size=WINDOW_SIZE,
                 steps_per_frame=STEPS_PER_FRAME, verbose=False, recorder=None):
        """
        Args:
            fixed (int): Number of givens in each generated puzzle
            seed (int): Seed for the puzzle generator (None = fresh entropy)
            size (int): Window / frame size in pixels
            steps_per_frame (int): Search steps run per animation frame
            verbose (bool): Print every search step
            recorder (FrameRecorder): Optional sink for rendered frames
        """
        self.fixed = fixed
        self.size = size
        self.steps_per_frame = steps_per_frame
        self.verbose = verbose
        self.recorder = recorder or FrameRecorder()
        self.rng = np.random.default_rng(seed)
        self.solver = None
        self.state = SolveState.IN_PROGRESS
        self.new_puzzle()

    def new_puzzle(self):
        board = Board.create_random(self.fixed, self.rng)
        self.solver = attach(board, verbose=self.verbose)
        self.state = SolveState.IN_PROGRESS
        return board

    @property
    def board(self) -> Board:
        return self.solver.board

    def advance(self, steps=None) -> SolveState:
        """Run one frame's worth of search steps."""
        if self.solver.finished:
            return self.state
        self.state = self.solver.solve_up_to(steps or self.steps_per_frame)
        return self.state

    def status_line(self) -> str:
        labels = {
            SolveState.SUCCESS: "solved",
            SolveState.FAILURE: "no solution",
            SolveState.IN_PROGRESS: "searching",
        }
        col, row = self.solver.cursor
        return f"steps: {self.solver.steps}  cursor: ({col}, {row})  {labels[self.state]}"

    def frame(self) -> np.ndarray:
        cursor = None if self.solver.finished else self.solver.cursor
        image = render_board(self.board, self.size, cursor=cursor)
        return render_status(image, self.status_line())

    def _record(self):
        if self.recorder.active:
            self.recorder.add(self.frame())

    def run_headless(self, max_steps) -> SolveState:
        """
        Solve in the terminal, stopping after ``max_steps`` steps.

        Returns:
            SolveState: SUCCESS, FAILURE, or IN_PROGRESS when the limit was hit
        """
        print(f"\n{'='*60}")
        print(f"Puzzle with {self.fixed} givens:")
        print(f"{'='*60}")
        print(format_board(self.board))

        self._record()
        while self.solver.steps < max_steps:
            budget = min(self.steps_per_frame, max_steps - self.solver.steps)
            state = self.advance(budget)
            self._record()
            if state is not SolveState.IN_PROGRESS:
                break
        self.recorder.close()

        print()
        if self.state is SolveState.SUCCESS:
            print(f"✓ Solved in {self.solver.steps} steps:")
            print(format_board(self.board))
        elif self.state is SolveState.FAILURE:
            print(f"✗ No solution (search exhausted after {self.solver.steps} steps)")
        else:
            print(f"✗ Stopped after {self.solver.steps} steps (limit {max_steps})")
            print(format_board(self.board))
        return self.state

    def run_window(self, delay=FRAME_DELAY_MS, start_running=False):
        """
        Show the search in a window until the user quits.

        Space pauses/resumes, the right arrow (or n) runs a single frame,
        r generates a new puzzle and q / Esc quits. A running search pauses
        on its own once it is solved or exhausted.
        """
        paused = not start_running
        next_step = False
        changed = True

        cv2.namedWindow(WINDOW_TITLE, cv2.WINDOW_AUTOSIZE)

        while True:
            if not paused or next_step:
                next_step = False
                changed = not self.solver.finished
                if self.advance() is not SolveState.IN_PROGRESS:
                    paused = True

            image = self.frame()
            cv2.imshow(WINDOW_TITLE, image)
            # paused frames repeat the last one
            if changed:
                self.recorder.add(image)
                changed = False

            key = cv2.waitKeyEx(delay)
            if key in KEYS_QUIT:
                break
            if key == KEY_SPACE:
                paused = not paused
            elif key in KEYS_STEP:
                next_step = True
            elif key == KEY_NEW:
                self.new_puzzle()
                paused = True
                changed = True
                print("New puzzle:")
                print(format_board(self.board))

            if cv2.getWindowProperty(WINDOW_TITLE, cv2.WND_PROP_VISIBLE) < 1:
                break

        cv2.destroyAllWindows()
        self.recorder.close()


def build_parser():
    parser = argparse.ArgumentParser(
        description='Step Sudoku - animated backtracking solver',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Open the window (Space = run/pause, Right = single step, r = new, q = quit):
    python -m stepsudoku

  Reproducible puzzle with 17 givens, 50 steps per frame:
    python -m stepsudoku --fixed 17 --seed 42 --steps-per-frame 50 --run

  Solve in the terminal and save an animated GIF:
    python -m stepsudoku --headless --seed 3 --steps-per-frame 20 --gif out/search.gif
        """
    )

    parser.add_argument('--fixed', '-f', type=int, default=DEFAULT_FIXED,
                        help=f'Number of givens in the generated puzzle (default: {DEFAULT_FIXED})')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for puzzle generation')
    parser.add_argument('--size', '-s', type=int, default=WINDOW_SIZE,
                        help=f'Window size in pixels (default: {WINDOW_SIZE})')
    parser.add_argument('--delay', type=int, default=FRAME_DELAY_MS,
                        help=f'Milliseconds per frame (default: {FRAME_DELAY_MS})')
    parser.add_argument('--steps-per-frame', type=int, default=STEPS_PER_FRAME,
                        help=f'Search steps per frame (default: {STEPS_PER_FRAME})')
    parser.add_argument('--run', action='store_true',
                        help='Start the search unpaused')
    parser.add_argument('--headless', action='store_true',
                        help='Solve in the terminal without opening a window')
    parser.add_argument('--max-steps', type=int, default=1000000,
                        help='Step limit for --headless (default: 1000000)')
    parser.add_argument('--frames-dir', default=None,
                        help='Save every rendered frame as PNG into this directory')
    parser.add_argument('--gif', default=None,
                        help='Save the rendered frames as an animated GIF')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print every search step')
    return parser


def main(argv=None):
    """
    Main entry point for the Step Sudoku application.

    Returns:
        int: process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not 0 <= args.fixed <= CELL_COUNT:
        parser.error(f"--fixed must be between 0 and {CELL_COUNT}")
    if args.steps_per_frame < 1:
        parser.error("--steps-per-frame must be at least 1")
    if args.max_steps < 1:
        parser.error("--max-steps must be at least 1")
    if args.size < 90:
        parser.error("--size must be at least 90 pixels")

    recorder = FrameRecorder(frames_dir=args.frames_dir, gif_path=args.gif)

    try:
        app = SolverApp(
            fixed=args.fixed,
            seed=args.seed,
            size=args.size,
            steps_per_frame=args.steps_per_frame,
            verbose=args.verbose,
            recorder=recorder,
        )
    except GenerationError as e:
        print(f"Error: could not generate a puzzle: {e}")
        return 1

    if args.headless:
        state = app.run_headless(args.max_steps)
        return 0 if state is SolveState.SUCCESS else 1

    app.run_window(delay=args.delay, start_running=args.run)
    return 0


if __name__ == '__main__':
    sys.exit(main())
