"""
Entry point for running the stepsudoku module as a package.

Usage:
    python -m stepsudoku --fixed 10 --seed 1
"""

import sys

from .app import main

if __name__ == '__main__':
    sys.exit(main())
