#!/usr/bin/env python3
"""
Convenience script to open the animated solver.

Usage:
    python animate_puzzle.py
    python animate_puzzle.py --fixed 17 --seed 42 --run
"""

import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from stepsudoku.app import main

if __name__ == '__main__':
    sys.exit(main())
