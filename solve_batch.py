#!/usr/bin/env python3
"""
Generate and solve a run of seeded random puzzles and summarise the outcomes.

Usage:
    python solve_batch.py --count 20 --fixed 10 --seed 100
"""

import argparse
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from stepsudoku import GenerationError, SolveState, attach, generate


def solve_batch(count, fixed, seed, max_steps):
    """
    Solve ``count`` puzzles generated from seeds ``seed .. seed + count - 1``.

    Returns:
        dict: seeds grouped under 'solved', 'unsolved', 'limit' and 'error'
    """
    results = {
        'solved': [],
        'unsolved': [],
        'limit': [],
        'error': []
    }

    for i in range(count):
        puzzle_seed = seed + i
        print(f"\n[{i + 1}/{count}] Seed {puzzle_seed}...")

        try:
            board = generate(fixed, seed=puzzle_seed)
        except GenerationError as e:
            print(f"Error generating seed {puzzle_seed}: {e}")
            results['error'].append(puzzle_seed)
            continue

        solver = attach(board)
        state = solver.solve_up_to(max_steps)

        if state is SolveState.SUCCESS:
            print(f"      ✓ Solved in {solver.steps} steps")
            results['solved'].append(puzzle_seed)
        elif state is SolveState.FAILURE:
            print(f"      ✗ No solution ({solver.steps} steps)")
            results['unsolved'].append(puzzle_seed)
        else:
            print(f"      ✗ Stopped at step limit ({max_steps})")
            results['limit'].append(puzzle_seed)

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description='Solve a batch of random puzzles')
    parser.add_argument('--count', '-n', type=int, default=10,
                        help='Number of puzzles (default: 10)')
    parser.add_argument('--fixed', '-f', type=int, default=10,
                        help='Givens per puzzle (default: 10)')
    parser.add_argument('--seed', type=int, default=0,
                        help='First seed (default: 0)')
    parser.add_argument('--max-steps', type=int, default=200000,
                        help='Step limit per puzzle (default: 200000)')
    args = parser.parse_args(argv)

    if args.max_steps < 1:
        parser.error("--max-steps must be at least 1")

    print(f"Solving {args.count} puzzles with {args.fixed} givens")
    print("=" * 60)

    results = solve_batch(args.count, args.fixed, args.seed, args.max_steps)

    # Print summary
    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"✅ Solved:      {len(results['solved'])}/{args.count}")
    print(f"❌ Unsolvable:  {len(results['unsolved'])}/{args.count}")
    print(f"⏱️  Step limit:  {len(results['limit'])}/{args.count}")
    print(f"⚠️  Errors:      {len(results['error'])}/{args.count}")

    if results['solved']:
        print(f"\nSolved seeds: {', '.join(str(s) for s in results['solved'])}")

    return results


if __name__ == '__main__':
    main()
