"""
TSP Tour Engine - Main Application
Build and refine tours for a round of points and compare the strategies.
"""

import argparse
import sys
import time
from typing import List, Optional

from background import BackgroundSolver
from benchmark import DEFAULT_SEED, run_benchmark_all
from data_generator import (
    DIFFICULTY_LEVELS,
    generate_circle_points,
    generate_random_points,
    load_tsp_file,
    points_for_difficulty,
)
from solver_api import ENHANCED, NEAREST_NEIGHBOR, TWO_OPT, solve_all
from tsp_core import Point
from visualization import TourVisualizer


def load_points(args) -> List[Point]:
    if args.tsp_file:
        print(f"\nLoading points from {args.tsp_file}...")
        return load_tsp_file(args.tsp_file)

    if args.difficulty:
        print(f"\nGenerating a '{args.difficulty}' round...")
        return points_for_difficulty(args.difficulty, custom_count=args.cities, seed=args.seed)

    print(f"\nGenerating {args.cities} points in {args.pattern} pattern...")
    if args.pattern == 'circle':
        return generate_circle_points(args.cities, radius=50)
    return generate_random_points(args.cities, width=100, height=100, seed=args.seed)


def compare_strategies(points: List[Point], visualize: bool, save_path: Optional[str], verbose: bool):
    """Run every strategy on the same points and print their lengths."""
    print(f"\n{'='*60}")
    print("TOUR STRATEGY COMPARISON")
    print(f"{'='*60}")
    print(f"Points: {len(points)}")

    start = time.time()
    solutions = solve_all(points, verbose=verbose)
    elapsed = time.time() - start

    baseline = solutions.length(NEAREST_NEIGHBOR)
    for name in solutions.names():
        length = solutions.length(name)
        gain = (baseline - length) / baseline * 100 if baseline > 0 else 0.0
        print(f"  {name:<18} {length:10.2f}   ({gain:5.2f}% shorter than baseline)")

    best_name, _, best_length = solutions.best()
    print(f"\nBest: {best_name} ({best_length:.2f}) in {elapsed:.2f}s")
    print(f"{'='*60}\n")

    if visualize or save_path:
        TourVisualizer().plot_solution_set(solutions, save_path=save_path, show=visualize)

    return solutions


def run_in_background(points: List[Point], strategy: str, verbose: bool):
    """Refine on a worker thread and print progress as it arrives."""
    solver = BackgroundSolver(points, strategy=strategy, verbose=verbose).start()

    while True:
        finished = solver.join(timeout=0.05)
        for update in solver.poll():
            if update['type'] == 'progress':
                print(f"  move {update['iteration']:4d}: {update['distance']:.2f}")
            elif update['type'] in ('done', 'cancelled'):
                print(f"[{strategy}] {update['type']}: {update['distance']:.2f} "
                      f"after {update['time']:.2f}s")
        if finished:
            break

    return solver.result()


def main(argv=None) -> int:
    """Main entry point for the tour engine."""
    parser = argparse.ArgumentParser(
        description="TSP Tour Engine - nearest neighbor, 2-opt and enhanced local search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare strategies on 30 random points
  python main.py --cities 30

  # A 'hard' game round, no windows
  python main.py --difficulty hard --no-viz

  # Enhanced search on a worker thread with progress output
  python main.py --cities 80 --background --no-viz

  # Benchmark every strategy
  python main.py --benchmark --runs 5
        """
    )

    parser.add_argument('--cities', type=int, default=30,
                        help='Number of points to generate (default: 30)')
    parser.add_argument('--difficulty', type=str,
                        choices=list(DIFFICULTY_LEVELS) + ['custom'],
                        help='Game difficulty preset (custom uses --cities)')
    parser.add_argument('--pattern', type=str, choices=['random', 'circle'], default='random',
                        help='Point placement pattern (default: random)')
    parser.add_argument('--tsp-file', type=str, help='Load points from a TSPLIB file')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--background', action='store_true',
                        help='Refine on a worker thread and stream progress')
    parser.add_argument('--strategy', type=str, choices=[TWO_OPT, ENHANCED], default=ENHANCED,
                        help='Strategy used with --background (default: enhanced)')
    parser.add_argument('--benchmark', action='store_true',
                        help='Benchmark every strategy on random instances')
    parser.add_argument('--runs', type=int, default=10,
                        help='Runs per size for --benchmark (default: 10)')
    parser.add_argument('--no-viz', action='store_true', help='Disable visualizations')
    parser.add_argument('--save-path', type=str, help='Save the comparison plot here')
    parser.add_argument('--verbose', action='store_true', help='Print solver progress')

    args = parser.parse_args(argv)

    if args.benchmark:
        run_benchmark_all(runs=args.runs, seed=args.seed if args.seed is not None else DEFAULT_SEED)
        return 0

    try:
        points = load_points(args)
        if args.background:
            run_in_background(points, args.strategy, args.verbose)
        else:
            compare_strategies(points, visualize=not args.no_viz, save_path=args.save_path,
                               verbose=args.verbose)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
