import os
import time
import numpy as np
import pandas as pd
from tqdm import tqdm

from data_generator import generate_random_points
from enhanced_search import EnhancedLocalSearch
from nearest_neighbor import NearestNeighborConstructor
from solver_api import ENHANCED, NEAREST_NEIGHBOR, STRATEGIES, TWO_OPT
from tsp_core import DistanceMatrix
from two_opt import TwoOptSearch


# ================================
# CONFIGURATION
# ================================
OUTPUT_DIR = "benchmarks_full"
SIZES = (10, 15, 25, 40, 60, 100)
RUNS_PER_SIZE = 10
DEFAULT_SEED = 5150


# =============================================================
# SINGLE INSTANCE
# =============================================================
def run_instance(points, verbose=False):
    """Run every strategy on one point set; returns {strategy: (length, seconds)}."""
    matrix = DistanceMatrix(points)
    out = {}

    start = time.time()
    baseline = NearestNeighborConstructor(points, distance_matrix=matrix).construct(verbose=verbose)
    out[NEAREST_NEIGHBOR] = (matrix.tour_length(baseline.order), time.time() - start)

    start = time.time()
    two_opt = TwoOptSearch(points, distance_matrix=matrix).solve(baseline.clone(), verbose=verbose)
    out[TWO_OPT] = (matrix.tour_length(two_opt.order), time.time() - start)

    start = time.time()
    enhanced = EnhancedLocalSearch(points, distance_matrix=matrix).solve(baseline.clone(), verbose=verbose)
    out[ENHANCED] = (matrix.tour_length(enhanced.order), time.time() - start)

    return out


# =============================================================
# STRATEGY COMPARISON
# =============================================================
def benchmark_strategies(sizes=SIZES, runs=RUNS_PER_SIZE, seed=DEFAULT_SEED, progress=True):
    rows = []
    rng = np.random.default_rng(seed)

    for n in sizes:
        for run in tqdm(range(runs), desc=f"n={n}", disable=not progress):
            points = generate_random_points(n, seed=int(rng.integers(0, 2**31 - 1)))
            results = run_instance(points)
            baseline = results[NEAREST_NEIGHBOR][0]

            for strategy in STRATEGIES:
                length, elapsed = results[strategy]
                improvement = (baseline - length) / baseline * 100 if baseline > 0 else 0.0
                rows.append({
                    "n_cities": n,
                    "run": run,
                    "strategy": strategy,
                    "length": float(length),
                    "time": float(elapsed),
                    "improvement_pct": float(improvement),
                })

    return pd.DataFrame(rows)


def summarize(df):
    """Mean/min/std of length, mean time and improvement per size and strategy."""
    summary = (
        df.groupby(["n_cities", "strategy"])
        .agg(
            avg_length=("length", "mean"),
            best_length=("length", "min"),
            std_length=("length", "std"),
            avg_time=("time", "mean"),
            avg_improvement_pct=("improvement_pct", "mean"),
        )
        .reset_index()
    )
    return summary.fillna({"std_length": 0.0})


def save_results(df, output_dir=OUTPUT_DIR):
    os.makedirs(output_dir, exist_ok=True)

    raw_path = os.path.join(output_dir, "strategy_runs.csv")
    summary_path = os.path.join(output_dir, "strategy_summary.csv")

    df.to_csv(raw_path, index=False)
    summarize(df).to_csv(summary_path, index=False)

    print("\nSaved:")
    print(f" - {raw_path}")
    print(f" - {summary_path}")
    return raw_path, summary_path


# =============================================================
# MAIN
# =============================================================
def run_benchmark_all(sizes=SIZES, runs=RUNS_PER_SIZE, seed=DEFAULT_SEED, output_dir=OUTPUT_DIR):
    print("\n" + "*" * 30)
    print(f"Strategy benchmark: sizes={list(sizes)}, runs={runs}, seed={seed}")
    print("*" * 30)

    df = benchmark_strategies(sizes=sizes, runs=runs, seed=seed)

    print("\n=== Average length per strategy (lower = better) ===")
    print(summarize(df).sort_values(by=["n_cities", "avg_length"]).to_string(index=False))

    save_results(df, output_dir)
    print("\n=== Done. ===")
    return df


if __name__ == "__main__":
    run_benchmark_all()
