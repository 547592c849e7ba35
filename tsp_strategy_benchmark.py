#!/usr/bin/env python3
"""
Euclidean TSP Strategy Benchmark

Runs every strategy on the same seeded random instances and compares them:
1. Samples one node set per (size, run) pair
2. Runs brute force (when the size allows), nearest neighbor, annealing and hill climbing
3. Measures each strategy's gap to the brute-force optimum of that instance

Outputs (in results/strategy_benchmark by default):
  strategy_results.csv   (one row per strategy run)
  strategy_summary.csv   (mean/std/median gap and time per size and method)
  strategy_results.json  (raw records)

Example:
  python tsp_strategy_benchmark.py --sizes 5,7,9 --runs 5 --iterations 5000
"""

import argparse
import json
import os
from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Optional

import pandas as pd

from euclid_tsp import METHODS, AnnealingConfig, parse_methods, random_nodes, solve_euclid_tsp


@dataclass
class RunRecord:
    """One strategy run on one sampled instance"""
    n: int
    run: int
    seed: int
    method: str
    cost: float
    runtime: float
    improvements: int
    gap_percent: Optional[float] = None


def gap_percent(cost: float, optimum: Optional[float]) -> Optional[float]:
    if optimum is None:
        return None
    if optimum == 0:
        return 0.0 if cost == 0 else None
    return (cost - optimum) / optimum * 100


def run_strategy_benchmark(sizes: List[int], methods: List[str], runs: int = 3, seed_offset: int = 0,
                           config: Optional[AnnealingConfig] = None, max_brute_n: int = 9,
                           out_dir: Optional[str] = "results/strategy_benchmark") -> List[RunRecord]:
    """Run all configurations; write result files when out_dir is given."""
    if config is None:
        config = AnnealingConfig()
    config.validate()
    if runs <= 0:
        raise ValueError(f"runs must be positive, got {runs}")

    print(f"Running strategy benchmark on sizes {sizes}")
    print(f"Methods: {methods}")
    print(f"Runs per size: {runs}")

    records: List[RunRecord] = []
    for n in sizes:
        print(f"\nSize {n}")
        for run in range(runs):
            seed = seed_offset + run
            nodes = random_nodes(n, seed=seed)

            # Brute force goes first so the other methods can report a gap
            ordered = sorted(methods, key=lambda m: m != 'brute')
            optimum: Optional[float] = None
            for method in ordered:
                if method == 'brute' and n > max_brute_n:
                    print(f"  [info] Run {run + 1}: skipping brute force (n={n} > {max_brute_n})")
                    continue
                try:
                    sol = solve_euclid_tsp(nodes, method=method, seed=seed, config=config, fix_first=True)
                except ValueError as e:
                    print(f"  [warn] Run {run + 1} {method}: {e}")
                    continue
                if method == 'brute':
                    optimum = sol.cost
                rec = RunRecord(n=n, run=run + 1, seed=seed, method=method, cost=sol.cost,
                                runtime=sol.runtime, improvements=sol.improvements,
                                gap_percent=gap_percent(sol.cost, optimum))
                records.append(rec)
                gap_str = f" (gap: {rec.gap_percent:.2f}%)" if rec.gap_percent is not None else ""
                print(f"    Run {run + 1} {method}: {sol.cost:.4f} in {sol.runtime:.4f}s{gap_str}")

    if out_dir:
        write_results(records, out_dir)
    return records


def records_frame(records: List[RunRecord]) -> pd.DataFrame:
    columns = [f.name for f in fields(RunRecord)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Per (n, method) statistics of gap and runtime"""
    if df.empty:
        return pd.DataFrame(columns=['n', 'method', 'mean_cost', 'mean_gap', 'std_gap', 'median_gap',
                                     'mean_time', 'std_time', 'count'])
    df = df.copy()
    df['gap_percent'] = pd.to_numeric(df['gap_percent'], errors='coerce')
    summary = df.groupby(['n', 'method']).agg({
        'cost': ['mean'],
        'gap_percent': ['mean', 'std', 'median'],
        'runtime': ['mean', 'std'],
        'run': ['count'],
    }).round(6)
    summary.columns = ['_'.join(col).strip() for col in summary.columns.values]
    summary = summary.rename(columns={
        'cost_mean': 'mean_cost',
        'gap_percent_mean': 'mean_gap',
        'gap_percent_std': 'std_gap',
        'gap_percent_median': 'median_gap',
        'runtime_mean': 'mean_time',
        'runtime_std': 'std_time',
        'run_count': 'count',
    }).reset_index()
    # std is NaN for single runs
    summary['std_time'] = summary['std_time'].fillna(0)
    return summary


def write_results(records: List[RunRecord], out_dir: str) -> Dict[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    df = records_frame(records)
    paths = {
        'results': os.path.join(out_dir, 'strategy_results.csv'),
        'summary': os.path.join(out_dir, 'strategy_summary.csv'),
        'json': os.path.join(out_dir, 'strategy_results.json'),
    }
    df.to_csv(paths['results'], index=False)
    summary = summarize(df)
    summary.to_csv(paths['summary'], index=False)
    with open(paths['json'], 'w') as f:
        json.dump([asdict(r) for r in records], f, indent=2)

    print(f"\n✓ Results written to {out_dir}/")
    if not summary.empty:
        print(summary[['n', 'method', 'mean_cost', 'mean_gap', 'mean_time', 'count']].to_string(index=False))
        best = summary.dropna(subset=['mean_gap'])
        if not best.empty:
            overall = best.groupby('method')['mean_gap'].mean().sort_values()
            print("\nMethods by mean gap (%):")
            for method, value in overall.items():
                print(f"  {method:12s} {value:8.3f}")
    return paths


def main():
    parser = argparse.ArgumentParser(description="Compare Euclidean TSP strategies on seeded random instances")
    parser.add_argument('--sizes', default='5,7,9', help='Comma-separated node counts')
    parser.add_argument('--methods', default=','.join(METHODS), help='Comma-separated strategies')
    parser.add_argument('--runs', type=int, default=3, help='Number of instances per size')
    parser.add_argument('--seed', type=int, default=0, help='Base seed offset')
    parser.add_argument('--iterations', type=int, default=10000)
    parser.add_argument('--start-temp', type=float, default=3.0)
    parser.add_argument('--cooling', type=float, default=0.88)
    parser.add_argument('--min-temp', type=float, default=0.0)
    parser.add_argument('--max-brute-n', type=int, default=9, help='Largest size solved by brute force')
    parser.add_argument('--out-dir', default='results/strategy_benchmark', help='Output directory')

    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(',') if s.strip()]
    if not sizes:
        print("No sizes given")
        return
    methods = parse_methods(args.methods)
    config = AnnealingConfig(iterations=args.iterations, start_temp=args.start_temp,
                             cooling_factor=args.cooling, min_temp=args.min_temp)

    run_strategy_benchmark(
        sizes=sizes,
        methods=methods,
        runs=args.runs,
        seed_offset=args.seed,
        config=config,
        max_brute_n=args.max_brute_n,
        out_dir=args.out_dir,
    )


if __name__ == "__main__":
    main()
