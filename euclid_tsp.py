#!/usr/bin/env python3
"""Euclidean TSP strategies for small 2-D node sets.

Features:
 - Nodes identified by id only (coordinates are payload), see node_key
 - Shared tour evaluator (closed cycle, Euclidean metric)
 - Strategies:
     * brute force over every distinct permutation (exact, N! - keep N small)
     * nearest-neighbor greedy construction
     * simulated annealing with random pairwise swaps and geometric cooling
     * hill climbing (annealing at zero temperature)
 - Explicit numpy Generator handle per run for reproducible seeds
 - CLI comparing the strategies on a random instance, optional PNG output

CLI examples:
    python euclid_tsp.py --n 8 --seed 1
    python euclid_tsp.py --n 40 --methods nearest,annealing --iterations 20000
    python euclid_tsp.py --n 9 --plot-dir results/plots --json
"""
from __future__ import annotations

import argparse
import json
import math
import os
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class Node:
    id: int
    x: float
    y: float


def node_key(node: Node) -> int:
    """Identity of a node. Use this for set/dict membership, never the coordinates."""
    return node.id


class TourHistory:
    """Append-only log of tour lengths produced during a search run."""

    def __init__(self) -> None:
        self._lengths: List[float] = []

    def record(self, length: float) -> None:
        self._lengths.append(float(length))

    @property
    def best(self) -> Optional[float]:
        return min(self._lengths) if self._lengths else None

    @property
    def last(self) -> Optional[float]:
        return self._lengths[-1] if self._lengths else None

    def improvements(self) -> int:
        """Number of samples strictly shorter than the one before."""
        return sum(1 for prev, cur in zip(self._lengths, self._lengths[1:]) if cur < prev)

    def to_list(self) -> List[float]:
        return list(self._lengths)

    def __len__(self) -> int:
        return len(self._lengths)

    def __iter__(self) -> Iterator[float]:
        return iter(self._lengths)

    def __getitem__(self, idx):
        return self._lengths[idx]

    def __repr__(self) -> str:
        return f"TourHistory({self._lengths!r})"


@dataclass
class AnnealingConfig:
    iterations: int = 10000
    start_temp: float = 3.0
    cooling_factor: float = 0.88
    min_temp: float = 0.0  # 0.0 keeps the unfloored geometric schedule

    def validate(self) -> None:
        if self.iterations <= 0:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if self.start_temp < 0:
            raise ValueError(f"start_temp must be >= 0, got {self.start_temp}")
        if self.cooling_factor <= 0:
            raise ValueError(f"cooling_factor must be positive, got {self.cooling_factor}")
        if self.min_temp < 0:
            raise ValueError(f"min_temp must be >= 0, got {self.min_temp}")


@dataclass
class TSPSolution:
    tour: List[Node]
    cost: float
    runtime: float
    method: str
    improvements: int = 0
    history: List[float] = field(default_factory=list)


def validate_node_set(nodes: Sequence[Node]) -> None:
    seen = set()
    for node in nodes:
        key = node_key(node)
        if key < 0:
            raise ValueError(f"Node id must be non-negative, got {key}")
        if key in seen:
            raise ValueError(f"Duplicate node id {key} in node set")
        seen.add(key)


def make_nodes(coords: Sequence[Tuple[float, float]]) -> Tuple[Node, ...]:
    """Build a node set from (x, y) pairs; ids follow the input order."""
    return tuple(Node(id=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(coords))


def random_nodes(n: int, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> Tuple[Node, ...]:
    """Uniform sample of n nodes in the unit square."""
    if n < 0:
        raise ValueError(f"Node count must be >= 0, got {n}")
    if rng is None:
        rng = np.random.default_rng(seed)
    pts = rng.random((n, 2))
    return tuple(Node(id=i, x=float(pts[i, 0]), y=float(pts[i, 1])) for i in range(n))


def coords_array(nodes: Sequence[Node]) -> np.ndarray:
    return np.array([[node.x, node.y] for node in nodes], dtype=float).reshape(len(nodes), 2)


def distance(a: Node, b: Node) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def tour_length(tour: Sequence[Node]) -> float:
    n = len(tour)
    if n < 2:
        return 0.0
    total = sum(distance(tour[i], tour[i + 1]) for i in range(n - 1))
    return float(total + distance(tour[-1], tour[0]))


def nearest_neighbor(nodes: Sequence[Node], start: int = -1) -> List[Node]:
    """Greedy construction: always hop to the closest unvisited node.

    Starts from the node at position ``start`` of the input (the last one by
    default). Ties go to the node encountered first in the remaining pool.
    """
    remaining = list(nodes)
    built: List[Node] = []
    if not remaining:
        return built
    built.append(remaining.pop(start))
    while remaining:
        current = built[-1]
        best_idx = 0
        best_d = distance(current, remaining[0])
        for idx in range(1, len(remaining)):
            d = distance(current, remaining[idx])
            if d < best_d:
                best_idx, best_d = idx, d
        built.append(remaining.pop(best_idx))
    return built


def iter_distinct_tours(nodes: Sequence[Node]) -> Iterator[List[Node]]:
    """Yield each distinct permutation once, in lexicographic order of node ids.

    Sequences that are value-identical (same ids in the same order) are
    produced only once; rotations and reflections are kept as separate tours.
    """
    ordered = sorted(nodes, key=node_key)
    if not ordered:
        return
    unique: List[Node] = []
    ranks: List[int] = []
    for node in ordered:
        if not unique or node_key(unique[-1]) != node_key(node):
            unique.append(node)
        ranks.append(len(unique) - 1)
    n = len(ranks)
    while True:
        yield [unique[r] for r in ranks]
        i = n - 2
        while i >= 0 and ranks[i] >= ranks[i + 1]:
            i -= 1
        if i < 0:
            return
        j = n - 1
        while ranks[j] <= ranks[i]:
            j -= 1
        ranks[i], ranks[j] = ranks[j], ranks[i]
        ranks[i + 1:] = reversed(ranks[i + 1:])


def brute_force(nodes: Sequence[Node], fix_first: bool = False) -> Tuple[List[Node], TourHistory]:
    """Exhaustive search. Returns (best tour, history of each new best length).

    With ``fix_first`` the lowest-id node is pinned to position 0, which
    enumerates (N-1)! permutations instead of N! and finds the same optimum.
    """
    history = TourHistory()
    if not nodes:
        return [], history
    if fix_first:
        ordered = sorted(nodes, key=node_key)
        head, rest = ordered[0], ordered[1:]
        if rest:
            candidates: Iterator[List[Node]] = ([head] + perm for perm in iter_distinct_tours(rest))
        else:
            candidates = iter([[head]])
    else:
        candidates = iter_distinct_tours(nodes)
    best_tour: List[Node] = []
    best_len = float('inf')
    for perm in candidates:
        length = tour_length(perm)
        if length < best_len:
            best_len = length
            best_tour = perm
            history.record(length)
    return best_tour, history


def simulated_annealing(nodes: Sequence[Node], iterations: int = 10000, start_temp: float = 3.0,
                        cooling_factor: float = 0.88, rng: Optional[np.random.Generator] = None,
                        seed: Optional[int] = None, min_temp: float = 0.0) -> Tuple[List[Node], TourHistory]:
    """Random pairwise-swap annealing with geometric cooling.

    Worse swaps are kept with probability exp(-delta / temp); once the
    temperature reaches zero only non-worsening swaps survive. ``min_temp``
    floors the temperature (0.0 leaves the schedule unfloored).
    Returns (final tour, history) where history has ``iterations + 1`` samples.
    """
    config = AnnealingConfig(iterations=iterations, start_temp=start_temp,
                             cooling_factor=cooling_factor, min_temp=min_temp)
    config.validate()
    tour = list(nodes)
    history = TourHistory()
    n = len(tour)
    if n == 0:
        return tour, history
    if n < 2:
        raise ValueError("Swap perturbation needs at least 2 nodes")
    if rng is None:
        rng = np.random.default_rng(seed)

    temp = config.start_temp
    current = tour_length(tour)
    for _ in range(config.iterations):
        history.record(current)
        a, b = (int(v) for v in rng.choice(n, size=2, replace=False))
        tour[a], tour[b] = tour[b], tour[a]
        candidate = tour_length(tour)
        delta = candidate - current
        if delta <= 0:
            p_accept = 1.0
        elif temp <= 0:
            p_accept = 0.0
        else:
            p_accept = math.exp(-delta / temp)
        if p_accept == 0.0 or rng.random() > p_accept:
            tour[a], tour[b] = tour[b], tour[a]
        else:
            current = candidate
        temp = max(temp * config.cooling_factor, config.min_temp)
    history.record(current)
    return tour, history


def hill_climb(nodes: Sequence[Node], iterations: int = 10000, rng: Optional[np.random.Generator] = None,
               seed: Optional[int] = None) -> Tuple[List[Node], TourHistory]:
    """Swap-based descent: annealing that never accepts a worse tour."""
    return simulated_annealing(nodes, iterations=iterations, start_temp=0.0, rng=rng, seed=seed)


METHODS = ('brute', 'nearest', 'annealing', 'hill')


def solve_euclid_tsp(nodes: Sequence[Node], *, method: str = 'annealing', seed: Optional[int] = None,
                     config: Optional[AnnealingConfig] = None, fix_first: bool = False) -> TSPSolution:
    """Programmatic API: run one strategy and wrap the outcome in a TSPSolution.

    Parameters:
      nodes: node set (ids must be unique)
      method: 'brute' | 'nearest' | 'annealing' | 'hill'
      seed: seed for the run's random generator (annealing / hill)
      config: annealing parameters (defaults to AnnealingConfig())
      fix_first: brute force over (N-1)! permutations
    """
    validate_node_set(nodes)
    if config is None:
        config = AnnealingConfig()
    rng = np.random.default_rng(seed)
    start_t = time.time()
    if method == 'brute':
        tour, history = brute_force(nodes, fix_first=fix_first)
    elif method == 'nearest':
        tour = nearest_neighbor(nodes)
        history = TourHistory()
        if tour:
            history.record(tour_length(tour))
    elif method == 'annealing':
        tour, history = simulated_annealing(nodes, iterations=config.iterations, start_temp=config.start_temp,
                                            cooling_factor=config.cooling_factor, rng=rng,
                                            min_temp=config.min_temp)
    elif method == 'hill':
        tour, history = hill_climb(nodes, iterations=config.iterations, rng=rng)
    else:
        raise ValueError(f"Unknown method: {method}")
    runtime = time.time() - start_t
    return TSPSolution(tour=tour, cost=tour_length(tour), runtime=runtime, method=method,
                       improvements=history.improvements(), history=history.to_list())


def parse_methods(text: str) -> List[str]:
    methods = [m.strip() for m in text.split(',') if m.strip()]
    unknown = [m for m in methods if m not in METHODS]
    if unknown:
        raise ValueError(f"Unknown method(s): {', '.join(unknown)} (choose from {', '.join(METHODS)})")
    return methods


def main():
    ap = argparse.ArgumentParser(description="Compare Euclidean TSP strategies on a random node set")
    ap.add_argument('--n', type=int, default=10, help='Number of random nodes in the unit square')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--methods', default=','.join(METHODS), help='Comma list of brute,nearest,annealing,hill')
    ap.add_argument('--iterations', type=int, default=10000)
    ap.add_argument('--start-temp', type=float, default=3.0)
    ap.add_argument('--cooling', type=float, default=0.88, help='Multiplicative temperature decay per iteration')
    ap.add_argument('--min-temp', type=float, default=0.0, help='Temperature floor (0 disables)')
    ap.add_argument('--max-brute-n', type=int, default=10, help='Skip brute force above this many nodes')
    ap.add_argument('--fix-first', action='store_true', help='Brute force with the first node pinned')
    ap.add_argument('--plot-dir', help='Write tour and history PNGs to this directory')
    ap.add_argument('--json', action='store_true', help='Emit JSON array of results to stdout instead of plain text lines')
    args = ap.parse_args()

    methods = parse_methods(args.methods)
    config = AnnealingConfig(iterations=args.iterations, start_temp=args.start_temp,
                             cooling_factor=args.cooling, min_temp=args.min_temp)
    config.validate()
    nodes = random_nodes(args.n, seed=args.seed)

    results: List[TSPSolution] = []
    for method in methods:
        if method == 'brute' and args.n > args.max_brute_n:
            if not args.json:
                print(f"[info] Skipping brute force: n={args.n} > max-brute-n={args.max_brute_n}")
            continue
        try:
            sol = solve_euclid_tsp(nodes, method=method, seed=args.seed, config=config, fix_first=args.fix_first)
        except ValueError as e:
            if not args.json:
                print(f"{method:12s} ERROR {e}")
            continue
        results.append(sol)
        if not args.json:
            print(f"{method:12s} cost={sol.cost:10.4f} time={sol.runtime:8.4f}s improvements={sol.improvements}")

    if args.plot_dir:
        from tsp_render import plot_histories, render_tour
        histories: Dict[str, List[float]] = {}
        for sol in results:
            render_tour(sol.tour, os.path.join(args.plot_dir, f"tour_{sol.method}.png"), title=sol.method)
            histories[sol.method] = sol.history
        plot_histories(histories, os.path.join(args.plot_dir, 'history.png'))
        if not args.json:
            print(f"[info] Plots written to {args.plot_dir}")

    if args.json:
        out_list = [
            {
                'method': sol.method,
                'cost': sol.cost,
                'runtime': sol.runtime,
                'improvements': sol.improvements,
                'tour': [node_key(node) for node in sol.tour],
            }
            for sol in results
        ]
        print(json.dumps(out_list))


if __name__ == '__main__':
    main()
