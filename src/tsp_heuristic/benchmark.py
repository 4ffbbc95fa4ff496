"""Benchmark several solver configurations over a set of instances.

Every instance is solved once per configuration (the solver is
deterministic, so repeated runs would only measure timing noise). Records
are summarised with pandas and two configurations can be compared with a
Wilcoxon signed-rank test on their per-instance costs.

Example:
  tsp-heuristic-benchmark instances/*.tsp --configs christofides,christofides_all --out results.csv
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import asdict, dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
from scipy.stats import wilcoxon

from .errors import TSPError
from .loaders import load_instance
from .matching import MatchingStrategy
from .matrix import CostMatrix
from .solver import SolveConfig, solve

logger = logging.getLogger(__name__)

DEFAULT_CONFIGS: Dict[str, SolveConfig] = {
    # Construction only
    'christofides': SolveConfig(local_search=False),
    'christofides_greedy': SolveConfig(local_search=False, matching_strategy=MatchingStrategy.GREEDY),
    'nearest_neighbor': SolveConfig(local_search=False, symmetric=False),
    # Construction + local search
    'christofides_2opt': SolveConfig(enable_or_opt=False),
    'christofides_all': SolveConfig(),
    'christofides_greedy_all': SolveConfig(matching_strategy=MatchingStrategy.GREEDY),
    'nearest_neighbor_all': SolveConfig(symmetric=False),
}


@dataclass
class RunRecord:
    instance: str
    n: int
    config_name: str
    method: str
    status: str
    cost: Optional[int]
    initial_cost: Optional[int]
    runtime: float
    improvements: int
    timestamp: str


def run_benchmark(instances: Iterable[Tuple[str, CostMatrix]],
                  configs: Dict[str, SolveConfig]) -> List[RunRecord]:
    records: List[RunRecord] = []
    for name, matrix in instances:
        for config_name, config in configs.items():
            ts = time.strftime('%Y-%m-%d %H:%M:%S')
            try:
                sol = solve(matrix, config)
            except TSPError as e:
                logger.warning("%s / %s failed: %s", name, config_name, e)
                records.append(RunRecord(name, matrix.n, config_name, '', 'error', None, None,
                                         0.0, 0, ts))
                continue
            records.append(RunRecord(name, matrix.n, config_name, sol.method, 'ok', sol.cost,
                                     sol.initial_cost, sol.runtime, sol.improvements, ts))
            logger.info("%s n=%d %s: cost=%d time=%.3fs imp=%d", name, matrix.n, config_name,
                        sol.cost, sol.runtime, sol.improvements)
    return records


def summarize(records: List[RunRecord]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in records])
    ok = df[df['status'] == 'ok'].copy()
    ok['gain_pct'] = 100.0 * (ok['initial_cost'] - ok['cost']) / ok['initial_cost'].where(ok['initial_cost'] > 0)
    summary = ok.groupby('config_name').agg(
        instances=('instance', 'nunique'),
        cost_mean=('cost', 'mean'),
        cost_best=('cost', 'min'),
        gain_pct_mean=('gain_pct', 'mean'),
        runtime_mean=('runtime', 'mean'),
        improvements_mean=('improvements', 'mean'),
    ).reset_index()
    failures = df[df['status'] != 'ok'].groupby('config_name').size()
    summary['failures'] = summary['config_name'].map(failures).fillna(0).astype(int)
    return summary


def compare(records: List[RunRecord], config_a: str, config_b: str) -> Optional[Tuple[float, float]]:
    """Wilcoxon signed-rank test on per-instance costs of two configurations.

    Returns ``(statistic, p_value)``, or ``None`` when the two configurations
    share fewer than two instances or never differ.
    """
    df = pd.DataFrame([asdict(r) for r in records])
    df = df[df['status'] == 'ok']
    piv = df.pivot(index='instance', columns='config_name', values='cost')
    if config_a not in piv.columns or config_b not in piv.columns:
        return None
    paired = piv[[config_a, config_b]].dropna()
    diffs = paired[config_a] - paired[config_b]
    if len(paired) < 2 or not diffs.any():
        return None
    stat, p = wilcoxon(paired[config_a], paired[config_b])
    return float(stat), float(p)


def main(argv: Optional[List[str]] = None) -> int:  # pragma: no cover - CLI
    ap = argparse.ArgumentParser(description='Benchmark heuristic TSP configurations')
    ap.add_argument('files', nargs='+')
    ap.add_argument('--configs', help=f"Comma list of configuration names (default: all of {list(DEFAULT_CONFIGS)})")
    ap.add_argument('--limit', type=float, help='Time limit per solve (s)')
    ap.add_argument('--out', help='Write the summary CSV here')
    ap.add_argument('--compare', help='Two configuration names "a,b" to test with Wilcoxon')
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')

    configs = DEFAULT_CONFIGS
    if args.configs:
        requested = [c.strip() for c in args.configs.split(',') if c.strip()]
        missing = [c for c in requested if c not in DEFAULT_CONFIGS]
        if missing:
            logger.error("unknown configuration names: %s (known: %s)", missing, list(DEFAULT_CONFIGS))
            return 2
        configs = {c: DEFAULT_CONFIGS[c] for c in requested}
    if args.limit is not None:
        configs = {k: replace(v, deadline=args.limit) for k, v in configs.items()}

    instances = []
    for path in args.files:
        try:
            name, matrix, _ = load_instance(path)
        except (TSPError, OSError) as e:
            logger.warning("%s PARSE_ERROR %s", path, e)
            continue
        instances.append((name, matrix))

    records = run_benchmark(instances, configs)
    if not records:
        logger.warning("no instances solved")
        return 1
    summary = summarize(records)
    print(summary.to_string(index=False))
    if args.out:
        summary.to_csv(args.out, index=False)
        logger.info("summary written to %s", args.out)
    if args.compare:
        a, b = [c.strip() for c in args.compare.split(',')]
        result = compare(records, a, b)
        if result is None:
            print(f"Wilcoxon {a} vs {b}: not enough differing instances")
        else:
            print(f"Wilcoxon {a} vs {b}: stat={result[0]} p={result[1]:.3e}")
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
