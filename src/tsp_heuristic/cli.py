"""Command line front end.

CLI examples:
    tsp-heuristic instances/gr21.tsp --ls all
    tsp-heuristic instances/*.tsp --matching greedy --limit 10 --json
    tsp-heuristic instances/br17.atsp --ls 2opt
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .errors import TSPError
from .loaders import TSPLIBProblem, load_instance
from .matching import MatchingStrategy
from .solver import SolveConfig, TSPSolution, solve

logger = logging.getLogger(__name__)

LS_CHOICES = {
    'all': (True, True),
    '2opt': (True, False),
    'oropt': (False, True),
    'none': (False, False),
}


def config_from_args(args: argparse.Namespace) -> SolveConfig:
    two_opt, or_opt = LS_CHOICES[args.ls]
    symmetric = None
    if args.method == 'nearest':
        symmetric = False
    elif args.method == 'christofides':
        symmetric = True
    return SolveConfig(
        deadline=args.limit,
        enable_or_opt=or_opt,
        enable_two_opt=two_opt,
        local_search=two_opt or or_opt,
        matching_strategy=MatchingStrategy(args.matching),
        symmetric=symmetric,
        start=args.start,
    )


def solution_to_dict(name: str, solution: TSPSolution,
                     problem: Optional[TSPLIBProblem] = None) -> Dict[str, Any]:
    """Result record; tour entries are 1-based ranks as in TSPLIB files."""
    out: Dict[str, Any] = {
        'instance': name,
        'cost': solution.cost,
        'runtime': solution.runtime,
        'method': solution.method,
        'improvements': solution.improvements,
    }
    if problem is not None:
        route = problem.route(solution.tour)
        if route is not None:
            out['route'] = route
    out['tour'] = [v + 1 for v in solution.tour]
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Heuristic TSP solver (Christofides + 2-opt / Or-opt)')
    ap.add_argument('files', nargs='+', help='TSPLIB .tsp/.atsp or AMPL .dat instances')
    ap.add_argument('--method', choices=['auto', 'christofides', 'nearest'], default='auto',
                    help='Construction (auto: christofides if the matrix is symmetric, nearest otherwise)')
    ap.add_argument('--matching', choices=[s.value for s in MatchingStrategy], default='exact',
                    help='Matching used by christofides (greedy is faster but not optimal)')
    ap.add_argument('--ls', choices=list(LS_CHOICES), default='all', help='Local search moves')
    ap.add_argument('--limit', type=float, help='Time limit in seconds per instance')
    ap.add_argument('--start', type=int, default=0, help='Vertex (0-based) the reported tour starts at')
    ap.add_argument('--json', action='store_true', help='Emit JSON array of results to stdout instead of plain text lines')
    ap.add_argument('--summary', action='store_true')
    ap.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='[%(levelname)s] %(message)s', stream=sys.stderr)
    config = config_from_args(args)

    results: List[Dict[str, Any]] = []
    failures = 0
    for path in args.files:
        try:
            name, matrix, problem = load_instance(path)
            sol = solve(matrix, config)
        except (TSPError, OSError) as e:
            failures += 1
            if args.json:
                logger.error("%s: %s", path, e)
            else:
                print(f"{path:20s} ERROR {e}")
            continue
        results.append(solution_to_dict(name, sol, problem))
        if not args.json:
            print(f"{name:20s} cost={sol.cost:10d} time={sol.runtime:6.3f}s method={sol.method}")

    if args.json:
        print(json.dumps(results))
    elif args.summary and results:
        print("\nSummary:")
        for r in results:
            print(f"  {r['instance']}: cost={r['cost']} improvements={r['improvements']}")
    return 1 if failures else 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
