"""Solve orchestrator: construction followed by local search under a deadline."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from .construction import nearest_neighbor_tour
from .errors import SolveError, TSPError
from .euler import christofides_tour
from .local_search import local_search
from .matching import MatchingStrategy
from .matrix import as_cost_matrix

logger = logging.getLogger(__name__)


@dataclass
class SolveConfig:
    deadline: Optional[float] = None           # seconds for the whole solve, None = no limit
    enable_or_opt: bool = True
    matching_strategy: MatchingStrategy = MatchingStrategy.EXACT
    enable_two_opt: bool = True
    local_search: bool = True                  # False keeps the constructed tour
    symmetric: Optional[bool] = None           # None = detect from the matrix
    start: int = 0                             # vertex the reported tour begins at


@dataclass
class TSPSolution:
    tour: List[int]            # sequence of node indices (0-based) ending w/o repeat
    cost: int
    runtime: float
    method: str
    improvements: int = 0
    initial_cost: Optional[int] = None
    stop_reason: Optional[str] = None


def _method_name(config: SolveConfig, symmetric: bool) -> str:
    if symmetric:
        base = 'christofides'
        if MatchingStrategy(config.matching_strategy) is MatchingStrategy.GREEDY:
            base += '_greedy'
    else:
        base = 'nearest_neighbor'
    if not config.local_search:
        return base
    moves = [name for name, on in (('2opt', config.enable_two_opt), ('oropt', config.enable_or_opt)) if on]
    return '_'.join([base] + moves)


def solve(matrix, config: Optional[SolveConfig] = None) -> TSPSolution:
    """Build a tour for ``matrix`` and improve it with local search.

    Symmetric matrices are built with Christofides, asymmetric ones with the
    nearest-neighbor walk (Christofides needs an undirected graph). Every
    failure surfaces as :class:`SolveError` whose ``cause`` is the original
    error. The caller's matrix is copied, never modified.
    """
    config = config or SolveConfig()
    start_t = time.time()
    deadline = None if config.deadline is None else time.monotonic() + config.deadline
    try:
        cost_matrix = as_cost_matrix(matrix)
        n = cost_matrix.n
        if not 0 <= config.start < n:
            raise SolveError(f"start vertex {config.start} outside [0, {n})")
        try:
            strategy = MatchingStrategy(config.matching_strategy)
        except ValueError:
            raise SolveError(f"unknown matching strategy: {config.matching_strategy!r}") from None
        symmetric = cost_matrix.is_symmetric if config.symmetric is None else config.symmetric
        if symmetric and not cost_matrix.is_symmetric:
            raise SolveError("symmetric solve requested for an asymmetric matrix")

        if symmetric:
            tour = christofides_tour(cost_matrix, strategy)
        else:
            tour = nearest_neighbor_tour(cost_matrix, config.start)
        initial_cost = tour.cost(cost_matrix)
        logger.debug("constructed %d-vertex tour of cost %d in %.3fs",
                     n, initial_cost, time.time() - start_t)

        improvements = 0
        cost = initial_cost
        stop_reason = None
        if config.local_search:
            ls = local_search(tour, cost_matrix, deadline=deadline,
                              enable_two_opt=config.enable_two_opt,
                              enable_or_opt=config.enable_or_opt)
            improvements = ls.moves
            cost = ls.final_cost
            stop_reason = ls.stop_reason
    except SolveError:
        raise
    except TSPError as e:
        raise SolveError(f"{type(e).__name__}: {e}", cause=e) from e

    tour.rotate_to(config.start)
    return TSPSolution(
        tour=tour.order,
        cost=cost,
        runtime=time.time() - start_t,
        method=_method_name(config, symmetric),
        improvements=improvements,
        initial_cost=initial_cost,
        stop_reason=stop_reason,
    )
