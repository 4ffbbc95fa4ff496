"""Best-improvement local search with 2-opt and Or-opt moves.

Each pass evaluates the whole neighborhood and applies the single most
improving move. Candidates are scanned in a fixed order (2-opt by ascending
``i`` then ``k``, then Or-opt by segment length, start and insertion point)
and the first candidate wins on equal deltas, so the sequence of applied moves
only depends on the tour and the matrix. Wall-clock time is consulted only to
decide whether to start another pass.

Move deltas are computed from the endpoints of the touched edges. For an
asymmetric matrix, reversing a segment also flips the direction of its inner
edges; that difference is read from per-pass prefix sums (:class:`SegmentCosts`)
so every candidate is still evaluated in constant time.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .matrix import CostMatrix, as_cost_matrix
from .tour import Tour

logger = logging.getLogger(__name__)

LOCAL_OPTIMUM = 'local_optimum'
DEADLINE = 'deadline'
MAX_PASSES = 'max_passes'


@dataclass
class LocalSearchResult:
    initial_cost: int
    final_cost: int
    moves: int = 0
    two_opt_moves: int = 0
    or_opt_moves: int = 0
    passes: int = 0
    stop_reason: str = LOCAL_OPTIMUM
    runtime: float = 0.0

    @property
    def improvement(self) -> int:
        return self.initial_cost - self.final_cost


class SegmentCosts:
    """Prefix sums of a tour's edges walked forwards and backwards.

    ``forward(i, k)`` is the cost of the path ``order[i] -> ... -> order[k]``;
    ``backward(i, k)`` the cost of the same path traversed in reverse.
    """

    def __init__(self, order, values: np.ndarray):
        o = np.asarray(order, dtype=np.int64)
        self.fwd = np.concatenate(([0], np.cumsum(values[o[:-1], o[1:]])))
        self.bwd = np.concatenate(([0], np.cumsum(values[o[1:], o[:-1]])))

    def forward(self, i, k):
        return self.fwd[k] - self.fwd[i]

    def backward(self, i, k):
        return self.bwd[k] - self.bwd[i]


def _values(matrix) -> np.ndarray:
    return matrix.values if isinstance(matrix, CostMatrix) else np.asarray(matrix)


def scan_costs(matrix: CostMatrix) -> np.ndarray:
    """Costs the move scans work on.

    Pairs flagged as ``no_edge`` are priced above any tour made of real
    edges, so a move that drops one always wins and a move that adds one
    never does. Without a sentinel this is the matrix itself.
    """
    values = matrix.values
    if matrix.no_edge is None:
        return values
    mask = matrix.edge_mask()
    real = values[mask]
    penalty = matrix.n * (int(real.max()) if real.size else 0) + 1
    return np.where(mask | np.eye(matrix.n, dtype=bool), values, penalty)


def two_opt_delta(matrix, order, i: int, k: int, segments: Optional[SegmentCosts] = None) -> int:
    """Cost change of reversing positions ``i..k`` (``1 <= i < k < n``).

    Pass ``segments`` for asymmetric matrices; without it the segment's inner
    edges are assumed to cost the same in both directions.
    """
    m = _values(matrix)
    n = len(order)
    a, b = order[i - 1], order[i]
    c, d = order[k], order[(k + 1) % n]
    delta = int(m[a, c] + m[b, d] - m[a, b] - m[c, d])
    if segments is not None:
        delta += int(segments.backward(i, k) - segments.forward(i, k))
    return delta


def or_opt_delta(matrix, order, start: int, length: int, after: int) -> int:
    """Cost change of moving the cyclic segment at ``start`` behind position ``after``.

    ``after`` must lie outside the segment and must not be the position just
    before it. The segment keeps its direction.
    """
    m = _values(matrix)
    n = len(order)
    prev, first = order[(start - 1) % n], order[start % n]
    last, nxt = order[(start + length - 1) % n], order[(start + length) % n]
    a, b = order[after % n], order[(after + 1) % n]
    return int(m[prev, nxt] - m[prev, first] - m[last, nxt]
               + m[a, first] + m[last, b] - m[a, b])


def _best_two_opt(m, o, n, segments) -> Tuple[int, Optional[Tuple[int, int]]]:
    best_delta, best_move = 0, None
    for i in range(1, n - 1):
        ks = np.arange(i + 1, n)
        a, b = o[i - 1], o[i]
        c, d = o[ks], o[(ks + 1) % n]
        deltas = m[a, c] + m[b, d] - m[a, b] - m[c, d]
        if segments is not None:
            deltas = deltas + (segments.bwd[ks] - segments.bwd[i]) - (segments.fwd[ks] - segments.fwd[i])
        j = int(np.argmin(deltas))
        if deltas[j] < best_delta:
            best_delta, best_move = int(deltas[j]), (i, int(ks[j]))
    return best_delta, best_move


def _best_or_opt(m, o, n, max_segment) -> Tuple[int, Optional[Tuple[int, int, int]]]:
    best_delta, best_move = 0, None
    for length in range(1, max_segment + 1):
        if n < length + 2:
            break
        ts = np.arange(0, n - length - 1)
        for s in range(n):
            prev, first = o[(s - 1) % n], o[s]
            last, nxt = o[(s + length - 1) % n], o[(s + length) % n]
            removal = m[prev, nxt] - m[prev, first] - m[last, nxt]
            js = (s + length + ts) % n
            a, b = o[js], o[(js + 1) % n]
            deltas = removal + m[a, first] + m[last, b] - m[a, b]
            j = int(np.argmin(deltas))
            if deltas[j] < best_delta:
                best_delta, best_move = int(deltas[j]), (s, length, int(js[j]))
    return best_delta, best_move


def local_search(tour: Tour, matrix, deadline: Optional[float] = None,
                 enable_two_opt: bool = True, enable_or_opt: bool = True,
                 or_opt_max_segment: int = 3,
                 max_passes: Optional[int] = None) -> LocalSearchResult:
    """Improve ``tour`` in place until no move helps or time runs out.

    ``deadline`` is an absolute ``time.monotonic()`` value, checked before
    every pass; an already expired deadline leaves the tour untouched. The
    returned cost never exceeds the starting cost, except when a move takes a
    ``no_edge`` pair out of the tour.
    """
    matrix = as_cost_matrix(matrix)
    m = scan_costs(matrix)
    n = len(tour)
    start_t = time.time()
    cost = tour.cost(matrix)
    result = LocalSearchResult(initial_cost=cost, final_cost=cost)
    if n < 3 or not (enable_two_opt or enable_or_opt):
        return result
    asymmetric = not matrix.is_symmetric

    while True:
        if deadline is not None and time.monotonic() >= deadline:
            result.stop_reason = DEADLINE
            break
        if max_passes is not None and result.passes >= max_passes:
            result.stop_reason = MAX_PASSES
            break
        o = np.asarray(tour.order, dtype=np.int64)
        result.passes += 1

        best_delta, best_move, best_kind = 0, None, None
        if enable_two_opt:
            segments = SegmentCosts(o, m) if asymmetric else None
            delta, move = _best_two_opt(m, o, n, segments)
            if delta < best_delta:
                best_delta, best_move, best_kind = delta, move, '2opt'
        if enable_or_opt:
            delta, move = _best_or_opt(m, o, n, or_opt_max_segment)
            if delta < best_delta:
                best_delta, best_move, best_kind = delta, move, 'oropt'

        if best_move is None:
            result.stop_reason = LOCAL_OPTIMUM
            break
        if best_kind == '2opt':
            tour.reverse(*best_move)
            result.two_opt_moves += 1
        else:
            tour.relocate(*best_move)
            result.or_opt_moves += 1
        result.moves += 1
        cost += best_delta

    if m is not matrix.values:
        # deltas were taken on penalized costs
        cost = tour.cost(matrix)
    result.final_cost = cost
    result.runtime = time.time() - start_t
    logger.debug("local search: %d -> %d in %d moves over %d passes (%s)",
                 result.initial_cost, result.final_cost, result.moves, result.passes,
                 result.stop_reason)
    return result
