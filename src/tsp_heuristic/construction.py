"""Construction heuristics that do not need a symmetric matrix."""
from __future__ import annotations

import numpy as np

from .matrix import as_cost_matrix
from .tour import Tour


def nearest_neighbor_tour(matrix, start: int = 0) -> Tour:
    """Greedy walk to the cheapest unvisited successor.

    Only outgoing costs ``m[current][j]`` are read, so the walk is valid for
    asymmetric matrices. Ties go to the lowest index and ``no_edge`` pairs are
    taken only when nothing else is left.
    """
    matrix = as_cost_matrix(matrix)
    n = matrix.n
    values = matrix.values
    usable = matrix.edge_mask()
    worst = np.iinfo(np.int64).max

    unvisited = np.ones(n, dtype=bool)
    unvisited[start] = False
    current = start
    order = [current]
    for _ in range(n - 1):
        preferred = unvisited & usable[current]
        pool = preferred if preferred.any() else unvisited
        nxt = int(np.argmin(np.where(pool, values[current], worst)))
        order.append(nxt)
        unvisited[nxt] = False
        current = nxt
    return Tour(order)
