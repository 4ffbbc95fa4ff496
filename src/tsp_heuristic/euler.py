"""Eulerian circuit, shortcutting and the Christofides construction.

The shortcut tour never costs more than the Eulerian circuit it comes from
as long as the cost matrix obeys the triangle inequality; that is also what
the 1.5 approximation bound of Christofides relies on. On non-metric input
the result is still a valid tour, just without the guarantee.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from .errors import DisconnectedGraphError, NoFeasibleMatchingError
from .graph import Edge, WeightedGraph
from .matching import MatchingStrategy, min_weight_perfect_matching
from .matrix import CostMatrix
from .mst import minimum_spanning_tree
from .tour import Tour

logger = logging.getLogger(__name__)


def eulerian_circuit(n: int, edges: Iterable[Edge], start: int = 0) -> List[int]:
    """Hierholzer's algorithm on a multigraph given as an edge list.

    Returns the closed walk as a vertex list whose first and last entries are
    ``start``. Parallel edges are consumed independently (edge ids, not
    endpoint pairs, are marked used).
    """
    edges = list(edges)
    adj: List[List[Tuple[int, int]]] = [[] for _ in range(n)]
    for eid, (u, v, _) in enumerate(edges):
        adj[u].append((v, eid))
        adj[v].append((u, eid))
    odd = [v for v in range(n) if len(adj[v]) % 2]
    if odd:
        raise NoFeasibleMatchingError(f"multigraph has odd-degree vertices {odd[:10]}")

    used = [False] * len(edges)
    stack = [start]
    path: List[int] = []
    while stack:
        v = stack[-1]
        while adj[v] and used[adj[v][-1][1]]:
            adj[v].pop()
        if adj[v]:
            w, eid = adj[v].pop()
            used[eid] = True
            stack.append(w)
        else:
            path.append(stack.pop())
    path.reverse()
    if len(path) != len(edges) + 1:
        raise DisconnectedGraphError(
            f"Eulerian walk used {len(path) - 1} of {len(edges)} edges; multigraph not connected"
        )
    return path


def circuit_cost(circuit: Sequence[int], matrix: CostMatrix) -> int:
    values = matrix.values
    return int(sum(values[circuit[i], circuit[i + 1]] for i in range(len(circuit) - 1)))


def shortcut(circuit: Iterable[int]) -> List[int]:
    """Keep the first visit of every vertex."""
    seen = set()
    tour = []
    for node in circuit:
        if node not in seen:
            seen.add(node)
            tour.append(node)
    return tour


def christofides_tour(matrix, strategy: MatchingStrategy = MatchingStrategy.EXACT) -> Tour:
    """Compute a tour using the Christofides heuristic.

    Steps:
      1. Minimum spanning tree
      2. Vertices of odd degree in the tree
      3. Minimum weight perfect matching on those vertices
      4. Tree + matching -> multigraph with all degrees even
      5. Eulerian circuit -> shortcut repeated vertices
    """
    graph = WeightedGraph(matrix)
    tree = minimum_spanning_tree(graph)
    odd = tree.odd_vertices()
    matching = min_weight_perfect_matching(odd, graph.matrix, strategy)
    circuit = eulerian_circuit(graph.n, tree.edges + matching.pairs)
    tour = Tour(shortcut(circuit))
    logger.debug("christofides: tree %d, %d odd vertices, matching %d, circuit %d, tour %d",
                 tree.weight, len(odd), matching.weight,
                 circuit_cost(circuit, graph.matrix), tour.cost(graph.matrix))
    return tour
