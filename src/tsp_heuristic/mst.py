"""Prim's minimum spanning tree over a :class:`WeightedGraph`."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from .errors import DisconnectedGraphError
from .graph import Edge, WeightedGraph


@dataclass
class SpanningTree:
    n: int
    edges: List[Edge] = field(default_factory=list)

    @property
    def weight(self) -> int:
        return sum(e.weight for e in self.edges)

    def degrees(self) -> List[int]:
        deg = [0] * self.n
        for u, v, _ in self.edges:
            deg[u] += 1
            deg[v] += 1
        return deg

    def odd_vertices(self) -> List[int]:
        """Odd-degree vertices in index order (always an even count)."""
        return [v for v, d in enumerate(self.degrees()) if d % 2 == 1]


def minimum_spanning_tree(graph: WeightedGraph, root: int = 0) -> SpanningTree:
    """Grow a minimum spanning tree from ``root``.

    Ties are deterministic: among equal keys the lowest index joins the tree
    first, and a vertex keeps its earlier parent when a later tree vertex
    offers the same weight.
    """
    n = graph.n
    values = graph.matrix.values
    adjacency = graph.adjacency

    in_tree = np.zeros(n, dtype=bool)
    key = np.full(n, np.inf)
    parent = np.full(n, -1, dtype=np.int64)
    key[root] = 0.0
    tree = SpanningTree(n)

    for _ in range(n):
        candidates = np.where(in_tree, np.inf, key)
        u = int(np.argmin(candidates))
        if not np.isfinite(candidates[u]):
            raise DisconnectedGraphError(
                f"spanning tree reaches only {int(in_tree.sum())} of {n} vertices"
            )
        in_tree[u] = True
        p = int(parent[u])
        if p >= 0:
            tree.edges.append(Edge.between(p, u, int(values[p, u])))
        row = np.where(adjacency[u], values[u], np.inf)
        better = ~in_tree & (row < key)
        key[better] = row[better]
        parent[better] = u

    return tree
