"""Undirected weighted graph over the vertices of a symmetric cost matrix."""
from __future__ import annotations

from typing import Iterator, List, NamedTuple

import numpy as np

from .errors import MalformedInputError
from .matrix import CostMatrix, as_cost_matrix


class Edge(NamedTuple):
    u: int       # always the smaller index
    v: int
    weight: int

    @classmethod
    def between(cls, a: int, b: int, weight: int) -> 'Edge':
        return cls(a, b, weight) if a < b else cls(b, a, weight)

    def other(self, vertex: int) -> int:
        return self.v if vertex == self.u else self.u


class WeightedGraph:
    """Complete graph on ``[0, n)`` minus the pairs flagged as ``no_edge``.

    Vertices are plain indices and edges are read straight from the matrix,
    so an edge weight can never disagree with the matrix entry.
    """

    def __init__(self, matrix):
        self.matrix: CostMatrix = as_cost_matrix(matrix)
        if not self.matrix.is_symmetric:
            raise MalformedInputError("undirected graph needs a symmetric cost matrix")
        adjacent = self.matrix.edge_mask()
        adjacent.flags.writeable = False
        self._adjacent = adjacent
        self._degrees = adjacent.sum(axis=1)

    @property
    def n(self) -> int:
        return self.matrix.n

    @property
    def adjacency(self) -> np.ndarray:
        return self._adjacent

    def degree(self, v: int) -> int:
        return int(self._degrees[v])

    def has_edge(self, u: int, v: int) -> bool:
        return bool(self._adjacent[u, v])

    def weight(self, u: int, v: int) -> int:
        if not self._adjacent[u, v]:
            raise KeyError(f"no edge between {u} and {v}")
        return self.matrix[u, v]

    def neighbors(self, v: int) -> List[int]:
        return np.flatnonzero(self._adjacent[v]).tolist()

    def incident(self, v: int) -> List[Edge]:
        row = self.matrix.values[v]
        return [Edge.between(v, w, int(row[w])) for w in self.neighbors(v)]

    def edges(self) -> Iterator[Edge]:
        """All edges in lexicographic ``(u, v)`` order."""
        values = self.matrix.values
        for u, v in np.argwhere(np.triu(self._adjacent, k=1)):
            yield Edge(int(u), int(v), int(values[u, v]))

    @property
    def edge_count(self) -> int:
        return int(self._degrees.sum()) // 2

    def is_complete(self) -> bool:
        return self.edge_count == self.n * (self.n - 1) // 2

    def __repr__(self) -> str:
        return f"WeightedGraph(n={self.n}, edges={self.edge_count})"
