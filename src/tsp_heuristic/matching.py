"""Minimum-weight perfect matching on the odd-degree vertices of a tree.

Two strategies are available:

* ``EXACT`` runs the blossom algorithm shipped with networkx and returns a
  minimum-weight perfect matching.
* ``GREEDY`` pairs every vertex with its nearest free partner. It is much
  faster on large odd sets but NOT optimal, so the Christofides 1.5 bound no
  longer holds when it is used.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import networkx as nx
import numpy as np

from .errors import NoFeasibleMatchingError
from .graph import Edge
from .matrix import CostMatrix

logger = logging.getLogger(__name__)


class MatchingStrategy(enum.Enum):
    EXACT = 'exact'
    GREEDY = 'greedy'


@dataclass
class Matching:
    strategy: MatchingStrategy
    pairs: List[Edge] = field(default_factory=list)

    @property
    def weight(self) -> int:
        return sum(e.weight for e in self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def covered(self) -> List[int]:
        return sorted(v for e in self.pairs for v in (e.u, e.v))


def _check_even(vertices: Sequence[int]) -> None:
    if len(vertices) % 2:
        raise NoFeasibleMatchingError(
            f"cannot perfectly match an odd number ({len(vertices)}) of vertices"
        )


def exact_matching(vertices: Sequence[int], matrix: CostMatrix) -> Matching:
    """Blossom matching on the complete graph induced by ``vertices``.

    Weights are flipped to ``top - w`` and solved as a maximum-cardinality
    maximum-weight matching: every perfect matching has the same size, so
    maximising the flipped sum minimises the original one.
    """
    _check_even(vertices)
    result = Matching(MatchingStrategy.EXACT)
    if not vertices:
        return result
    values = matrix.values
    nodes = sorted(vertices)
    top = int(values[np.ix_(nodes, nodes)].max()) + 1

    G = nx.Graph()
    G.add_nodes_from(nodes)
    for a, u in enumerate(nodes):
        for v in nodes[a + 1:]:
            if matrix.has_edge(u, v):
                G.add_edge(u, v, weight=top - int(values[u, v]))
    mate = nx.max_weight_matching(G, maxcardinality=True, weight='weight')

    if 2 * len(mate) != len(nodes):
        raise NoFeasibleMatchingError(
            f"only {len(mate)} pairs found for {len(nodes)} odd-degree vertices"
        )
    result.pairs = sorted(Edge.between(u, v, int(values[u, v])) for u, v in mate)
    return result


def greedy_matching(vertices: Sequence[int], matrix: CostMatrix) -> Matching:
    """Nearest-free-partner matching (approximation, not optimal).

    Vertices are taken in index order; each one grabs the cheapest still
    unmatched partner, ties going to the lowest index.
    """
    _check_even(vertices)
    result = Matching(MatchingStrategy.GREEDY)
    nodes = np.array(sorted(vertices), dtype=np.int64)
    if nodes.size == 0:
        return result
    values = matrix.values
    usable = matrix.edge_mask()
    free = np.ones(nodes.size, dtype=bool)

    for a in range(nodes.size):
        if not free[a]:
            continue
        free[a] = False
        u = int(nodes[a])
        candidates = free & usable[u, nodes]
        if not candidates.any():
            raise NoFeasibleMatchingError(f"no free partner left for vertex {u}")
        costs = np.where(candidates, values[u, nodes], np.iinfo(np.int64).max)
        b = int(np.argmin(costs))
        free[b] = False
        v = int(nodes[b])
        result.pairs.append(Edge.between(u, v, int(values[u, v])))
    return result


def min_weight_perfect_matching(vertices: Sequence[int], matrix: CostMatrix,
                                strategy: MatchingStrategy = MatchingStrategy.EXACT) -> Matching:
    if strategy is MatchingStrategy.EXACT:
        matching = exact_matching(vertices, matrix)
    elif strategy is MatchingStrategy.GREEDY:
        matching = greedy_matching(vertices, matrix)
    else:
        raise ValueError(f"Unknown matching strategy: {strategy}")
    logger.debug("%s matching: %d pairs, weight %d", strategy.value, len(matching), matching.weight)
    return matching
