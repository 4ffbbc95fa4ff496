"""Christofides construction and 2-opt / Or-opt local search for the TSP."""
from .errors import (
    DisconnectedGraphError,
    MalformedInputError,
    NoFeasibleMatchingError,
    SolveError,
    TSPError,
)
from .matrix import CostMatrix, tour_cost
from .graph import Edge, WeightedGraph
from .mst import SpanningTree, minimum_spanning_tree
from .matching import Matching, MatchingStrategy, min_weight_perfect_matching
from .euler import christofides_tour, eulerian_circuit, shortcut
from .construction import nearest_neighbor_tour
from .tour import Tour
from .local_search import LocalSearchResult, local_search
from .solver import SolveConfig, TSPSolution, solve

__version__ = '0.1.0'

__all__ = [
    'CostMatrix', 'DisconnectedGraphError', 'Edge', 'LocalSearchResult',
    'MalformedInputError', 'Matching', 'MatchingStrategy', 'NoFeasibleMatchingError',
    'SolveConfig', 'SolveError', 'SpanningTree', 'TSPError', 'TSPSolution', 'Tour',
    'WeightedGraph', 'christofides_tour', 'eulerian_circuit', 'local_search',
    'min_weight_perfect_matching', 'minimum_spanning_tree', 'nearest_neighbor_tour',
    'shortcut', 'solve', 'tour_cost',
]
