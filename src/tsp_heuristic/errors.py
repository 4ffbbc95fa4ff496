"""Error kinds raised by the tour construction and improvement pipeline."""
from __future__ import annotations

from typing import Optional


class TSPError(Exception):
    """Base class for every failure the solver reports."""


class MalformedInputError(TSPError):
    """Cost matrix (or the file it came from) is not a valid TSP instance."""


class DisconnectedGraphError(TSPError):
    """Spanning tree cannot reach every vertex."""


class NoFeasibleMatchingError(TSPError):
    """Odd-degree vertices cannot be perfectly matched.

    With a complete graph this only happens when the odd set has odd
    cardinality, which would be a bug in the spanning tree step.
    """


class SolveError(TSPError):
    """Raised by :func:`tsp_heuristic.solver.solve` with the root cause chained."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
