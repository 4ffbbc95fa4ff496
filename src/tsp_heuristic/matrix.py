"""Read-only integer cost matrix shared by every stage of a solve."""
from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np

from .errors import MalformedInputError


class CostMatrix:
    """Square table of non-negative integer travel costs.

    The input is always copied, so later changes to the caller's list or
    array never leak into a solve. Entries equal to ``no_edge`` (when given)
    mark pairs that have no usable connection; they are kept as-is in the
    table so tour costs stay well defined, but the weighted graph skips them.
    """

    def __init__(self, data, no_edge: Optional[int] = None):
        if isinstance(data, CostMatrix):
            if no_edge is None:
                no_edge = data.no_edge
            data = data.values
        try:
            arr = np.array(data)
        except (TypeError, ValueError) as e:
            raise MalformedInputError(f"cost matrix is not a rectangular table: {e}") from e
        if arr.dtype == object or not (np.issubdtype(arr.dtype, np.integer)
                                       or np.issubdtype(arr.dtype, np.floating)):
            raise MalformedInputError(f"cost matrix must hold numbers, got dtype {arr.dtype}")
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise MalformedInputError(f"cost matrix not square: shape {arr.shape}")
        if arr.shape[0] == 0:
            raise MalformedInputError("cost matrix is empty")
        if np.issubdtype(arr.dtype, np.floating):
            if not np.all(np.isfinite(arr)):
                raise MalformedInputError("cost matrix contains NaN or infinite values")
            if not np.all(arr == np.round(arr)):
                raise MalformedInputError("cost matrix contains non-integer weights")
        values = arr.astype(np.int64)

        negative = values < 0
        if no_edge is not None:
            negative &= values != no_edge
        if negative.any():
            i, j = (int(x) for x in np.argwhere(negative)[0])
            raise MalformedInputError(f"negative weight {values[i, j]} at ({i}, {j})")
        diag = np.diagonal(values)
        if diag.any():
            i = int(np.flatnonzero(diag)[0])
            raise MalformedInputError(f"non-zero diagonal entry {diag[i]} at ({i}, {i})")

        values.flags.writeable = False
        self._values = values
        self._no_edge = None if no_edge is None else int(no_edge)
        self._symmetric = bool(np.array_equal(values, values.T))

    @property
    def values(self) -> np.ndarray:
        """Underlying ``int64`` array (read-only view)."""
        return self._values

    @property
    def n(self) -> int:
        return self._values.shape[0]

    @property
    def no_edge(self) -> Optional[int]:
        return self._no_edge

    @property
    def is_symmetric(self) -> bool:
        return self._symmetric

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, pair) -> int:
        i, j = pair
        return int(self._values[i, j])

    def has_edge(self, i: int, j: int) -> bool:
        if i == j:
            return False
        return self._no_edge is None or int(self._values[i, j]) != self._no_edge

    def edge_mask(self) -> np.ndarray:
        """Boolean NxN mask of usable off-diagonal pairs."""
        mask = ~np.eye(self.n, dtype=bool)
        if self._no_edge is not None:
            mask &= self._values != self._no_edge
        return mask

    def tolist(self):
        return self._values.tolist()

    def __repr__(self) -> str:
        kind = 'symmetric' if self._symmetric else 'asymmetric'
        return f"CostMatrix(n={self.n}, {kind})"


def as_cost_matrix(data, no_edge: Optional[int] = None) -> CostMatrix:
    if isinstance(data, CostMatrix) and no_edge is None:
        return data
    return CostMatrix(data, no_edge=no_edge)


def tour_cost(tour: Sequence[int], matrix: Union[CostMatrix, np.ndarray]) -> int:
    """Closed tour cost, wraparound edge included."""
    values = matrix.values if isinstance(matrix, CostMatrix) else np.asarray(matrix)
    order = np.asarray(list(tour), dtype=np.int64)
    if order.size == 0:
        return 0
    return int(values[order, np.roll(order, -1)].sum())
