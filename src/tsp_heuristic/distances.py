"""TSPLIB distance formulas, vectorised with numpy.

Each formula turns an ``(n, 2)`` coordinate array into a symmetric integer
matrix with a zero diagonal. The formula is picked once from
:class:`EdgeWeightType` when the matrix is built.
"""
from __future__ import annotations

import enum

import numpy as np

from .errors import MalformedInputError
from .matrix import CostMatrix

PI = 3.141592
EARTH_RADIUS = 6378.388


class EdgeWeightType(enum.Enum):
    EXPLICIT = 'EXPLICIT'
    EUC_2D = 'EUC_2D'
    CEIL_2D = 'CEIL_2D'
    GEO = 'GEO'
    ATT = 'ATT'


def _deltas(coords: np.ndarray):
    dx = coords[:, 0][:, None] - coords[:, 0][None, :]
    dy = coords[:, 1][:, None] - coords[:, 1][None, :]
    return dx, dy


def nint(x):
    return np.floor(x + 0.5).astype(np.int64)


def euc_2d(coords: np.ndarray) -> np.ndarray:
    dx, dy = _deltas(coords)
    return nint(np.sqrt(dx * dx + dy * dy))


def ceil_2d(coords: np.ndarray) -> np.ndarray:
    dx, dy = _deltas(coords)
    return np.ceil(np.sqrt(dx * dx + dy * dy)).astype(np.int64)


def att(coords: np.ndarray) -> np.ndarray:
    """Pseudo-Euclidean distance, rounded up when ``nint`` falls short."""
    dx, dy = _deltas(coords)
    r = np.sqrt((dx * dx + dy * dy) / 10.0)
    t = nint(r)
    return np.where(t < r, t + 1, t)


def _geo_radians(values: np.ndarray) -> np.ndarray:
    deg = np.trunc(values)
    minutes = values - deg
    return PI * (deg + 5.0 * minutes / 3.0) / 180.0


def geo(coords: np.ndarray) -> np.ndarray:
    """Great-circle distance in km, latitude/longitude given as DDD.MM."""
    lat = _geo_radians(coords[:, 0])
    lon = _geo_radians(coords[:, 1])
    q1 = np.cos(lon[:, None] - lon[None, :])
    q2 = np.cos(lat[:, None] - lat[None, :])
    q3 = np.cos(lat[:, None] + lat[None, :])
    inner = np.clip(0.5 * ((1.0 + q1) * q2 - (1.0 - q1) * q3), -1.0, 1.0)
    dist = (EARTH_RADIUS * np.arccos(inner) + 1.0).astype(np.int64)
    np.fill_diagonal(dist, 0)
    return dist


FORMULAS = {
    EdgeWeightType.EUC_2D: euc_2d,
    EdgeWeightType.CEIL_2D: ceil_2d,
    EdgeWeightType.ATT: att,
    EdgeWeightType.GEO: geo,
}


def build_matrix(coords, edge_weight_type: EdgeWeightType) -> CostMatrix:
    coords = np.asarray(coords, dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise MalformedInputError(f"expected (n, 2) coordinates, got shape {coords.shape}")
    try:
        formula = FORMULAS[edge_weight_type]
    except KeyError:
        raise MalformedInputError(f"no distance formula for {edge_weight_type.value}") from None
    return CostMatrix(formula(coords))
