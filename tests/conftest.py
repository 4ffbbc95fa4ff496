import numpy as np
import pytest

from tsp_heuristic.distances import euc_2d
from tsp_heuristic.matrix import CostMatrix


def random_euclidean(n, seed=0, scale=1000):
    rng = np.random.default_rng(seed)
    coords = rng.uniform(0, scale, size=(n, 2))
    return CostMatrix(euc_2d(coords))


def random_asymmetric(n, seed=0, high=100):
    rng = np.random.default_rng(seed)
    m = rng.integers(1, high, size=(n, n))
    np.fill_diagonal(m, 0)
    return CostMatrix(m)


def random_symmetric(n, seed=0, high=20):
    rng = np.random.default_rng(seed)
    m = rng.integers(1, high, size=(n, n))
    m = np.triu(m, 1)
    return CostMatrix(m + m.T)


@pytest.fixture
def square():
    # unit square 0-1-2-3, diagonals sqrt(2) rounded to 1
    return CostMatrix([
        [0, 1, 1, 1],
        [1, 0, 1, 1],
        [1, 1, 0, 1],
        [1, 1, 1, 0],
    ])


@pytest.fixture
def euclidean30():
    return random_euclidean(30, seed=7)


@pytest.fixture
def asymmetric20():
    return random_asymmetric(20, seed=3)
