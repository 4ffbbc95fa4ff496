import time

import numpy as np
import pytest

from tsp_heuristic.euler import christofides_tour
from tsp_heuristic.local_search import (
    DEADLINE,
    LOCAL_OPTIMUM,
    MAX_PASSES,
    SegmentCosts,
    local_search,
    or_opt_delta,
    scan_costs,
    two_opt_delta,
)
from tsp_heuristic.matrix import CostMatrix
from tsp_heuristic.tour import Tour

from conftest import random_asymmetric, random_euclidean


def _shuffled(n, seed=0):
    rng = np.random.default_rng(seed)
    return Tour(rng.permutation(n))


@pytest.mark.parametrize('matrix', [random_euclidean(12, seed=1), random_asymmetric(12, seed=1)],
                         ids=['symmetric', 'asymmetric'])
def test_two_opt_delta_matches_recomputed_cost(matrix):
    tour = _shuffled(12, seed=2)
    base = tour.cost(matrix)
    segments = None if matrix.is_symmetric else SegmentCosts(tour.order, matrix.values)
    for i in range(1, 11):
        for k in range(i + 1, 12):
            moved = tour.copy()
            moved.reverse(i, k)
            assert two_opt_delta(matrix, tour.order, i, k, segments) == moved.cost(matrix) - base


@pytest.mark.parametrize('matrix', [random_euclidean(10, seed=4), random_asymmetric(10, seed=4)],
                         ids=['symmetric', 'asymmetric'])
def test_or_opt_delta_matches_recomputed_cost(matrix):
    n = 10
    tour = _shuffled(n, seed=5)
    base = tour.cost(matrix)
    for length in (1, 2, 3):
        for start in range(n):
            span = {(start + t) % n for t in range(length)}
            for after in range(n):
                if after in span or after == (start - 1) % n:
                    continue
                moved = tour.copy()
                moved.relocate(start, length, after)
                assert or_opt_delta(matrix, tour.order, start, length, after) == moved.cost(matrix) - base


@pytest.mark.parametrize('matrix', [random_euclidean(40, seed=8), random_asymmetric(40, seed=8)],
                         ids=['symmetric', 'asymmetric'])
def test_cost_never_increases_and_is_tracked(matrix):
    tour = _shuffled(40, seed=9)
    before = tour.cost(matrix)
    result = local_search(tour, matrix)
    assert tour.is_valid(40)
    assert result.initial_cost == before
    assert result.final_cost == tour.cost(matrix)
    assert result.final_cost <= before
    assert result.moves == result.two_opt_moves + result.or_opt_moves
    assert result.stop_reason == LOCAL_OPTIMUM


def test_second_run_is_idempotent(euclidean30):
    tour = _shuffled(30, seed=1)
    local_search(tour, euclidean30)
    settled = tour.copy()
    again = local_search(tour, euclidean30)
    assert again.moves == 0
    assert again.passes == 1
    assert again.final_cost == again.initial_cost
    assert tour == settled


def test_move_sequence_is_deterministic(euclidean30):
    a, b = _shuffled(30, seed=3), _shuffled(30, seed=3)
    ra = local_search(a, euclidean30)
    rb = local_search(b, euclidean30)
    assert a == b
    assert (ra.moves, ra.two_opt_moves, ra.final_cost) == (rb.moves, rb.two_opt_moves, rb.final_cost)


def test_optimal_three_vertex_tour_untouched():
    matrix = CostMatrix([[0, 1, 9], [9, 0, 1], [1, 9, 0]])
    tour = Tour([0, 1, 2])
    result = local_search(tour, matrix)
    assert result.moves == 0
    assert result.final_cost == 3
    assert tour == [0, 1, 2]


def test_asymmetric_three_vertex_tour_is_reversed():
    matrix = CostMatrix([[0, 1, 9], [9, 0, 1], [1, 9, 0]])
    tour = Tour([0, 2, 1])
    result = local_search(tour, matrix)
    assert result.initial_cost == 27
    assert result.final_cost == 3
    assert tour.cost(matrix) == 3


def test_expired_deadline_returns_tour_unchanged(euclidean30):
    tour = _shuffled(30, seed=4)
    original = tour.copy()
    result = local_search(tour, euclidean30, deadline=time.monotonic() - 1.0)
    assert result.moves == 0
    assert result.passes == 0
    assert result.stop_reason == DEADLINE
    assert tour == original


def test_max_passes_bounds_the_search(euclidean30):
    tour = _shuffled(30, seed=6)
    result = local_search(tour, euclidean30, max_passes=2)
    assert result.passes == 2
    assert result.moves == 2
    assert result.stop_reason == MAX_PASSES


def test_two_opt_only_removes_crossing():
    # square 0-1-2-3 visited as 0-2-1-3 crosses itself
    matrix = CostMatrix([[0, 10, 14, 10], [10, 0, 10, 14], [14, 10, 0, 10], [10, 14, 10, 0]])
    tour = Tour([0, 2, 1, 3])
    result = local_search(tour, matrix, enable_or_opt=False)
    assert result.two_opt_moves == 1
    assert result.or_opt_moves == 0
    assert result.final_cost == 40


def test_or_opt_only():
    tour = _shuffled(30, seed=2)
    matrix = random_euclidean(30, seed=2)
    result = local_search(tour, matrix, enable_two_opt=False)
    assert result.two_opt_moves == 0
    assert result.final_cost <= result.initial_cost


def test_no_moves_enabled():
    tour = _shuffled(10)
    result = local_search(tour, random_euclidean(10), enable_two_opt=False, enable_or_opt=False)
    assert result.moves == 0
    assert result.passes == 0


@pytest.mark.parametrize('rows, order', [([[0]], [0]), ([[0, 5], [5, 0]], [1, 0])])
def test_tiny_tours_are_left_alone(rows, order):
    tour = Tour(order)
    result = local_search(tour, CostMatrix(rows))
    assert result.moves == 0
    assert tour == order


def test_improves_christofides_without_losing_vertices():
    matrix = random_euclidean(80, seed=21)
    tour = christofides_tour(matrix)
    result = local_search(tour, matrix)
    assert tour.is_valid(80)
    assert result.final_cost <= result.initial_cost


def _with_missing_pair(matrix, u, v, no_edge):
    values = matrix.values.copy()
    values[u, v] = values[v, u] = no_edge
    return CostMatrix(values, no_edge=no_edge)


def _adjacent(order, u, v):
    n = len(order)
    return any({order[p], order[(p + 1) % n]} == {u, v} for p in range(n))


def test_scan_costs_prices_missing_pairs_above_any_tour():
    matrix = _with_missing_pair(random_euclidean(8, seed=3), 2, 5, 0)
    costs = scan_costs(matrix)
    assert costs[2, 5] == costs[5, 2] > 8 * matrix.values.max()
    assert costs[0, 0] == 0
    assert costs[1, 3] == matrix[1, 3]
    plain = random_euclidean(8, seed=3)
    assert scan_costs(plain) is plain.values


@pytest.mark.parametrize('no_edge', [0, -1])
def test_missing_pair_is_moved_out_of_the_tour(no_edge):
    matrix = _with_missing_pair(random_euclidean(12, seed=6), 0, 1, no_edge)
    tour = Tour(range(12))
    result = local_search(tour, matrix)
    assert tour.is_valid(12)
    assert not _adjacent(tour.order, 0, 1)
    assert result.final_cost == tour.cost(matrix)
    assert result.moves > 0
