import pytest

from tsp_heuristic.tour import Tour


def test_reverse_segment():
    t = Tour(range(6))
    t.reverse(1, 4)
    assert t == [0, 4, 3, 2, 1, 5]


def test_reverse_rejects_bad_positions():
    t = Tour(range(4))
    with pytest.raises(IndexError):
        t.reverse(2, 2)
    with pytest.raises(IndexError):
        t.reverse(1, 4)


def test_relocate_single_vertex():
    t = Tour(range(6))
    t.relocate(1, 1, 4)
    assert t == [0, 2, 3, 4, 1, 5]


def test_relocate_segment_backwards():
    t = Tour(range(7))
    t.relocate(4, 2, 0)
    assert t == [0, 4, 5, 1, 2, 3, 6]


def test_relocate_segment_wrapping_the_head():
    t = Tour(range(6))
    # segment [5, 0] goes between 2 and 3; head moved, so tour restarts after it
    t.relocate(5, 2, 2)
    assert sorted(t.order) == list(range(6))
    i = t.position(2)
    assert [t[(i + k) % 6] for k in range(4)] == [2, 5, 0, 3]


def test_relocate_rejects_noop_targets():
    t = Tour(range(6))
    with pytest.raises(ValueError):
        t.relocate(2, 2, 3)
    with pytest.raises(ValueError):
        t.relocate(2, 2, 1)
    with pytest.raises(ValueError):
        t.relocate(0, 5, 5)


def test_rotate_and_copy():
    t = Tour([3, 1, 0, 2])
    c = t.copy()
    t.rotate_to(0)
    assert t == [0, 2, 3, 1]
    assert c == [3, 1, 0, 2]
    assert t.is_valid(4)
    assert not Tour([0, 1, 1]).is_valid(3)
