"""Mutable Hamiltonian cycle with position-based moves."""
from __future__ import annotations

from typing import Iterable, Iterator, List

from .matrix import tour_cost


class Tour:
    """Cyclic visiting order of all vertices.

    Positions index into :attr:`order`; moves rewrite ``order`` in place so
    every holder of the tour sees the change.
    """

    def __init__(self, order: Iterable[int]):
        self.order: List[int] = [int(v) for v in order]

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[int]:
        return iter(self.order)

    def __getitem__(self, pos: int) -> int:
        return self.order[pos]

    def __eq__(self, other) -> bool:
        if isinstance(other, Tour):
            return self.order == other.order
        if isinstance(other, (list, tuple)):
            return self.order == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Tour({self.order})"

    def copy(self) -> 'Tour':
        return Tour(self.order)

    def cost(self, matrix) -> int:
        return tour_cost(self.order, matrix)

    def is_valid(self, n: int) -> bool:
        """True when every vertex of ``[0, n)`` appears exactly once."""
        return len(self.order) == n and sorted(self.order) == list(range(n))

    def position(self, vertex: int) -> int:
        return self.order.index(vertex)

    def reverse(self, i: int, k: int) -> None:
        """2-opt: reverse the segment between positions ``i`` and ``k`` inclusive."""
        if not 0 <= i < k < len(self.order):
            raise IndexError(f"invalid segment [{i}, {k}] for tour of length {len(self.order)}")
        self.order[i:k + 1] = self.order[i:k + 1][::-1]

    def relocate(self, start: int, length: int, after: int) -> None:
        """Or-opt: move ``length`` vertices starting at ``start`` behind position ``after``.

        The segment is taken cyclically, keeps its direction and is inserted
        between the vertex at ``after`` and its current successor. The vertex
        leading the tour stays in front unless it was part of the segment.
        """
        n = len(self.order)
        if not 1 <= length <= n - 2:
            raise ValueError(f"segment length {length} out of range for tour of length {n}")
        span = [(start + t) % n for t in range(length)]
        if after % n in span or after % n == (start - 1) % n:
            raise ValueError(f"position {after} is not a new insertion point for segment at {start}")
        head = self.order[0]
        segment = [self.order[p] for p in span]
        rest = [self.order[(start + length + t) % n] for t in range(n - length)]
        anchor = rest.index(self.order[after % n])
        moved = rest[:anchor + 1] + segment + rest[anchor + 1:]
        if head not in segment:
            p = moved.index(head)
            moved = moved[p:] + moved[:p]
        self.order[:] = moved

    def rotate_to(self, vertex: int) -> None:
        p = self.order.index(vertex)
        self.order[:] = self.order[p:] + self.order[:p]
