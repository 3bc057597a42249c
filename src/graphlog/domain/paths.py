"""Search result values: scored paths, cycles, and the no-solution marker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ScoredPath:
    """A start→end walk with its summed edge weight.

    ``length`` counts vertices, repeats included.
    """

    vertices: tuple[int, ...]
    score: int

    @property
    def length(self) -> int:
        return len(self.vertices)

    @property
    def start(self) -> int:
        return self.vertices[0]

    @property
    def end(self) -> int:
        return self.vertices[-1]

    def edges(self) -> list[tuple[int, int]]:
        return list(zip(self.vertices, self.vertices[1:], strict=False))

    def has_repeat(self) -> bool:
        return len(set(self.vertices)) != len(self.vertices)

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.vertices), "length": self.length, "score": self.score}


@dataclass(frozen=True, slots=True)
class Cycle:
    """A simple cycle, stored as a closed walk (first vertex repeated last).

    ``length`` counts distinct vertices, so ``[1, 2, 3, 1]`` has length 3.
    """

    vertices: tuple[int, ...]
    score: int

    @property
    def length(self) -> int:
        return len(self.vertices) - 1

    @property
    def start(self) -> int:
        return self.vertices[0]

    def members(self) -> tuple[int, ...]:
        """Distinct vertices in traversal order (closing repeat dropped)."""
        return self.vertices[:-1]

    def edges(self) -> list[tuple[int, int]]:
        return list(zip(self.vertices, self.vertices[1:], strict=False))

    def canonical(self) -> Cycle:
        """Rotation of this cycle that starts at its minimum vertex id."""
        ring = self.members()
        pivot = ring.index(min(ring))
        rotated = ring[pivot:] + ring[:pivot]
        return Cycle((*rotated, rotated[0]), self.score)

    def is_canonical(self) -> bool:
        return self.vertices[0] == min(self.vertices)

    def to_dict(self) -> dict[str, Any]:
        return {"cycle": list(self.vertices), "length": self.length, "score": self.score}


@dataclass(frozen=True, slots=True)
class NoSolution:
    """Search exhausted without a satisfying path or cycle.

    A normal outcome, distinct from every error kind.
    """

    reason: str = "no satisfying result"

    def to_dict(self) -> dict[str, Any]:
        return {"found": False, "reason": self.reason}


def cycle_sort_key(cycle: Cycle) -> tuple[int, int, int, tuple[int, ...]]:
    """Ordering used by ``shortest``: length, score, start vertex, sequence."""
    return (cycle.length, cycle.score, cycle.start, cycle.vertices)
