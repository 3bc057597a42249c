"""Edge-pattern helpers used to seed graphs: chain, cycle, star, clique."""

from __future__ import annotations

from collections.abc import Sequence

from graphlog.domain.errors import InvalidCommand

type EdgePair = tuple[int, int]


def chain_edges(vertices: Sequence[int]) -> list[EdgePair]:
    """``v0 -> v1 -> ... -> vn``."""
    return list(zip(vertices, vertices[1:], strict=False))


def cycle_edges(vertices: Sequence[int]) -> list[EdgePair]:
    """A chain closed back to its first vertex."""
    if not vertices:
        raise InvalidCommand("A cycle needs at least one vertex")
    return chain_edges([*vertices, vertices[0]])


def star_edges(vertices: Sequence[int]) -> list[EdgePair]:
    """The first vertex is the centre; every edge points away from it."""
    if not vertices:
        return []
    centre, *leaves = vertices
    return [(centre, leaf) for leaf in leaves]


def clique_edges(vertices: Sequence[int]) -> list[EdgePair]:
    """Every ordered pair of distinct vertices."""
    return [(u, v) for u in vertices for v in vertices if u != v]


def reverse_edges(edges: Sequence[EdgePair]) -> list[EdgePair]:
    return [(v, u) for u, v in edges]


SHAPES = {
    "chain": chain_edges,
    "cycle": cycle_edges,
    "star": star_edges,
    "clique": clique_edges,
}
