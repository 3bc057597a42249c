"""Graph snapshot and the materializer that replays commands into it.

The snapshot is an owned, immutable value: :func:`build` returns a fresh
:class:`Graph` per invocation and nothing mutates it afterwards, so every
search branch can share it freely.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from graphlog.domain.commands import (
    DEFAULT_WEIGHT,
    AddEdge,
    AddVertex,
    Command,
    RemoveEdge,
    RemoveVertex,
)

if TYPE_CHECKING:
    import networkx as nx

type Adjacency = tuple[tuple[int, int], ...]


class Graph:
    """Read-only directed graph with weighted forward and reverse adjacency.

    Neighbour tuples are sorted by vertex id, which fixes the exploration
    order of every search built on top of the snapshot.
    """

    __slots__ = ("_edge_count", "_min_weight", "_pred", "_succ", "_vertices", "_weights")

    def __init__(self, succ: dict[int, dict[int, int]]) -> None:
        pred: dict[int, dict[int, int]] = {v: {} for v in succ}
        weights: dict[tuple[int, int], int] = {}
        for u, targets in succ.items():
            for v, w in targets.items():
                pred[v][u] = w
                weights[(u, v)] = w

        self._vertices: tuple[int, ...] = tuple(sorted(succ))
        self._succ: dict[int, Adjacency] = {
            u: tuple(sorted(targets.items())) for u, targets in succ.items()
        }
        self._pred: dict[int, Adjacency] = {
            v: tuple(sorted(sources.items())) for v, sources in pred.items()
        }
        self._weights = weights
        self._edge_count = len(weights)
        self._min_weight = min(weights.values(), default=0)

    # -- construction helpers ------------------------------------------

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[int, int] | tuple[int, int, int]],
        *,
        vertices: Iterable[int] = (),
    ) -> Graph:
        """Build a graph directly from ``(u, v)`` or ``(u, v, w)`` tuples."""
        commands: list[Command] = [AddVertex(v) for v in vertices]
        for edge in edges:
            commands.append(AddEdge(*edge))
        return build(commands)

    # -- vertices --------------------------------------------------------

    @property
    def vertices(self) -> tuple[int, ...]:
        """All vertex ids in ascending order."""
        return self._vertices

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._succ

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[int]:
        return iter(self._vertices)

    def is_empty(self) -> bool:
        return not self._vertices

    # -- edges -----------------------------------------------------------

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def min_weight(self) -> int:
        """Smallest edge weight in the graph (0 for an edgeless graph)."""
        return self._min_weight

    def has_edge(self, source: int, target: int) -> bool:
        return (source, target) in self._weights

    def weight(self, source: int, target: int) -> int | None:
        """Weight of ``source -> target``, or None if the edge is absent."""
        return self._weights.get((source, target))

    def successors(self, vertex: int) -> Adjacency:
        """``(neighbour, weight)`` pairs for out-edges, ascending by neighbour."""
        return self._succ.get(vertex, ())

    def predecessors(self, vertex: int) -> Adjacency:
        """``(predecessor, weight)`` pairs for in-edges, ascending by predecessor."""
        return self._pred.get(vertex, ())

    def out_degree(self, vertex: int) -> int:
        return len(self.successors(vertex))

    def in_degree(self, vertex: int) -> int:
        return len(self.predecessors(vertex))

    def edges(self) -> list[tuple[int, int, int]]:
        """All ``(source, target, weight)`` triples in ascending order."""
        return [(u, v, w) for u in self._vertices for v, w in self._succ[u]]

    # -- conversions -----------------------------------------------------

    def as_commands(self) -> list[Command]:
        """Minimal command sequence that rebuilds this graph from empty.

        Edges create their endpoints, so only isolated vertices get an
        explicit ``AddVertex``.
        """
        commands: list[Command] = [
            AddVertex(v) for v in self._vertices if not self._succ[v] and not self._pred[v]
        ]
        commands.extend(AddEdge(u, v, w) for u, v, w in self.edges())
        return commands

    def to_networkx(self) -> nx.DiGraph[int]:
        """Copy the snapshot into a NetworkX DiGraph (``weight`` edge attribute)."""
        import networkx as nx

        g: nx.DiGraph[int] = nx.DiGraph()
        # Add all vertices first so isolated ones are visible to algorithms
        g.add_nodes_from(self._vertices)
        g.add_weighted_edges_from(self.edges())
        return g

    # -- comparison ------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return self._vertices == other._vertices and self._weights == other._weights

    def __hash__(self) -> int:
        return hash((self._vertices, frozenset(self._weights.items())))

    def __repr__(self) -> str:
        return f"Graph(vertices={self.vertex_count}, edges={self.edge_count})"


class GraphBuilder:
    """Mutable adjacency used while replaying commands."""

    def __init__(self) -> None:
        self._succ: dict[int, dict[int, int]] = {}
        self._pred: dict[int, dict[int, int]] = {}

    def add_vertex(self, vertex: int) -> None:
        if vertex not in self._succ:
            self._succ[vertex] = {}
            self._pred[vertex] = {}

    def add_edge(self, source: int, target: int, weight: int = DEFAULT_WEIGHT) -> None:
        self.add_vertex(source)
        self.add_vertex(target)
        self._succ[source][target] = weight
        self._pred[target][source] = weight

    def remove_vertex(self, vertex: int) -> None:
        if vertex not in self._succ:
            return
        # Cascade: drop in- and out-edges before the vertex itself
        for target in self._succ[vertex]:
            self._pred[target].pop(vertex, None)
        for source in self._pred[vertex]:
            self._succ[source].pop(vertex, None)
        del self._succ[vertex]
        del self._pred[vertex]

    def remove_edge(self, source: int, target: int) -> None:
        if source in self._succ and target in self._succ[source]:
            del self._succ[source][target]
            del self._pred[target][source]

    def apply(self, command: Command) -> None:
        match command:
            case AddVertex(vertex=v):
                self.add_vertex(v)
            case AddEdge(source=s, target=t, weight=w):
                self.add_edge(s, t, w)
            case RemoveVertex(vertex=v):
                self.remove_vertex(v)
            case RemoveEdge(source=s, target=t):
                self.remove_edge(s, t)
            case _:
                msg = f"Not a graph command: {command!r}"
                raise TypeError(msg)

    def freeze(self) -> Graph:
        return Graph({u: dict(targets) for u, targets in self._succ.items()})


def build(commands: Iterable[Command]) -> Graph:
    """Replay *commands* strictly in order and return the resulting snapshot."""
    builder = GraphBuilder()
    for command in commands:
        builder.apply(command)
    return builder.freeze()
