"""Tests for the materializer and the Graph snapshot."""

from __future__ import annotations

import random

import networkx as nx

from graphlog.domain.commands import AddEdge, AddVertex, Command, RemoveEdge, RemoveVertex
from graphlog.domain.graph import Graph, build

from tests.conftest import make_graph


class TestReplay:
    def test_empty(self) -> None:
        g = build([])
        assert g.is_empty()
        assert g.edge_count == 0
        assert g.min_weight == 0

    def test_add_edge_creates_endpoints(self) -> None:
        g = build([AddEdge(1, 2)])
        assert g.vertices == (1, 2)
        assert g.has_edge(1, 2)
        assert not g.has_edge(2, 1)

    def test_add_vertex_is_idempotent(self) -> None:
        g = build([AddVertex(1), AddEdge(1, 2), AddVertex(1)])
        assert g.has_edge(1, 2)
        assert g.vertex_count == 2

    def test_later_add_replaces_weight(self) -> None:
        g = build([AddEdge(1, 2, 5), AddEdge(1, 2, 2)])
        assert g.weight(1, 2) == 2
        assert g.edge_count == 1

    def test_remove_vertex_cascades(self) -> None:
        g = build([AddEdge(1, 2), AddEdge(2, 3), AddEdge(3, 2), RemoveVertex(2)])
        assert g.vertices == (1, 3)
        assert g.edge_count == 0
        assert g.successors(1) == ()
        assert g.predecessors(3) == ()

    def test_removing_absent_things_is_a_no_op(self) -> None:
        g = build([AddEdge(1, 2), RemoveVertex(9), RemoveEdge(2, 1), RemoveEdge(7, 8)])
        assert g == build([AddEdge(1, 2)])

    def test_readded_vertex_has_no_memory(self) -> None:
        g = build([AddEdge(1, 2), AddEdge(2, 1), RemoveVertex(2), AddVertex(2)])
        assert g.vertices == (1, 2)
        assert g.edge_count == 0

    def test_order_matters(self) -> None:
        a = build([AddEdge(1, 2), RemoveEdge(1, 2)])
        b = build([RemoveEdge(1, 2), AddEdge(1, 2)])
        assert not a.has_edge(1, 2)
        assert b.has_edge(1, 2)

    def test_self_loop(self) -> None:
        g = build([AddEdge(4, 4)])
        assert g.has_edge(4, 4)
        assert g.in_degree(4) == 1
        assert g.out_degree(4) == 1


class TestSnapshot:
    def test_neighbours_are_sorted(self) -> None:
        g = make_graph((1, 9), (1, 3), (1, 5, 2), (7, 1))
        assert g.successors(1) == ((3, 1), (5, 2), (9, 1))
        assert g.predecessors(1) == ((7, 1),)

    def test_edges_sorted_with_weights(self) -> None:
        g = make_graph((2, 1), (1, 3, 4), (1, 2))
        assert g.edges() == [(1, 2, 1), (1, 3, 4), (2, 1, 1)]
        assert g.min_weight == 1

    def test_isolated_vertices_are_kept(self) -> None:
        g = make_graph((1, 2), vertices=[5])
        assert 5 in g
        assert len(g) == 3

    def test_as_commands_rebuilds_same_graph(self) -> None:
        g = build([AddEdge(3, 1, 2), AddVertex(8), AddEdge(1, 2), RemoveVertex(2), AddEdge(1, 3)])
        assert build(g.as_commands()) == g

    def test_to_networkx(self) -> None:
        g = make_graph((1, 2, 3), (2, 3), vertices=[4])
        nxg = g.to_networkx()
        assert sorted(nxg.nodes) == [1, 2, 3, 4]
        assert nxg[1][2]["weight"] == 3
        assert nx.number_of_edges(nxg) == 2

    def test_equality_and_hash(self) -> None:
        a = make_graph((1, 2), (2, 3))
        b = build([AddEdge(2, 3), AddEdge(1, 2)])
        assert a == b
        assert hash(a) == hash(b)
        assert a != make_graph((1, 2))


class TestReplayMatchesDirectApplication:
    """Replay equals applying the same operations to a networkx graph."""

    @staticmethod
    def _random_commands(rng: random.Random, n: int) -> list[Command]:
        commands: list[Command] = []
        for _ in range(n):
            u, v = rng.randint(1, 8), rng.randint(1, 8)
            kind = rng.random()
            if kind < 0.15:
                commands.append(AddVertex(u))
            elif kind < 0.65:
                commands.append(AddEdge(u, v, rng.randint(1, 4)))
            elif kind < 0.8:
                commands.append(RemoveVertex(u))
            else:
                commands.append(RemoveEdge(u, v))
        return commands

    @staticmethod
    def _apply_directly(commands: list[Command]) -> nx.DiGraph:
        g = nx.DiGraph()
        for cmd in commands:
            match cmd:
                case AddVertex(vertex=v):
                    g.add_node(v)
                case AddEdge(source=s, target=t, weight=w):
                    g.add_edge(s, t, weight=w)
                case RemoveVertex(vertex=v):
                    if v in g:
                        g.remove_node(v)
                case RemoveEdge(source=s, target=t):
                    if g.has_edge(s, t):
                        g.remove_edge(s, t)
        return g

    def test_random_sequences(self) -> None:
        rng = random.Random(20240611)
        for _ in range(50):
            commands = self._random_commands(rng, rng.randint(0, 40))
            expected = self._apply_directly(commands)
            got = build(commands)
            assert set(got.vertices) == set(expected.nodes)
            assert {(u, v, w) for u, v, w in got.edges()} == {
                (u, v, d["weight"]) for u, v, d in expected.edges(data=True)
            }
            assert Graph.from_edges(got.edges(), vertices=got.vertices) == got
