"""Tests for the constrained shortest path search."""

from __future__ import annotations

import random

import networkx as nx
import pytest

from graphlog.domain.checker import check_path
from graphlog.domain.constraints import ConstraintSet
from graphlog.domain.csp import constrained_shortest_path
from graphlog.domain.errors import InvalidConstraint, SearchAborted
from graphlog.domain.graph import Graph
from graphlog.domain.limits import SearchBudget, SearchLimits
from graphlog.domain.paths import NoSolution, ScoredPath
from tests.conftest import make_graph


@pytest.fixture
def square() -> Graph:
    return make_graph((1, 2), (2, 3), (3, 4), (4, 1), (2, 4))


def _solve(graph: Graph, start: int, end: int, **fields: object) -> ScoredPath | NoSolution:
    c = ConstraintSet(**fields)
    result = constrained_shortest_path(graph, start, end, c)
    if isinstance(result, ScoredPath):
        assert check_path(result, graph, c, start, end) == []
    return result


class TestUnconstrained:
    def test_shortest_route(self, square: Graph) -> None:
        assert _solve(square, 1, 4) == ScoredPath((1, 2, 4), 2)

    def test_start_equals_end(self, square: Graph) -> None:
        assert _solve(square, 3, 3) == ScoredPath((3,), 0)

    def test_unreachable(self) -> None:
        g = make_graph((1, 2), (3, 4))
        result = _solve(g, 1, 4)
        assert isinstance(result, NoSolution)
        assert "not reachable" in result.reason

    def test_weights_beat_hop_count(self) -> None:
        g = make_graph((1, 2, 5), (1, 3), (3, 2))
        assert _solve(g, 1, 2) == ScoredPath((1, 3, 2), 2)

    def test_ties_go_to_lowest_ids(self) -> None:
        g = make_graph((1, 3), (1, 2), (3, 4), (2, 4))
        assert _solve(g, 1, 4) == ScoredPath((1, 2, 4), 2)

    def test_unknown_endpoint_is_invalid(self, square: Graph) -> None:
        with pytest.raises(InvalidConstraint):
            constrained_shortest_path(square, 1, 99)


class TestVertexConstraints:
    def test_excluding_the_only_exit(self, square: Graph) -> None:
        assert isinstance(_solve(square, 1, 4, exclude_vertices=frozenset({2})), NoSolution)

    def test_include_forces_detour(self, square: Graph) -> None:
        assert _solve(square, 1, 4, include_vertices=frozenset({3})) == ScoredPath((1, 2, 3, 4), 3)

    def test_exclude_edge(self, square: Graph) -> None:
        assert _solve(square, 1, 4, exclude_edges=frozenset({(2, 4)})) == ScoredPath((1, 2, 3, 4), 3)

    def test_ordered_vertices(self) -> None:
        g = make_graph((1, 2), (1, 3), (2, 3), (3, 2), (2, 4), (3, 4))
        assert _solve(g, 1, 4, ordered_vertices=(3, 2)) == ScoredPath((1, 3, 2, 4), 3)
        assert _solve(g, 1, 4, ordered_vertices=(2, 3)) == ScoredPath((1, 2, 3, 4), 3)

    def test_impossible_order(self) -> None:
        g = make_graph((1, 2), (2, 3), (3, 2), (2, 4))
        assert isinstance(_solve(g, 1, 4, ordered_vertices=(3, 2)), NoSolution)

    def test_earlier_ordered_vertex_cannot_follow_a_later_one(self) -> None:
        g = make_graph((1, 2), (2, 3), (3, 2), (2, 4), (3, 4, 5))
        assert _solve(g, 1, 4, ordered_vertices=(2, 3)) == ScoredPath((1, 2, 3, 4), 7)

    def test_latest_ordered_vertex_may_be_revisited(self) -> None:
        g = make_graph((1, 2), (2, 5), (5, 2), (2, 3), (3, 4))
        c = {"ordered_vertices": (2, 3), "include_vertices": frozenset({2, 5})}
        assert _solve(g, 1, 4, **c) == ScoredPath((1, 2, 5, 2, 3, 4), 5)

    def test_revisit_to_collect_included_vertex(self) -> None:
        g = make_graph((1, 2), (2, 3), (3, 2), (2, 4))
        assert _solve(g, 1, 4, include_vertices=frozenset({3})) == ScoredPath((1, 2, 3, 2, 4), 4)


class TestCycleFlags:
    def test_require_cycle(self) -> None:
        g = make_graph((1, 2), (2, 3), (3, 2), (3, 4))
        assert _solve(g, 1, 4) == ScoredPath((1, 2, 3, 4), 3)
        result = _solve(g, 1, 4, require_cycle=True)
        assert result == ScoredPath((1, 2, 3, 2, 3, 4), 5)

    def test_require_cycle_from_start_back_to_start(self) -> None:
        g = make_graph((1, 2), (2, 1))
        assert _solve(g, 1, 1, require_cycle=True) == ScoredPath((1, 2, 1), 2)

    def test_require_cycle_on_acyclic_graph(self) -> None:
        dag = make_graph((1, 2), (2, 3))
        assert isinstance(_solve(dag, 1, 3, require_cycle=True), NoSolution)

    def test_forbid_cycle_blocks_revisit(self) -> None:
        g = make_graph((1, 2), (2, 3), (3, 2), (2, 4))
        c = {"include_vertices": frozenset({3}), "forbid_cycle": True}
        assert isinstance(_solve(g, 1, 4, **c), NoSolution)


class TestBounds:
    def test_min_length_takes_longer_route(self) -> None:
        g = make_graph((1, 2), (2, 3), (1, 3))
        assert _solve(g, 1, 3) == ScoredPath((1, 3), 1)
        assert _solve(g, 1, 3, min_length=3) == ScoredPath((1, 2, 3), 2)

    def test_exact_length(self, square: Graph) -> None:
        assert _solve(square, 1, 4, exact_length=4) == ScoredPath((1, 2, 3, 4), 3)

    def test_max_length_too_small(self, square: Graph) -> None:
        assert isinstance(_solve(square, 1, 3, max_length=2), NoSolution)

    def test_min_score_with_weights(self) -> None:
        g = make_graph((1, 2, 1), (2, 4, 1), (1, 3, 2), (3, 4, 2))
        assert _solve(g, 1, 4) == ScoredPath((1, 2, 4), 2)
        assert _solve(g, 1, 4, min_score=3) == ScoredPath((1, 3, 4), 4)

    def test_max_score_rules_out_everything(self) -> None:
        g = make_graph((1, 2, 3), (2, 3, 3))
        assert isinstance(_solve(g, 1, 3, max_score=5), NoSolution)

    def test_exact_score_may_need_a_cycle(self) -> None:
        g = make_graph((1, 2), (2, 1), (2, 3))
        assert _solve(g, 1, 3, exact_score=4) == ScoredPath((1, 2, 1, 2, 3), 4)


class TestLimits:
    def test_expansion_limit_aborts(self, square: Graph) -> None:
        budget = SearchBudget(SearchLimits(max_expansions=1))
        with pytest.raises(SearchAborted) as info:
            constrained_shortest_path(square, 1, 4, budget=budget)
        assert info.value.exit_code == 6

    def test_budget_counts_expansions(self, square: Graph) -> None:
        budget = SearchBudget()
        constrained_shortest_path(square, 1, 4, budget=budget)
        assert budget.expansions > 0


class TestAgainstNetworkx:
    def test_random_graphs_match_dijkstra(self) -> None:
        rng = random.Random(7)
        for _ in range(40):
            n = rng.randint(2, 9)
            edges = [
                (u, v, rng.randint(1, 5))
                for u in range(1, n + 1)
                for v in range(1, n + 1)
                if u != v and rng.random() < 0.3
            ]
            g = Graph.from_edges(edges, vertices=range(1, n + 1))
            nxg = g.to_networkx()
            start, end = rng.randint(1, n), rng.randint(1, n)
            result = _solve(g, start, end)
            if nx.has_path(nxg, start, end):
                assert isinstance(result, ScoredPath)
                assert result.score == nx.dijkstra_path_length(nxg, start, end)
            else:
                assert isinstance(result, NoSolution)
