"""Tests for MutationService."""

from __future__ import annotations

from graphlog.domain.commands import AddEdge, AddVertex, RemoveEdge, RemoveVertex
from graphlog.infrastructure.workspace import Workspace
from graphlog.services.mutation import MutationService
from tests.conftest import seed


class TestAddVertices:
    def test_appends(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_vertices([3, 1])
        assert result.ok
        assert result.op == "add_vertex"
        assert result.data == {"vertices": [3, 1], "count": 2}
        assert workspace.store.load() == [AddVertex(3), AddVertex(1)]

    def test_invalid_id(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_vertices([1, 0])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_COMMAND"
        assert workspace.store.load() == []

    def test_missing_store(self, store_root) -> None:
        from graphlog.config.settings import GraphlogSettings

        ws = Workspace(GraphlogSettings.from_cli(store_root=store_root))
        result = MutationService(ws).add_vertices([1])
        assert result.error is not None
        assert result.error.code == "IO_ERROR"


class TestAddEdges:
    def test_default_weight(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_edges([(1, 2), (2, 3)])
        assert result.ok
        assert result.data["edges"] == [[1, 2], [2, 3]]
        assert result.data["weight"] == 1
        assert workspace.store.load() == [AddEdge(1, 2), AddEdge(2, 3)]

    def test_weight_requires_weighted_graph(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_edges([(1, 2)], weight=5)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED"
        assert workspace.store.load() == []

    def test_weighted_graph(self, weighted_workspace: Workspace) -> None:
        result = MutationService(weighted_workspace).add_edges([(1, 2)], weight=5)
        assert result.ok
        assert weighted_workspace.graph.graph.weight(1, 2) == 5


class TestAddShape:
    def test_chain(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_shape("chain", [1, 2, 3])
        assert result.op == "add_chain"
        assert result.data["edges"] == [[1, 2], [2, 3]]
        assert workspace.store.load() == [AddEdge(1, 2), AddEdge(2, 3)]

    def test_reversed_star(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_shape("star", [1, 2, 3], reverse=True)
        assert result.data["edges"] == [[2, 1], [3, 1]]

    def test_cycle(self, workspace: Workspace) -> None:
        MutationService(workspace).add_shape("cycle", [4, 5, 6])
        graph = workspace.graph.graph
        assert graph.has_edge(6, 4)
        assert graph.edge_count == 3

    def test_clique(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_shape("clique", [1, 2, 3])
        assert result.data["count"] == 6

    def test_single_vertex_chain_adds_the_vertex(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_shape("chain", [7])
        assert result.data["edges"] == []
        assert workspace.store.load() == [AddVertex(7)]

    def test_weighted_shape_rejected(self, workspace: Workspace) -> None:
        result = MutationService(workspace).add_shape("cycle", [1, 2], weight=3)
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED"


class TestRemove:
    def test_remove_vertex_reports_cascade(self, workspace: Workspace) -> None:
        seed(workspace, (1, 2), (2, 3), (3, 2))
        result = MutationService(workspace).remove_vertices([2])
        assert result.ok
        assert result.data["cascaded_edges"] == 3
        assert result.warnings == []
        assert workspace.store.load()[-1] == RemoveVertex(2)
        assert workspace.graph.graph.edge_count == 0

    def test_remove_absent_vertex_warns(self, workspace: Workspace) -> None:
        result = MutationService(workspace).remove_vertices([9])
        assert result.ok
        assert result.warnings == ["Vertex 9 is not in the graph"]
        assert workspace.store.load() == [RemoveVertex(9)]

    def test_remove_edge(self, workspace: Workspace) -> None:
        seed(workspace, (1, 2))
        result = MutationService(workspace).remove_edges([(1, 2), (2, 1)])
        assert result.warnings == ["Edge 2->1 is not in the graph"]
        assert workspace.store.load()[-2:] == [RemoveEdge(1, 2), RemoveEdge(2, 1)]
        assert workspace.graph.graph.vertices == (1, 2)
