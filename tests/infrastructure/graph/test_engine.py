"""Tests for the lazy graph engine."""

from __future__ import annotations

from pathlib import Path

from graphlog.domain.commands import AddEdge
from graphlog.infrastructure.graph.engine import GraphEngine
from graphlog.infrastructure.store import CommandLogStore


class TestGraphEngine:
    def test_lazy(self, tmp_path: Path) -> None:
        store = CommandLogStore(tmp_path, fsync=False)
        store.init()
        engine = GraphEngine(store)
        assert not engine.is_built
        assert engine.builds == 0

    def test_builds_once(self, tmp_path: Path) -> None:
        store = CommandLogStore(tmp_path, fsync=False)
        store.init()
        store.append(AddEdge(1, 2))
        engine = GraphEngine(store)
        first = engine.graph
        assert engine.graph is first
        assert engine.builds == 1
        assert first.has_edge(1, 2)

    def test_invalidate_rebuilds(self, tmp_path: Path) -> None:
        store = CommandLogStore(tmp_path, fsync=False)
        store.init()
        engine = GraphEngine(store)
        assert engine.graph.is_empty()
        store.append(AddEdge(1, 2))
        engine.invalidate()
        assert engine.graph.has_edge(1, 2)
        assert engine.builds == 2
