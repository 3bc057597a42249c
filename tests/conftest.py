"""Shared pytest fixtures and test helpers for graphlog tests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from graphlog.config.settings import GraphlogSettings
from graphlog.domain.commands import AddEdge, AddVertex, Command
from graphlog.domain.graph import Graph
from graphlog.infrastructure.workspace import Workspace
from graphlog.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_external_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user env vars and telemetry state out of every test."""
    for var in ("GRAPHLOG_CONFIG", "GRAPHLOG_STORE__DIRNAME", "GRAPHLOG_GRAPH__WEIGHTED_EDGES"):
        monkeypatch.delenv(var, raising=False)
    disable_telemetry()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """Directory that holds the ``.graph`` store for a test."""
    return tmp_path


@pytest.fixture
def workspace(store_root: Path) -> Workspace:
    """Workspace with an initialised, empty command log."""
    ws = Workspace(GraphlogSettings.from_cli(store_root=store_root))
    ws.store.init()
    return ws


@pytest.fixture
def weighted_workspace(store_root: Path) -> Workspace:
    """Workspace that accepts non-default edge weights."""
    settings = GraphlogSettings.from_cli(store_root=store_root, graph={"weighted_edges": True})
    ws = Workspace(settings)
    ws.store.init()
    return ws


@pytest.fixture
def _isolated_store(store_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp store root so the CLI works in isolation.

    Use via ``@pytest.mark.usefixtures("_isolated_store")`` on command test
    classes.
    """
    monkeypatch.chdir(store_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def edge_commands(
    edges: Iterable[tuple[int, int] | tuple[int, int, int]],
    *,
    vertices: Iterable[int] = (),
) -> list[Command]:
    commands: list[Command] = [AddVertex(v) for v in vertices]
    commands.extend(AddEdge(*e) for e in edges)
    return commands


def make_graph(*edges: tuple[int, int] | tuple[int, int, int], vertices: Iterable[int] = ()) -> Graph:
    """Snapshot from edge tuples; ``(u, v)`` edges get weight 1."""
    return Graph.from_edges(edges, vertices=vertices)


def seed(ws: Workspace, *edges: tuple[int, int] | tuple[int, int, int], vertices: Iterable[int] = ()) -> None:
    """Append edges (and lone vertices) straight to the workspace store."""
    ws.store.append_many(edge_commands(edges, vertices=vertices))
