"""Workspace — the single dependency injected into every service.

Owns the command log store and the lazy graph engine, wired so that every
successful write invalidates the snapshot. Constructed once at CLI startup
from :class:`GraphlogSettings`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphlog.domain.limits import SearchLimits
from graphlog.infrastructure.graph.engine import GraphEngine
from graphlog.infrastructure.store import CommandLogStore

if TYPE_CHECKING:
    from pathlib import Path

    from graphlog.config.settings import GraphlogSettings


class Workspace:
    """Store + snapshot access for one store root."""

    def __init__(self, settings: GraphlogSettings) -> None:
        self._settings = settings
        self._graph: GraphEngine | None = None
        self._store = CommandLogStore(
            settings.store_root,
            dirname=settings.store.dirname,
            lock_timeout=settings.store.lock_timeout,
            fsync=settings.store.fsync,
            on_append=self._invalidate,
        )
        self._graph = GraphEngine(self._store)

    def _invalidate(self) -> None:
        if self._graph is not None:
            self._graph.invalidate()

    @property
    def root(self) -> Path:
        return self._settings.store_root

    @property
    def settings(self) -> GraphlogSettings:
        return self._settings

    @property
    def store(self) -> CommandLogStore:
        return self._store

    @property
    def graph(self) -> GraphEngine:
        """The graph engine (lazy-built from the log)."""
        assert self._graph is not None
        return self._graph

    def search_limits(self) -> SearchLimits:
        search = self._settings.search
        return SearchLimits(
            max_expansions=search.max_expansions,
            timeout_seconds=search.timeout_seconds,
        )
