"""GraphEngine — lazy-built snapshot replayed from the command log.

Rebuilt per invocation, no cross-invocation cache. Commands that never
query the graph never replay the log. Every append through the store
invalidates the cached snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph
    from graphlog.infrastructure.store import CommandLogStore


class GraphEngine:
    """Lazy-loading snapshot holder backed by a :class:`CommandLogStore`."""

    def __init__(self, store: CommandLogStore) -> None:
        self._store = store
        self._graph: Graph | None = None
        self._builds = 0

    @property
    def graph(self) -> Graph:
        """Return the snapshot, replaying the log on first access."""
        if self._graph is None:
            self._graph = self._store.snapshot()
            self._builds += 1
        return self._graph

    @property
    def builds(self) -> int:
        """How many times the log has been replayed by this engine."""
        return self._builds

    @property
    def is_built(self) -> bool:
        return self._graph is not None

    def invalidate(self) -> None:
        """Clear the cached snapshot, forcing a rebuild on next access."""
        self._graph = None
