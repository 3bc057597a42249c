"""StoreService — store lifecycle: init, build/compact, clean/purge."""

from __future__ import annotations

from graphlog.domain.errors import GraphlogError
from graphlog.services.base import BaseService
from graphlog.services.result import ServiceResult
from graphlog.services.telemetry import trace_span, traced


class StoreService(BaseService):
    """Creates, materialises, compacts and removes the command log."""

    @traced
    def init(self) -> ServiceResult:
        op = "init"
        store = self._workspace.store
        try:
            created = store.init()
        except GraphlogError as exc:
            return self._failure(op, exc)
        warnings = [] if created else [f"Graph store already exists at {store.directory}"]
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(store.directory), "created": created},
            warnings=warnings,
        )

    @traced
    def build(self, *, compact: bool = False) -> ServiceResult:
        """Replay the log and report counts; optionally rewrite it minimally."""
        op = "build"
        store = self._workspace.store
        try:
            data: dict[str, object] = {"compacted": False}
            if compact:
                # Compaction replays under its own exclusive hold; the
                # reported counts come from the rewritten log.
                with trace_span("compact") as span:
                    before, after = store.compact()
                    if span:
                        span.annotate("records_before", before)
                        span.annotate("records_after", after)
                data.update(compacted=True, records_before=before, records_after=after)
            graph = self._snapshot()
            data.update(vertices=graph.vertex_count, edges=graph.edge_count)
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def clean(self, *, purge: bool = False) -> ServiceResult:
        """Truncate the log, or with *purge* delete the store directory."""
        op = "clean"
        store = self._workspace.store
        try:
            if purge:
                store.purge()
            else:
                store.clear()
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(store.directory), "purged": purge},
        )
