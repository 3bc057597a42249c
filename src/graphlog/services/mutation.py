"""MutationService — every graph change goes through here to the log.

Commands are validated, encoded and appended as one durable batch per
call. Nothing here touches the snapshot except to report warnings.
"""

from __future__ import annotations

from collections.abc import Sequence

from graphlog.domain.commands import DEFAULT_WEIGHT, AddEdge, AddVertex, Command, RemoveEdge, RemoveVertex
from graphlog.domain.errors import GraphlogError, UnsupportedOperation
from graphlog.domain.shapes import SHAPES, reverse_edges
from graphlog.services.base import BaseService
from graphlog.services.result import ServiceResult
from graphlog.services.telemetry import trace_span, traced


class MutationService(BaseService):
    """Appends vertex and edge commands to the command log."""

    def _check_weight(self, weight: int) -> None:
        if weight != DEFAULT_WEIGHT and not self._workspace.settings.graph.weighted_edges:
            msg = f"Edge weight {weight} requires graph.weighted_edges = true"
            raise UnsupportedOperation(msg, weight=weight)

    def _append(self, commands: list[Command]) -> int:
        with trace_span("append") as span:
            count = self._workspace.store.append_many(commands)
            if span:
                span.annotate("records", count)
        return count

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    @traced
    def add_vertices(self, vertices: Sequence[int]) -> ServiceResult:
        op = "add_vertex"
        try:
            count = self._append([AddVertex(v) for v in vertices])
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"vertices": list(vertices), "count": count})

    @traced
    def add_edges(
        self,
        edges: Sequence[tuple[int, int]],
        *,
        weight: int = DEFAULT_WEIGHT,
    ) -> ServiceResult:
        op = "add_edge"
        try:
            self._check_weight(weight)
            count = self._append([AddEdge(u, v, weight) for u, v in edges])
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"edges": [list(e) for e in edges], "weight": weight, "count": count},
        )

    @traced
    def add_shape(
        self,
        shape: str,
        vertices: Sequence[int],
        *,
        weight: int = DEFAULT_WEIGHT,
        reverse: bool = False,
    ) -> ServiceResult:
        """Append the edges of a chain, cycle, star or clique over *vertices*."""
        op = f"add_{shape}"
        try:
            self._check_weight(weight)
            edges = SHAPES[shape](vertices)
            if reverse:
                edges = reverse_edges(edges)
            # Lone vertices still have to exist, even without edges
            commands: list[Command] = [AddVertex(v) for v in vertices] if not edges else []
            commands += [AddEdge(u, v, weight) for u, v in edges]
            count = self._append(commands)
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "shape": shape,
                "vertices": list(vertices),
                "edges": [list(e) for e in edges],
                "weight": weight,
                "count": count,
            },
        )

    # ------------------------------------------------------------------
    # remove
    # ------------------------------------------------------------------

    @traced
    def remove_vertices(self, vertices: Sequence[int]) -> ServiceResult:
        op = "remove_vertex"
        warnings: list[str] = []
        try:
            graph = self._snapshot()
            removed_edges = 0
            for v in vertices:
                if v not in graph:
                    warnings.append(f"Vertex {v} is not in the graph")
                else:
                    removed_edges += graph.in_degree(v) + graph.out_degree(v)
            count = self._append([RemoveVertex(v) for v in vertices])
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"vertices": list(vertices), "count": count, "cascaded_edges": removed_edges},
            warnings=warnings,
        )

    @traced
    def remove_edges(self, edges: Sequence[tuple[int, int]]) -> ServiceResult:
        op = "remove_edge"
        warnings: list[str] = []
        try:
            graph = self._snapshot()
            warnings = [f"Edge {u}->{v} is not in the graph" for u, v in edges if not graph.has_edge(u, v)]
            count = self._append([RemoveEdge(u, v) for u, v in edges])
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"edges": [list(e) for e in edges], "count": count},
            warnings=warnings,
        )
