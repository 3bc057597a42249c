"""BaseService — foundation for all graphlog services.

Every service receives a :class:`Workspace` at construction time. The
workspace gives access to the command log store and the lazy snapshot.
Domain exceptions stop here: public service methods convert any
:class:`GraphlogError` into ``ServiceResult(ok=False)``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphlog.services.result import ServiceResult
from graphlog.services.telemetry import trace_span

if TYPE_CHECKING:
    from graphlog.domain.errors import GraphlogError
    from graphlog.domain.graph import Graph
    from graphlog.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class QueryService(BaseService):
            def csp(self, start: int, end: int) -> ServiceResult:
                try:
                    graph = self._snapshot()
                    ...
                except GraphlogError as exc:
                    return self._failure("csp", exc)
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _snapshot(self) -> Graph:
        """The invocation's graph snapshot (replays the log on first use)."""
        with trace_span("replay") as span:
            graph = self._workspace.graph.graph
            if span:
                span.annotate("vertices", graph.vertex_count)
                span.annotate("edges", graph.edge_count)
        return graph

    @staticmethod
    def _failure(op: str, exc: GraphlogError) -> ServiceResult:
        logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
        return ServiceResult.from_error(op, exc)
