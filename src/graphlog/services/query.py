"""QueryService — read-only searches and analysis over the snapshot.

Each query builds (at most) one snapshot, runs one search under the
configured :class:`SearchLimits`, and, when ``search.verify_results`` is
set, re-checks the answer with the independent checker before returning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphlog.domain import analysis
from graphlog.domain.checker import check_cycle, check_path
from graphlog.domain.constraints import ConstraintSet
from graphlog.domain.csp import constrained_shortest_path
from graphlog.domain.cycles import run_cycle_query
from graphlog.domain.errors import GraphlogError
from graphlog.domain.limits import SearchBudget
from graphlog.domain.modes import CycleMode, GirthMode, parse_mode
from graphlog.domain.paths import Cycle, NoSolution, ScoredPath
from graphlog.services.base import BaseService
from graphlog.services.result import ServiceResult
from graphlog.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph


class QueryService(BaseService):
    """Constrained paths, cycles, topological order and statistics."""

    def _budget(self) -> SearchBudget:
        return SearchBudget(self._workspace.search_limits())

    @property
    def _verify(self) -> bool:
        return self._workspace.settings.search.verify_results

    # ------------------------------------------------------------------
    # csp — constrained shortest path
    # ------------------------------------------------------------------

    @traced
    def csp(
        self,
        start: int,
        end: int,
        constraints: ConstraintSet | None = None,
    ) -> ServiceResult:
        op = "csp"
        c = constraints or ConstraintSet()
        budget = self._budget()
        warnings: list[str] = []
        try:
            graph = self._snapshot()
            with trace_span("search") as span:
                outcome = constrained_shortest_path(graph, start, end, c, budget=budget)
                if span:
                    span.annotate("expansions", budget.expansions)
        except GraphlogError as exc:
            return self._failure(op, exc)

        data: dict[str, Any] = {"start": start, "end": end, "constraints": c.describe()}
        if isinstance(outcome, NoSolution):
            data.update(outcome.to_dict())
        else:
            data.update(found=True, **outcome.to_dict())
            if self._verify:
                warnings += self._verify_path(outcome, graph, c, start, end)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=warnings,
            meta={"expansions": budget.expansions},
        )

    @staticmethod
    def _verify_path(path: ScoredPath, graph: Graph, c: ConstraintSet, start: int, end: int) -> list[str]:
        with trace_span("verify"):
            problems = check_path(path, graph, c, start, end)
        return [f"Result failed verification: {p}" for p in problems]

    # ------------------------------------------------------------------
    # cycles
    # ------------------------------------------------------------------

    @traced
    def cycles(
        self,
        mode: CycleMode | str | dict[str, Any],
        constraints: ConstraintSet | None = None,
    ) -> ServiceResult:
        """Run one cycle query; the payload shape depends on the mode.

        Single-result modes report ``cycle``; ``all`` and ``take`` report
        ``cycles``; ``count`` reports ``count`` only; ``girth`` also
        reports ``girth`` (None when the graph is acyclic).
        """
        op = "cycle"
        c = constraints or ConstraintSet()
        budget = self._budget()
        try:
            parsed = parse_mode(mode) if isinstance(mode, (str, dict)) else mode
            graph = self._snapshot()
            with trace_span("search") as span:
                outcome = run_cycle_query(graph, parsed, c, budget=budget)
                if span:
                    span.annotate("mode", parsed.kind)
                    span.annotate("expansions", budget.expansions)
        except GraphlogError as exc:
            return self._failure(op, exc)

        data: dict[str, Any] = {"mode": parsed.kind, "constraints": c.describe()}
        found: list[Cycle] = []
        match outcome:
            case int(count):
                data.update(found=count > 0, count=count)
            case list(cycles):
                found = cycles
                data.update(
                    found=bool(cycles),
                    count=len(cycles),
                    cycles=[cy.to_dict() for cy in cycles],
                )
            case Cycle():
                found = [outcome]
                data.update(found=True, **outcome.to_dict())
            case NoSolution():
                data.update(outcome.to_dict())
        if isinstance(parsed, GirthMode):
            data["girth"] = outcome.length if isinstance(outcome, Cycle) else None

        warnings: list[str] = []
        if self._verify and found:
            with trace_span("verify"):
                for cy in found:
                    warnings += [
                        f"Cycle {list(cy.vertices)} failed verification: {p}"
                        for p in check_cycle(cy, graph, c)
                    ]
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=warnings,
            meta={"expansions": budget.expansions},
        )

    # ------------------------------------------------------------------
    # topo_sort / describe
    # ------------------------------------------------------------------

    @traced
    def topo_sort(self) -> ServiceResult:
        op = "topo_sort"
        try:
            graph = self._snapshot()
            with trace_span("topo_sort"):
                order = analysis.topo_sort(graph)
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"order": order, "count": len(order)})

    @traced
    def describe(self) -> ServiceResult:
        op = "describe"
        try:
            graph = self._snapshot()
            with trace_span("describe"):
                stats = analysis.describe(graph)
        except GraphlogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=stats)
