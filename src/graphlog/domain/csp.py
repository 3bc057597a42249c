"""Constrained shortest path: best-first search over partial-satisfaction states.

A state is ``(vertex, mandatory bitset, ordering index, cycle-used flag)``,
extended with the on-path vertex set while cycle presence still matters and
with (capped) length/score when lower bounds make them significant. The heap
orders entries by ``(score, vertex count, current vertex, vertex sequence)``
so the first goal state popped is the minimum-score path with the fewest
vertices and, among those, the lexicographically lowest sequence.

Scores of walks that revisit vertices count every traversed edge.

The state space is exponential in the number of mandatory vertices; it is
bounded by pruning (length/score bounds with an admissible lower bound of
``remaining hops * minimum edge weight``), never by recursion depth.
"""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from graphlog.domain.constraints import ConstraintSet, validate_path_constraints
from graphlog.domain.limits import SearchBudget
from graphlog.domain.paths import NoSolution, ScoredPath

if TYPE_CHECKING:
    from graphlog.domain.graph import Graph

logger = logging.getLogger(__name__)

# (score, length, vertex, sequence, mask, order_index, cycle_used, on_path)
type _Entry = tuple[int, int, int, tuple[int, ...], int, int, bool, frozenset[int] | None]


def constrained_shortest_path(
    graph: Graph,
    start: int,
    end: int,
    constraints: ConstraintSet | None = None,
    *,
    budget: SearchBudget | None = None,
) -> ScoredPath | NoSolution:
    """Find the optimal start→end path satisfying every constraint.

    With no constraints this is plain non-negative shortest path with
    deterministic tie-breaking.

    Raises:
        InvalidConstraint: if *constraints* are contradictory for this graph.
        SearchAborted: if *budget* limits are exceeded.
    """
    c = constraints or ConstraintSet()
    validate_path_constraints(c, graph, start, end)
    return _PathSearch(graph, start, end, c, budget or SearchBudget()).run()


class _PathSearch:
    def __init__(
        self,
        graph: Graph,
        start: int,
        end: int,
        c: ConstraintSet,
        budget: SearchBudget,
    ) -> None:
        self.graph = graph
        self.start = start
        self.end = end
        self.c = c
        self.budget = budget

        mandatory = sorted(set(c.include_vertices) | set(c.ordered_vertices))
        self.bits = {v: 1 << i for i, v in enumerate(mandatory)}
        self.full_mask = (1 << len(mandatory)) - 1
        self.order_pos = {v: i for i, v in enumerate(c.ordered_vertices)}
        self.order_len = len(c.ordered_vertices)

        self.lo_len, self.hi_len = c.length_range()
        self.lo_score, self.hi_score = c.score_range()
        self.track_path = c.require_cycle or c.forbid_cycle
        self.min_weight = max(graph.min_weight, 1)

    # -- state helpers ---------------------------------------------------

    def _advance(self, mask: int, order_index: int, vertex: int) -> tuple[int, int] | None:
        """Record a visit to *vertex*; None if it breaks the required order.

        ``order_index`` counts the ordered vertices reached so far. Only the
        next one may be entered, or the latest one revisited; an earlier one
        after a later one is out of order.
        """
        mask |= self.bits.get(vertex, 0)
        pos = self.order_pos.get(vertex)
        if pos is not None:
            if pos == order_index:
                order_index += 1
            elif pos != order_index - 1:
                return None
        return mask, order_index

    def _key(self, entry: _Entry) -> tuple[object, ...]:
        score, length, vertex, _, mask, order_index, cycle_used, on_path = entry
        length_key: int | None = None
        if self.hi_len is not None:
            length_key = length
        elif self.lo_len:
            length_key = min(length, self.lo_len)
        score_key = min(score, self.lo_score) if self.lo_score else None
        return (vertex, mask, order_index, cycle_used, on_path, length_key, score_key)

    def _hops_needed(self, vertex: int, length: int, mask: int, cycle_used: bool) -> int:
        """Admissible lower bound on the hops still required to finish."""
        missing = (self.full_mask & ~mask).bit_count()
        need = max(self.lo_len - length, missing, 0 if vertex == self.end else 1)
        if self.c.require_cycle and not cycle_used:
            need = max(need, 1)
        return need

    def _is_goal(self, entry: _Entry) -> bool:
        score, length, vertex, _, mask, order_index, cycle_used, _ = entry
        return (
            vertex == self.end
            and mask == self.full_mask
            and order_index == self.order_len
            and length >= self.lo_len
            and score >= self.lo_score
            and (cycle_used or not self.c.require_cycle)
        )

    # -- search ----------------------------------------------------------

    def run(self) -> ScoredPath | NoSolution:
        advanced = self._advance(0, 0, self.start)
        if advanced is None:
            return NoSolution(f"vertex {self.start} violates the required order")
        mask, order_index = advanced
        on_path = frozenset({self.start}) if self.track_path else None
        frontier: list[_Entry] = [(0, 1, self.start, (self.start,), mask, order_index, False, on_path)]
        closed: set[tuple[object, ...]] = set()

        while frontier:
            entry = heapq.heappop(frontier)
            key = self._key(entry)
            if key in closed:
                continue
            closed.add(key)
            self.budget.tick()

            if self._is_goal(entry):
                logger.debug(
                    "csp.found start=%s end=%s score=%s expansions=%s",
                    self.start,
                    self.end,
                    entry[0],
                    self.budget.expansions,
                )
                return ScoredPath(entry[3], entry[0])

            for child in self._expand(entry):
                if self._key(child) not in closed:
                    heapq.heappush(frontier, child)

        logger.debug(
            "csp.exhausted start=%s end=%s expansions=%s",
            self.start,
            self.end,
            self.budget.expansions,
        )
        return NoSolution(f"vertex {self.end} is not reachable from {self.start} within the constraints")

    def _expand(self, entry: _Entry) -> list[_Entry]:
        score, length, vertex, sequence, mask, order_index, cycle_used, on_path = entry
        c = self.c
        children: list[_Entry] = []
        next_length = length + 1
        if self.hi_len is not None and next_length > self.hi_len:
            return children

        for target, weight in self.graph.successors(vertex):
            if target in c.exclude_vertices or (vertex, target) in c.exclude_edges:
                continue
            revisit = on_path is not None and target in on_path
            if c.forbid_cycle and revisit:
                continue
            next_score = score + weight
            if self.hi_score is not None and next_score > self.hi_score:
                continue
            advanced = self._advance(mask, order_index, target)
            if advanced is None:
                continue
            next_mask, next_order = advanced
            next_cycle = cycle_used or revisit

            need = self._hops_needed(target, next_length, next_mask, next_cycle)
            if self.hi_len is not None and next_length + need > self.hi_len:
                continue
            if self.hi_score is not None and next_score + need * self.min_weight > self.hi_score:
                continue

            next_path: frozenset[int] | None = None
            if on_path is not None and not next_cycle:
                next_path = on_path | {target}
            children.append(
                (
                    next_score,
                    next_length,
                    target,
                    (*sequence, target),
                    next_mask,
                    next_order,
                    next_cycle,
                    next_path,
                )
            )
        return children
