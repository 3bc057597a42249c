"""Expansion and wall-clock limits checked between search steps."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from graphlog.domain.errors import SearchAborted

# Clock reads are comparatively expensive; sample every N expansions.
_CLOCK_EVERY = 256


@dataclass(frozen=True)
class SearchLimits:
    """Upper bounds for one search. Zero means unlimited."""

    max_expansions: int = 0
    timeout_seconds: float = 0.0


@dataclass
class SearchBudget:
    """Per-search counter that enforces :class:`SearchLimits`.

    Every search loop calls :meth:`tick` once per expanded state, which is
    the single cancellation point of the engine.
    """

    limits: SearchLimits = field(default_factory=SearchLimits)
    expansions: int = 0
    started: float = field(default_factory=time.monotonic)

    def tick(self) -> None:
        self.expansions += 1
        limit = self.limits.max_expansions
        if limit and self.expansions > limit:
            msg = f"Search aborted after {limit} expansions"
            raise SearchAborted(msg, expansions=self.expansions, limit=limit)
        timeout = self.limits.timeout_seconds
        if timeout and self.expansions % _CLOCK_EVERY == 0:
            elapsed = time.monotonic() - self.started
            if elapsed > timeout:
                msg = f"Search aborted after {elapsed:.2f}s (timeout {timeout}s)"
                raise SearchAborted(msg, expansions=self.expansions, timeout=timeout)
