"""Typed error taxonomy.

Every failure carries a stable ``code`` (surfaced in ServiceError) and a
distinct process ``exit_code`` (applied by the CLI). A search that finds
nothing is *not* an error; see :class:`graphlog.domain.paths.NoSolution`.
"""

from __future__ import annotations

from typing import Any


class GraphlogError(Exception):
    """Base class for all graphlog failures."""

    code = "ERROR"
    exit_code = 1

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class StoreIOError(GraphlogError):
    """Store path unreadable, unwritable, missing, or lock unavailable."""

    code = "IO_ERROR"
    exit_code = 2


class LogParseError(GraphlogError):
    """Corrupted or truncated command log record."""

    code = "PARSE_ERROR"
    exit_code = 3

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(message, line_number=line_number, line=line)
        self.line_number = line_number
        self.line = line


class InvalidConstraint(GraphlogError):
    """Contradictory or malformed constraint combination.

    Always raised by validation, before any search work starts.
    """

    code = "INVALID_CONSTRAINT"
    exit_code = 4


class UnsupportedOperation(GraphlogError):
    """A combination the engine supports but the boundary does not expose."""

    code = "UNSUPPORTED"
    exit_code = 5


class SearchAborted(GraphlogError):
    """A search exceeded its expansion or time limit."""

    code = "SEARCH_ABORTED"
    exit_code = 6


class CycleDetected(GraphlogError):
    """Topological order requested on a graph that contains a cycle."""

    code = "CYCLE_DETECTED"
    exit_code = 7

    def __init__(self, message: str, *, cycle: list[int]) -> None:
        super().__init__(message, cycle=cycle)
        self.cycle = cycle


class InvalidCommand(GraphlogError):
    """A mutation with a non-positive id or weight, rejected before append."""

    code = "INVALID_COMMAND"
    exit_code = 8


EXIT_CODES: dict[str, int] = {
    cls.code: cls.exit_code
    for cls in (
        GraphlogError,
        StoreIOError,
        LogParseError,
        InvalidConstraint,
        UnsupportedOperation,
        SearchAborted,
        CycleDetected,
        InvalidCommand,
    )
}


def exit_code_for(code: str) -> int:
    """Return the process exit status for an error *code* (1 when unknown)."""
    return EXIT_CODES.get(code, 1)
