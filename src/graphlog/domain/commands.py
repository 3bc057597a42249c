"""Command records and the line-oriented log codec.

One record per line, newline-terminated::

    AddVertex <id>
    AddEdge <from> <to> [<weight>]
    RemoveVertex <id>
    RemoveEdge <from> <to>

Lines starting with ``#`` and blank lines are ignored. The weight is
omitted on write when it equals the default of 1.

INVARIANT: a non-empty log must end with a newline. Anything else means the
last record was only partially written and the whole log is rejected.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from graphlog.domain.errors import InvalidCommand, LogParseError

DEFAULT_WEIGHT = 1


@dataclass(frozen=True, slots=True)
class AddVertex:
    vertex: int


@dataclass(frozen=True, slots=True)
class AddEdge:
    source: int
    target: int
    weight: int = DEFAULT_WEIGHT


@dataclass(frozen=True, slots=True)
class RemoveVertex:
    vertex: int


@dataclass(frozen=True, slots=True)
class RemoveEdge:
    source: int
    target: int


type Command = AddVertex | AddEdge | RemoveVertex | RemoveEdge


def check_command(command: Command) -> Command:
    """Reject non-positive ids and weights before a command reaches the log."""
    match command:
        case AddVertex(vertex=v) | RemoveVertex(vertex=v):
            ids = [v]
        case AddEdge(source=s, target=t, weight=w):
            ids = [s, t]
            if w <= 0:
                msg = f"Edge weight must be a positive integer, got {w}"
                raise InvalidCommand(msg, weight=w)
        case RemoveEdge(source=s, target=t):
            ids = [s, t]
        case _:
            msg = f"Not a graph command: {command!r}"
            raise TypeError(msg)
    for vid in ids:
        if vid <= 0:
            msg = f"Vertex ids must be positive integers, got {vid}"
            raise InvalidCommand(msg, vertex=vid)
    return command


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def format_command(command: Command) -> str:
    """Render a command as a single log line (without the trailing newline)."""
    match command:
        case AddVertex(vertex=v):
            return f"AddVertex {v}"
        case AddEdge(source=s, target=t, weight=w) if w == DEFAULT_WEIGHT:
            return f"AddEdge {s} {t}"
        case AddEdge(source=s, target=t, weight=w):
            return f"AddEdge {s} {t} {w}"
        case RemoveVertex(vertex=v):
            return f"RemoveVertex {v}"
        case RemoveEdge(source=s, target=t):
            return f"RemoveEdge {s} {t}"
    msg = f"Not a graph command: {command!r}"
    raise TypeError(msg)


def encode_commands(commands: Iterable[Command]) -> str:
    """Render commands as newline-terminated log text."""
    return "".join(f"{format_command(c)}\n" for c in commands)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

_ADD_VERTEX_RE = re.compile(r"^AddVertex\s+(\d+)$")
_ADD_EDGE_RE = re.compile(r"^AddEdge\s+(\d+)\s+(\d+)(?:\s+(\d+))?$")
_REMOVE_VERTEX_RE = re.compile(r"^RemoveVertex\s+(\d+)$")
_REMOVE_EDGE_RE = re.compile(r"^RemoveEdge\s+(\d+)\s+(\d+)$")


def is_comment(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_line(line: str, *, line_number: int = 1) -> Command:
    """Parse one log line into a command.

    Raises:
        LogParseError: if the line matches no record shape, or carries a
            zero id or weight.
    """
    text = line.strip()
    command: Command | None = None
    if m := _ADD_EDGE_RE.match(text):
        weight = int(m.group(3)) if m.group(3) is not None else DEFAULT_WEIGHT
        command = AddEdge(int(m.group(1)), int(m.group(2)), weight)
    elif m := _ADD_VERTEX_RE.match(text):
        command = AddVertex(int(m.group(1)))
    elif m := _REMOVE_EDGE_RE.match(text):
        command = RemoveEdge(int(m.group(1)), int(m.group(2)))
    elif m := _REMOVE_VERTEX_RE.match(text):
        command = RemoveVertex(int(m.group(1)))

    if command is None:
        msg = f"Couldn't parse line {line_number}: {text!r}"
        raise LogParseError(msg, line_number=line_number, line=text)
    try:
        return check_command(command)
    except InvalidCommand as exc:
        msg = f"Invalid record on line {line_number}: {exc.message}"
        raise LogParseError(msg, line_number=line_number, line=text) from exc


def _decode_line(raw: str | bytes, line_number: int) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        shown = raw.decode("utf-8", errors="replace")
        msg = f"Line {line_number} is not valid UTF-8: {shown!r}"
        raise LogParseError(msg, line_number=line_number, line=shown) from exc


def decode_commands(data: str | bytes) -> list[Command]:
    """Parse a full log, as text or raw bytes, into commands in file order.

    Raw bytes are decoded line by line so an undecodable record is reported
    with its line number like any other corrupt record.

    Raises:
        LogParseError: on the first malformed or undecodable record, or when
            the last record is not newline-terminated (truncated write).
    """
    if not data:
        return []
    lines: list[str] | list[bytes] = data.split(b"\n") if isinstance(data, bytes) else data.split("\n")
    # A well-formed log ends with "\n", so the final split element is empty.
    if lines[-1]:
        last = len(lines)
        tail = lines[-1]
        shown = tail.decode("utf-8", errors="replace") if isinstance(tail, bytes) else tail
        msg = f"Truncated record on line {last}: {shown!r}"
        raise LogParseError(msg, line_number=last, line=shown)

    commands: list[Command] = []
    for number, raw in enumerate(lines[:-1], start=1):
        line = _decode_line(raw, number)
        if is_comment(line):
            continue
        commands.append(parse_line(line, line_number=number))
    return commands
