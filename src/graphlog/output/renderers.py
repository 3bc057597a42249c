"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from graphlog.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from graphlog.services.result import ServiceResult

# Printed for the girth of an acyclic graph
INFINITY = "Infinity"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: vertex sequences, counts, or status."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    d = result.data
    if result.op == "cycle" and d.get("mode") == "girth":
        return str(d["girth"]) if d.get("girth") is not None else INFINITY
    if "cycles" in d:
        return "\n".join(_sequence(c["cycle"]) for c in d["cycles"])
    if result.op == "cycle" and d.get("mode") == "count":
        return str(d.get("count", 0))
    if "path" in d:
        return _sequence(d["path"])
    if "cycle" in d:
        return _sequence(d["cycle"])
    if "order" in d:
        return _sequence(d["order"])
    if d.get("found") is False:
        return ""
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _sequence(vertices: list[int]) -> str:
    return " ".join(str(v) for v in vertices)


def _chain(vertices: list[int]) -> str:
    return " → ".join(f"[gl.vertex]{v}[/gl.vertex]" for v in vertices)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="gl.ok"), Text(f"  {result.op}", style="gl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="gl.key")
    if key == "path" and isinstance(value, str):
        v = Text(value, style="gl.path")
    elif key == "score":
        v = Text(str(value), style="gl.score")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_constraints(console: Console, result: ServiceResult) -> None:
    constraints = result.data.get("constraints")
    if constraints:
        console.print(Text("  constraints:", style="gl.key"))
        for k, v in constraints.items():
            console.print(f"    {k}: {v}")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block including the telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _cycle_table(cycles: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Cycle")
    table.add_column("Length", justify="right")
    table.add_column("Score", justify="right", style="gl.score")
    for i, cycle in enumerate(cycles, start=1):
        table.add_row(str(i), _chain(cycle["cycle"]), str(cycle["length"]), str(cycle["score"]))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="gl.error"),
        Text(f"  {result.op}", style="gl.op"),
        Text(" — "),
        Text(msg + code),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Store and mutation renderers ──────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """add_* / remove_* results: what was appended."""
    _status_line(console, result)
    d = result.data
    for key in ("shape", "vertices", "edges", "weight", "cascaded_edges"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "records", d.get("count", 0))
    if verbose:
        _render_meta(console, result)


def _render_store(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """init / clean results."""
    _status_line(console, result)
    for key in ("path", "created", "purged"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "vertices", d.get("vertices", 0))
    _field(console, "edges", d.get("edges", 0))
    if d.get("compacted"):
        _field(console, "records", f"{d['records_before']} -> {d['records_after']}")
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_csp(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    if not d.get("found"):
        console.print(
            Text(f"  No path from {d.get('start')} to {d.get('end')}: ", style="gl.none"),
            Text(str(d.get("reason", ""))),
            sep="",
        )
    else:
        console.print("  " + _chain(d["path"]))
        _field(console, "length", d["length"])
        _field(console, "score", d["score"])
    if verbose:
        _render_constraints(console, result)
        _render_meta(console, result)


def _render_cycle(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    mode = d.get("mode", "")
    _status_line(console, result)
    _field(console, "mode", mode)

    if mode == "girth":
        girth = d.get("girth")
        _field(console, "girth", girth if girth is not None else INFINITY)
        if girth is not None:
            console.print("  " + _chain(d["cycle"]))
    elif mode == "count":
        _field(console, "count", d.get("count", 0))
    elif "cycles" in d:
        _field(console, "count", d["count"])
        if d["cycles"]:
            console.print(_cycle_table(d["cycles"]))
    elif d.get("found"):
        console.print("  " + _chain(d["cycle"]))
        _field(console, "length", d["length"])
        _field(console, "score", d["score"])
    else:
        console.print(Text(f"  No cycle: {d.get('reason', '')}", style="gl.none"))

    if verbose:
        _render_constraints(console, result)
        _render_meta(console, result)


def _render_topo(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    order = result.data.get("order", [])
    _field(console, "count", len(order))
    if order:
        console.print("  " + _chain(order))
    if verbose:
        _render_meta(console, result)


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=False, pad_edge=False, expand=False, box=None)
    table.add_column("Stat", style="gl.key")
    table.add_column("Value")
    for key, value in result.data.items():
        if isinstance(value, list):
            shown = ", ".join(str(v) for v in value) or "-"
        else:
            shown = str(value)
        table.add_row(f"  {key.replace('_', ' ')}", shown)
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Store
    "init": _render_store,
    "clean": _render_store,
    "build": _render_build,
    # Mutations
    "add_vertex": _render_mutation,
    "add_edge": _render_mutation,
    "add_chain": _render_mutation,
    "add_cycle": _render_mutation,
    "add_star": _render_mutation,
    "add_clique": _render_mutation,
    "remove_vertex": _render_mutation,
    "remove_edge": _render_mutation,
    # Queries
    "csp": _render_csp,
    "cycle": _render_cycle,
    "topo_sort": _render_topo,
    "describe": _render_describe,
}
