"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from tagtree.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from tagtree.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: node ids, one per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    groups = result.data.get("groups")
    if groups and isinstance(groups, list):
        return "\n".join(str(node["id"]) for group in groups for node in group.get("nodes", []))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="tt.ok")
    op = Text(f"  {result.op}", style="tt.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tt.key")
    if key in ("id", "root"):
        v = Text(str(value), style="tt.id")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
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
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations")
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _node_table(nodes: list[dict[str, Any]]) -> Table:
    """Build a Rich Table of placed nodes."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="dim", no_wrap=True)
    table.add_column("ID", style="tt.id", no_wrap=True)
    table.add_column("Label")
    table.add_column("Depth", justify="right")
    table.add_column("X", style="tt.coord", justify="right")
    table.add_column("Y", style="tt.coord", justify="right")
    table.add_column("Incoming", style="tt.incoming")

    for node in nodes:
        kind = str(node.get("kind", ""))
        label = str(node.get("label", ""))
        if node.get("receives_arrow"):
            label = f"▸ {label}"
        table.add_row(
            str(node.get("key", "")),
            str(node.get("id", "")),
            Text(label, style=style_for_kind(kind)),
            str(node.get("depth", "")),
            f"{float(node.get('x', 0.0)):.1f}",
            f"{float(node.get('y', 0.0)):.1f}",
            ", ".join(node.get("incoming", [])),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tt.error")
    op = Text(f"  {result.op}", style="tt.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one node table per group."""
    _status_line(console, result)
    data = result.data
    for key in ("root", "variant", "max_width", "layer_count"):
        _field(console, key, data.get(key))

    for group in data.get("groups", []):
        position = group.get("position", 0)
        anchor = group.get("anchor")
        title = f"Group {position}"
        if anchor is not None:
            title += f" (grafted at {anchor}, dx={group.get('dx', 0.0)}, dy={group.get('dy', 0.0)})"
        console.print()
        console.print(Text(title, style="bold"))
        console.print(_node_table(group.get("nodes", [])))

    console.print(f"\n{data.get('count', 0)} nodes")
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "layout": _render_layout,
    "inspect": _render_generic,
}
