"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from latticeview.output.console import create_console, get_output, style_for_tier_name
from latticeview.services.telemetry import SLOW_SPAN_MS

if TYPE_CHECKING:
    from rich.console import Console

    from latticeview.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    # Export without a path: the payload itself
    if result.op == "export" and "content" in result.data:
        return str(result.data["content"]).rstrip("\n")

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        val = item.get("id")
        return "" if val is None else str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="lv.ok")
    op = Text(f"  {result.op}", style="lv.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="lv.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="lv.id")
    elif key == "label":
        v = Text(str(value), style="lv.label")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > SLOW_SPAN_MS:
        style = "bold red"
    elif duration > SLOW_SPAN_MS / 10:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    if span_data.get("error"):
        line += f"  [lv.error]{span_data['error']}[/lv.error]"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{ak}={av}' for ak, av in annotations.items())})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _tier_text(tier: str) -> Text:
    return Text(tier, style=style_for_tier_name(tier))


def _node_table(items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table for a list of node rows."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="lv.id", no_wrap=True)
    table.add_column("Label", style="lv.label")
    table.add_column("Tier")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("label", "")),
            _tier_text(str(item.get("tier", ""))),
        )
    return table


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else ""
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def _state_text(row: dict[str, Any]) -> Text:
    """One cell summarising highlight, search match and selection."""
    text = Text()
    hl = row.get("highlight", "")
    if hl == "highlighted":
        text.append("focus ", style="lv.highlighted")
    elif hl == "faded":
        text.append("faded ", style="lv.faded")
    if row.get("match"):
        text.append("match ", style="lv.match")
    if row.get("selected"):
        text.append("selected", style="lv.ok")
    return text


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="lv.error")
    op = Text(f"  {result.op}", style="lv.op")
    code = Text(f"  [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(f"  {msg}"), end="")
    console.print()

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── View renderers ────────────────────────────────────────────────────


def _render_view(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the computed view: summary fields, node table, tooltip."""
    d = result.data
    _status_line(console, result)
    _field(console, "generation", d.get("generation"))
    _field(console, "layout", d.get("layout"))
    if d.get("layout_pending"):
        _field(console, "layout_pending", True)
    _field(console, "nodes", f"{d.get('count', 0)} visible / {d.get('stats', {}).get('nodes', 0)}")
    _field(console, "edges", d.get("edge_count", 0))
    if d.get("selected") is not None:
        rendered = "" if d.get("selection_rendered") else " (not rendered)"
        _field(console, "selected_id", f"{d['selected']}{rendered}")
    if d.get("matches"):
        _field(console, "matches", len(d["matches"]))

    items = d.get("items", [])
    if items:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("ID", style="lv.id", no_wrap=True)
        table.add_column("Label", style="lv.label")
        table.add_column("Tier")
        table.add_column("Size", justify="right")
        table.add_column("State")
        if verbose:
            table.add_column("X", justify="right", style="dim")
            table.add_column("Y", justify="right", style="dim")
        for item in items:
            label = str(item.get("label", "")) if d.get("labels", True) else ""
            row: list[Any] = [
                str(item.get("id", "")),
                label,
                _tier_text(str(item.get("tier", ""))),
                _cell(item.get("size")),
                _state_text(item),
            ]
            if verbose:
                row.extend([_cell(item.get("x")), _cell(item.get("y"))])
            table.add_row(*row)
        console.print()
        console.print(table)

    card = d.get("tooltip")
    if card:
        lines = [card.get("caption", "")]
        if card.get("resonance"):
            lines.append(f"resonance: {card['resonance']}")
        console.print(Panel("\n".join(lines), title=card.get("label", ""), expand=False))

    if verbose:
        _render_meta(console, result)


def _render_neighbors(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "source_id", d.get("source_id"))
    _field(console, "faded", len(d.get("faded", [])))
    items = d.get("items", [])
    if items:
        console.print()
        console.print(_node_table(items))
    console.print(f"\n{d.get('count', len(items))} neighbours")
    if verbose:
        _render_meta(console, result)


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    items = d.get("items", [])
    table = _node_table(items)
    console.print(table)
    console.print(f"\n{d.get('count', len(items))} matches for '{d.get('query', '')}'")
    if verbose:
        _render_meta(console, result)


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "nodes", d.get("nodes", 0))
    _field(console, "edges", d.get("edges", 0))
    if d.get("dangling_edges"):
        _field(console, "dangling_edges", d["dangling_edges"])

    tiers = d.get("tiers", {})
    if tiers:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Tier")
        table.add_column("Nodes", justify="right")
        for tier, count in tiers.items():
            table.add_row(_tier_text(tier), str(count))
        console.print()
        console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Layout renderers ──────────────────────────────────────────────────


def _render_layouts(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Kind", style="lv.id", no_wrap=True)
    table.add_column("Algorithm")
    table.add_column("Animate")
    if verbose:
        table.add_column("Params", style="dim")
    for item in items:
        params = item.get("params", {})
        row = [item.get("id", ""), item.get("algorithm", ""), _cell(params.get("animate"))]
        if verbose:
            row.append(json.dumps(params, separators=(",", ":")))
        table.add_row(*row)
    console.print(table)


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "algorithm", d.get("algorithm"))
    for key, value in d.get("params", {}).items():
        if key == "name":
            continue
        _field(console, key, value)


# ── Export renderer ───────────────────────────────────────────────────


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if "content" in d:
        console.out(str(d["content"]), end="", highlight=False)
        return
    _status_line(console, result)
    for key in ("format", "path", "nodes", "edges"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "view": _render_view,
    "neighbors": _render_neighbors,
    "search": _render_search,
    "stats": _render_stats,
    "layouts": _render_layouts,
    "layout": _render_layout,
    "export": _render_export,
}
