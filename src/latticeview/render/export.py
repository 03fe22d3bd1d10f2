"""Export hook — the data a collaborator needs to rasterise the current view.

Only what is visible is exported, together with the layout plan and any
accepted positions. Rasterising to PNG/SVG is left to the consumer.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from latticeview.domain.styles import edge_width, style_for_tier
from latticeview.render.adapter import ViewSnapshot
from latticeview.render.elements import build_elements

ExportFormat = Literal["cytoscape", "d3", "dot"]
EXPORT_FORMATS: tuple[str, ...] = ("cytoscape", "d3", "dot")


class UnsupportedFormatError(ValueError):
    """Raised for an export format outside ``EXPORT_FORMATS``."""


def export_payload(snapshot: ViewSnapshot, fmt: str = "cytoscape") -> str:
    """Serialise *snapshot* in *fmt*."""
    if fmt == "cytoscape":
        return _to_cytoscape_json(snapshot)
    if fmt == "d3":
        return _to_d3_json(snapshot)
    if fmt == "dot":
        return _to_dot(snapshot)
    raise UnsupportedFormatError(f"Unsupported export format '{fmt}'")


def _to_cytoscape_json(snapshot: ViewSnapshot) -> str:
    doc: dict[str, Any] = {
        "elements": build_elements(snapshot),
        "layout": snapshot.plan.params.to_renderer(),
        "generation": snapshot.generation,
    }
    return json.dumps(doc, indent=2, sort_keys=False) + "\n"


def _to_d3_json(snapshot: ViewSnapshot) -> str:
    d3_nodes: list[dict[str, Any]] = []
    for node in snapshot.visible.nodes:
        entry: dict[str, Any] = {
            "id": node.id,
            "label": node.label,
            "tier": node.tier,
            "size": snapshot.plan.node_sizes.get(node.id, style_for_tier(node.tier).size),
        }
        pos = snapshot.positions.get(node.id)
        if pos is not None:
            entry["x"], entry["y"] = pos
        d3_nodes.append(entry)

    d3_links = [
        {"source": e.source, "target": e.target, "weight": e.weight, "width": edge_width(e)}
        for e in snapshot.visible.edges
    ]
    doc = {"nodes": d3_nodes, "links": d3_links, "layout": snapshot.plan.params.kind.value}
    return json.dumps(doc, indent=2) + "\n"


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _to_dot(snapshot: ViewSnapshot) -> str:
    """Graphviz DOT with tier colours and point sizes."""
    lines = ["digraph lattice {", "  node [shape=circle, style=filled, fontcolor=white];"]
    for node in snapshot.visible.nodes:
        style = style_for_tier(node.tier)
        label = _dot_escape(node.label if snapshot.labels_visible else "")
        lines.append(
            f'  "{_dot_escape(node.id)}" [label="{label}" fillcolor="{style.background}" '
            f'color="{style.border}" width={style.size / 72:.3f}];'
        )
    for edge in snapshot.visible.edges:
        attrs = f"penwidth={edge_width(edge):g}"
        if edge.type:
            attrs += f' label="{_dot_escape(edge.type)}"'
        lines.append(f'  "{_dot_escape(edge.source)}" -> "{_dot_escape(edge.target)}" [{attrs}];')
    lines.append("}")
    return "\n".join(lines) + "\n"
