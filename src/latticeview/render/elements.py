"""Cytoscape-style element serialisation and a recording adapter.

``build_elements`` turns a snapshot into the node/edge element list a
browser renderer consumes: tier colours and sizes as data, hover and
search layers as separate classes, selection as a flag. The
:class:`ElementsAdapter` keeps the latest elements for inspection and
export and leaves positioning to the client.
"""

from __future__ import annotations

import logging
from typing import Any

from latticeview.domain.styles import edge_width, style_for_tier, tooltip
from latticeview.render.adapter import LayoutResult, LayoutSink, RelayoutRequest, ViewSnapshot
from latticeview.services.highlight import highlighted_edges

logger = logging.getLogger(__name__)

SEARCH_CLASS = "search-match"


def _node_classes(snapshot: ViewSnapshot, node_id: str) -> list[str]:
    classes: list[str] = []
    hover_class = snapshot.hover.class_for(node_id)
    if hover_class:
        classes.append(hover_class)
    if node_id in snapshot.search_ids:
        classes.append(SEARCH_CLASS)
    return classes


def build_elements(snapshot: ViewSnapshot) -> list[dict[str, Any]]:
    """Serialise *snapshot* into cytoscape element dicts."""
    elements: list[dict[str, Any]] = []
    sizes = snapshot.plan.node_sizes

    for node in snapshot.visible.nodes:
        style = style_for_tier(node.tier)
        data: dict[str, Any] = {
            "id": node.id,
            "label": node.label if snapshot.labels_visible else "",
            "tier": node.tier,
            "color": style.background,
            "borderColor": style.border,
            "size": sizes.get(node.id, style.size),
            "tooltip": tooltip(node),
        }
        if node.resonance is not None:
            data["resonance"] = node.resonance
        if node.tags:
            data["tags"] = sorted(node.tags)
        element: dict[str, Any] = {
            "group": "nodes",
            "data": data,
            "classes": " ".join(_node_classes(snapshot, node.id)),
            "selected": node.id == snapshot.selected_id,
        }
        pos = snapshot.positions.get(node.id)
        if pos is not None:
            element["position"] = {"x": pos[0], "y": pos[1]}
        elements.append(element)

    lit = {e.edge_id for e in highlighted_edges(snapshot.visible, snapshot.hover)}
    for edge in snapshot.visible.edges:
        if snapshot.hover.is_neutral:
            edge_class = ""
        else:
            edge_class = "highlighted" if edge.edge_id in lit else "faded"
        edge_data: dict[str, Any] = {
            "id": edge.edge_id,
            "source": edge.source,
            "target": edge.target,
            "weight": edge.weight,
            "width": edge_width(edge),
        }
        if edge.type:
            edge_data["type"] = edge.type
        elements.append({"group": "edges", "data": edge_data, "classes": edge_class})

    return elements


class ElementsAdapter:
    """Render adapter that records serialised elements.

    Relayout is acknowledged immediately with no positions: the client
    renderer runs the layout named in the plan itself.
    """

    def __init__(self) -> None:
        self.snapshot: ViewSnapshot | None = None
        self.elements: list[dict[str, Any]] = []
        self.frames = 0

    def render(self, snapshot: ViewSnapshot) -> None:
        self.snapshot = snapshot
        self.elements = build_elements(snapshot)
        self.frames += 1
        logger.debug(
            "Rendered generation %d: %d nodes, %d edges",
            snapshot.generation,
            len(snapshot.visible.nodes),
            len(snapshot.visible.edges),
        )

    def relayout(self, request: RelayoutRequest, deliver: LayoutSink) -> None:
        deliver(LayoutResult(generation=request.generation))
