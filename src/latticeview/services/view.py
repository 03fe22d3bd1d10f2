"""ViewService — CLI-facing operations over one loaded dataset.

Each operation runs the full view pipeline through a controller (or the
pure functions directly, for read-only lookups) and returns a
ServiceResult with plain-data payloads.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from latticeview.domain.types import LayoutKind, parse_layout_kind
from latticeview.render.adapter import ViewSnapshot
from latticeview.render.export import EXPORT_FORMATS, export_payload
from latticeview.services.base import BaseService
from latticeview.services.controller import GraphViewController
from latticeview.services.filtering import filter_visible
from latticeview.services.highlight import highlight
from latticeview.services.layout import LAYOUT_BUNDLES, resolve_layout
from latticeview.services.result import ErrorCode, ServiceResult
from latticeview.services.search import search_matches
from latticeview.services.telemetry import trace_span, traced


def _node_rows(snapshot: ViewSnapshot) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for node in snapshot.visible.nodes:
        row: dict[str, Any] = {
            "id": node.id,
            "label": node.label,
            "tier": node.tier,
            "size": snapshot.plan.node_sizes.get(node.id),
            "highlight": snapshot.hover.class_for(node.id) or "",
            "match": node.id in snapshot.search_ids,
            "selected": node.id == snapshot.selected_id,
        }
        pos = snapshot.positions.get(node.id)
        if pos is not None:
            row["x"], row["y"] = pos
        rows.append(row)
    return rows


def snapshot_data(snapshot: ViewSnapshot) -> dict[str, Any]:
    """Plain-data summary of a snapshot for output."""
    return {
        "generation": snapshot.generation,
        "layout": snapshot.plan.params.kind.value,
        "layout_params": snapshot.plan.params.to_renderer(),
        "layout_pending": snapshot.layout_pending,
        "labels": snapshot.labels_visible,
        "zoom": snapshot.viewport.zoom,
        "count": len(snapshot.visible.nodes),
        "edge_count": len(snapshot.visible.edges),
        "focused": sorted(snapshot.hover.focused_ids),
        "faded": sorted(snapshot.hover.faded_ids),
        "matches": sorted(snapshot.search_ids),
        "selected": snapshot.selected_id,
        "selection_rendered": snapshot.selection_rendered,
        "stats": snapshot.stats,
        "items": _node_rows(snapshot),
        "edges": [
            {"id": e.edge_id, "source": e.source, "target": e.target, "weight": e.weight}
            for e in snapshot.visible.edges
        ],
    }


class ViewService(BaseService):
    """Filter, highlight, search, lay out and export one dataset."""

    def _run(
        self,
        *,
        tiers: Iterable[str] | None = None,
        query: str = "",
        focus: str | None = None,
        select: str | None = None,
        layout: str | None = None,
        labels: bool | None = None,
    ) -> GraphViewController:
        adapter = self._adapter()
        controller = self._controller(adapter)
        with trace_span("pipeline") as span:
            with controller.batch():
                self._load(controller)
                if tiers is not None:
                    controller.set_tiers(tiers)
                if layout is not None:
                    controller.set_layout(layout)
                if query:
                    controller.set_query(query)
                if labels is not None and labels != controller.state.labels_visible:
                    controller.toggle_labels()
                if select is not None:
                    controller.sync_selection(select)
                if focus is not None:
                    controller.hover(focus)
            self._settle(adapter)
            if span:
                span.annotate("generation", controller.generation)
                span.annotate("visible", len(controller.visible.nodes))
        return controller

    @traced
    def view(
        self,
        *,
        tiers: Iterable[str] | None = None,
        query: str = "",
        focus: str | None = None,
        select: str | None = None,
        layout: str | None = None,
        labels: bool | None = None,
    ) -> ServiceResult:
        """Compute the full view: visible subset, highlights, matches and positions.

        Args:
            tiers: Visible tiers (None keeps the configured default).
            query: Search text; empty disables search highlighting.
            focus: Node id to treat as hovered.
            select: Node id to select; unknown ids are accepted.
            layout: Layout kind; unknown kinds fall back to force.
            labels: Show or hide labels.
        """
        model = self._dataset.model
        if focus is not None and not model.contains(focus):
            return ServiceResult.failure(
                "view",
                ErrorCode.NOT_FOUND,
                f"Node '{focus}' not found in dataset",
                warnings=list(self._dataset.warnings),
            )

        warnings: list[str] = []
        if layout is not None and parse_layout_kind(layout).value != layout.strip().lower():
            warnings.append(f"Unknown layout kind '{layout}', using {parse_layout_kind(layout)}")
        if select is not None and not model.contains(select):
            warnings.append(f"Selected node '{select}' is not in the dataset")

        controller = self._run(
            tiers=tiers, query=query, focus=focus, select=select, layout=layout, labels=labels
        )
        snapshot = controller.snapshot
        assert snapshot is not None
        data = snapshot_data(snapshot)
        card = controller.tooltip()
        if card is not None:
            data["tooltip"] = card
        if focus is not None and snapshot.hover.is_neutral:
            warnings.append(f"Node '{focus}' is hidden by the tier filter")
        return ServiceResult(
            ok=True, op="view", data=data, warnings=[*self._warnings(controller), *warnings]
        )

    @traced
    def neighbors(self, node_id: str, *, tiers: Iterable[str] | None = None) -> ServiceResult:
        """Depth-1 neighbourhood of *node_id* within the visible subset."""
        model = self._dataset.model
        if not model.contains(node_id):
            return ServiceResult.failure(
                "neighbors", ErrorCode.NOT_FOUND, f"Node '{node_id}' not found in dataset"
            )

        active = self._initial_state().filter_tiers if tiers is None else frozenset(tiers)
        with trace_span("filter"):
            visible = filter_visible(model, active)
        with trace_span("highlight"):
            hl = highlight(visible, node_id)

        warnings = list(self._dataset.warnings)
        if hl.is_neutral:
            warnings.append(f"Node '{node_id}' is hidden by the tier filter")

        items = []
        for nid in sorted(hl.focused_ids - {node_id}):
            node = model.get(nid)
            assert node is not None
            items.append({"id": nid, "label": node.label, "tier": node.tier})
        return ServiceResult(
            ok=True,
            op="neighbors",
            data={
                "source_id": node_id,
                "count": len(items),
                "items": items,
                "focused": sorted(hl.focused_ids),
                "faded": sorted(hl.faded_ids),
            },
            warnings=warnings,
        )

    @traced
    def search(self, query: str, *, tiers: Iterable[str] | None = None) -> ServiceResult:
        """Visible nodes whose label contains *query* (case-insensitive)."""
        model = self._dataset.model
        active = self._initial_state().filter_tiers if tiers is None else frozenset(tiers)
        visible = filter_visible(model, active)
        hits = search_matches(visible, query)
        items = [
            {"id": n.id, "label": n.label, "tier": n.tier} for n in visible.nodes if n.id in hits
        ]
        return ServiceResult(
            ok=True,
            op="search",
            data={"query": query, "count": len(items), "items": items},
            warnings=list(self._dataset.warnings),
        )

    @traced
    def stats(self) -> ServiceResult:
        """Dataset totals for the stats overlay."""
        return ServiceResult(
            ok=True,
            op="stats",
            data=self._dataset.model.stats(),
            warnings=list(self._dataset.warnings),
        )

    @traced
    def export(
        self,
        fmt: str,
        *,
        output: Path | None = None,
        tiers: Iterable[str] | None = None,
        query: str = "",
        layout: str | None = None,
    ) -> ServiceResult:
        """Serialise the current visible view for an external rasteriser."""
        if fmt not in EXPORT_FORMATS:
            return ServiceResult.failure(
                "export",
                ErrorCode.INVALID_FORMAT,
                f"Unsupported export format '{fmt}'",
                supported=list(EXPORT_FORMATS),
            )

        controller = self._run(tiers=tiers, query=query, layout=layout)
        snapshot = controller.snapshot
        assert snapshot is not None
        content = export_payload(snapshot, fmt)

        data: dict[str, Any] = {
            "format": fmt,
            "nodes": len(snapshot.visible.nodes),
            "edges": len(snapshot.visible.edges),
        }
        if output is None:
            data["content"] = content
        else:
            output = output.resolve()
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(content, encoding="utf-8")
            data["path"] = str(output)
        return ServiceResult(ok=True, op="export", data=data, warnings=self._warnings(controller))


@traced
def describe_layouts(kind: str | None = None) -> ServiceResult:
    """List every layout bundle, or show the one *kind* resolves to."""
    if kind is None:
        items = [
            {"id": k.value, "algorithm": p.algorithm, "params": p.to_renderer()}
            for k, p in LAYOUT_BUNDLES.items()
        ]
        return ServiceResult(ok=True, op="layouts", data={"count": len(items), "items": items})

    warnings: list[str] = []
    resolved = parse_layout_kind(kind)
    if resolved.value != kind.strip().lower():
        warnings.append(f"Unknown layout kind '{kind}', using {resolved}")
    params = resolve_layout(resolved)
    return ServiceResult(
        ok=True,
        op="layout",
        data={
            "id": LayoutKind(params.kind).value,
            "algorithm": params.algorithm,
            "params": params.to_renderer(),
        },
        warnings=warnings,
    )
