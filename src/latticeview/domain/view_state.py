"""ViewState and Viewport — the user-owned presentation state.

Both are frozen; every intent returns a new instance so the controller
can compare old and new state to decide whether a relayout is needed.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field, field_validator

from latticeview.domain.types import ALL_TIERS, DEFAULT_LAYOUT, LayoutKind, parse_layout_kind

MIN_ZOOM = 0.2
MAX_ZOOM = 3.0
ZOOM_STEP = 1.2
FIT_PADDING = 50


class ViewState(BaseModel):
    """Visible tiers, search text, selection, layout and label toggle.

    ``filter_tiers`` may be empty transiently; that yields an empty view,
    not an error.
    """

    model_config = {"frozen": True}

    filter_tiers: frozenset[str] = Field(default_factory=lambda: ALL_TIERS)
    search_query: str = ""
    selected_node_id: str | None = None
    layout_kind: LayoutKind = DEFAULT_LAYOUT
    labels_visible: bool = True
    controls_visible: bool = True

    @field_validator("layout_kind", mode="before")
    @classmethod
    def _coerce_layout(cls, value: object) -> LayoutKind:
        if isinstance(value, LayoutKind):
            return value
        return parse_layout_kind(None if value is None else str(value))

    @field_validator("filter_tiers", mode="before")
    @classmethod
    def _normalize_tiers(cls, value: object) -> frozenset[str]:
        if value is None:
            return ALL_TIERS
        if isinstance(value, str):
            value = [value]
        return frozenset(str(t).strip().lower() for t in value)  # type: ignore[union-attr]

    # --- intents ---

    def toggle_tier(self, tier: str) -> ViewState:
        tier = tier.strip().lower()
        tiers = set(self.filter_tiers)
        if tier in tiers:
            tiers.discard(tier)
        else:
            tiers.add(tier)
        return self.model_copy(update={"filter_tiers": frozenset(tiers)})

    def with_tiers(self, tiers: Iterable[str]) -> ViewState:
        return self.model_copy(
            update={"filter_tiers": frozenset(t.strip().lower() for t in tiers)}
        )

    def with_query(self, query: str) -> ViewState:
        return self.model_copy(update={"search_query": query})

    def with_selection(self, node_id: str | None) -> ViewState:
        return self.model_copy(update={"selected_node_id": node_id})

    def with_layout(self, kind: LayoutKind | str) -> ViewState:
        if not isinstance(kind, LayoutKind):
            kind = parse_layout_kind(kind)
        return self.model_copy(update={"layout_kind": kind})

    def toggle_labels(self) -> ViewState:
        return self.model_copy(update={"labels_visible": not self.labels_visible})


class Viewport(BaseModel):
    """Zoom level of the rendered graph."""

    model_config = {"frozen": True}

    zoom: float = 1.0
    padding: int = 0

    def zoom_in(self) -> Viewport:
        return self._with_zoom(self.zoom * ZOOM_STEP)

    def zoom_out(self) -> Viewport:
        return self._with_zoom(self.zoom / ZOOM_STEP)

    def fit(self) -> Viewport:
        return Viewport(zoom=1.0, padding=FIT_PADDING)

    def _with_zoom(self, zoom: float) -> Viewport:
        clamped = min(MAX_ZOOM, max(MIN_ZOOM, zoom))
        return self.model_copy(update={"zoom": round(clamped, 6)})
