"""LayoutSelector — layout kind to canonical parameter bundle.

Each kind maps to exactly one bundle; unknown kinds resolve to the force
bundle. Node sizes come from the tier style table and travel with the
parameters so the renderer gets size as data.

A plan is always computed for the *visible* subset: relayout runs
downstream of the view filter, never over the full model.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from latticeview.domain.models import VisibleSubset
from latticeview.domain.styles import node_size
from latticeview.domain.types import LayoutKind, parse_layout_kind


class LayoutParams(BaseModel):
    """Parameter bundle for the external layout/render adapter.

    Attributes:
        kind: The layout kind this bundle belongs to.
        algorithm: Renderer-level algorithm name (cytoscape naming).
        animate: Whether the renderer should animate node movement.
        animation_duration_ms: Animation length.
        options: Algorithm-specific knobs.
    """

    model_config = {"frozen": True}

    kind: LayoutKind
    algorithm: str
    animate: bool = True
    animation_duration_ms: int = 300
    options: dict[str, Any] = Field(default_factory=dict)

    def to_renderer(self) -> dict[str, Any]:
        """Flatten into the option dict a cytoscape-style renderer expects."""
        return {
            "name": self.algorithm,
            "animate": self.animate,
            "animationDuration": self.animation_duration_ms,
            **self.options,
        }


class LayoutPlan(BaseModel):
    """Layout parameters plus per-node sizes for one visible subset."""

    model_config = {"frozen": True}

    params: LayoutParams
    node_sizes: dict[str, int] = Field(default_factory=dict)


LAYOUT_BUNDLES: dict[LayoutKind, LayoutParams] = {
    LayoutKind.FORCE: LayoutParams(
        kind=LayoutKind.FORCE,
        algorithm="cose",
        animation_duration_ms=500,
        options={"nodeRepulsion": 8000, "idealEdgeLength": 100, "gravity": 0.25},
    ),
    LayoutKind.CIRCLE: LayoutParams(kind=LayoutKind.CIRCLE, algorithm="circle"),
    LayoutKind.GRID: LayoutParams(
        kind=LayoutKind.GRID,
        algorithm="grid",
        options={"rows": None, "cols": None},
    ),
    LayoutKind.HIERARCHY: LayoutParams(
        kind=LayoutKind.HIERARCHY,
        algorithm="breadthfirst",
        options={"directed": True, "spacingFactor": 1.5},
    ),
    LayoutKind.CONCENTRIC: LayoutParams(
        kind=LayoutKind.CONCENTRIC,
        algorithm="concentric",
        # Rings rank nodes by resonance, treating a missing score as 1.
        options={"concentricBy": "resonance", "concentricDefault": 1, "levelWidth": 2},
    ),
}


def resolve_layout(kind: LayoutKind | str | None) -> LayoutParams:
    """Return the canonical bundle for *kind*."""
    if not isinstance(kind, LayoutKind):
        kind = parse_layout_kind(kind)
    return LAYOUT_BUNDLES[kind]


def node_sizes(visible: VisibleSubset) -> dict[str, int]:
    return {n.id: node_size(n) for n in visible.nodes}


def plan_layout(kind: LayoutKind | str | None, visible: VisibleSubset) -> LayoutPlan:
    return LayoutPlan(params=resolve_layout(kind), node_sizes=node_sizes(visible))
