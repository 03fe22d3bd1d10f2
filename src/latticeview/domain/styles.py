"""Declarative tier-to-style lookup.

Visual policy lives in these tables rather than in control flow: the
renderer receives colour and size as data on every node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from latticeview.domain.models import GraphEdge, GraphNode
from latticeview.domain.types import Tier


@dataclass(frozen=True)
class TierStyle:
    """Colours and size for one tier."""

    background: str
    border: str
    glow: str
    size: int


TIER_STYLES: dict[str, TierStyle] = {
    Tier.REGULAR: TierStyle("#6b7280", "#9ca3af", "rgba(107, 114, 128, 0.5)", 30),
    Tier.MEGA: TierStyle("#22d3ee", "#67e8f9", "rgba(34, 211, 238, 0.5)", 40),
    Tier.HYPER: TierStyle("#a855f7", "#c084fc", "rgba(168, 85, 247, 0.5)", 50),
    Tier.SHADOW: TierStyle("#374151", "#4b5563", "rgba(55, 65, 81, 0.3)", 30),
}

# Unknown tiers render like regular nodes.
FALLBACK_STYLE = TIER_STYLES[Tier.REGULAR]

MIN_EDGE_WIDTH = 1.0
EDGE_WIDTH_FACTOR = 2.0


def style_for_tier(tier: str) -> TierStyle:
    return TIER_STYLES.get(tier, FALLBACK_STYLE)


def node_size(node: GraphNode) -> int:
    """Size ladder: hyper > mega > regular/shadow."""
    return style_for_tier(node.tier).size


def edge_width(edge: GraphEdge) -> float:
    return max(MIN_EDGE_WIDTH, edge.weight * EDGE_WIDTH_FACTOR)


def tooltip(node: GraphNode) -> dict[str, Any]:
    """Hover card content: label, tier caption and resonance percentage."""
    card: dict[str, Any] = {
        "label": node.label,
        "caption": f"{node.tier.capitalize()} DTU",
    }
    if node.resonance:
        card["resonance"] = f"{node.resonance * 100:.0f}%"
    return card
