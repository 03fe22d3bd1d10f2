"""Tier and layout-kind enums.

Tiers classify a DTU's importance; layout kinds name the drawing
algorithm the render adapter should run.
"""

from __future__ import annotations

from enum import StrEnum


class Tier(StrEnum):
    """Importance classification of a knowledge node."""

    REGULAR = "regular"
    MEGA = "mega"
    HYPER = "hyper"
    SHADOW = "shadow"


class LayoutKind(StrEnum):
    """Graph-drawing algorithm choices."""

    FORCE = "force"
    CIRCLE = "circle"
    GRID = "grid"
    HIERARCHY = "hierarchy"
    CONCENTRIC = "concentric"


ALL_TIERS: frozenset[str] = frozenset(t.value for t in Tier)

DEFAULT_LAYOUT = LayoutKind.FORCE


def parse_tier(value: str) -> Tier | None:
    """Return the Tier for *value* (case-insensitive), or None if unknown."""
    try:
        return Tier(value.strip().lower())
    except ValueError:
        return None


def parse_layout_kind(value: str | None) -> LayoutKind:
    """Return the LayoutKind for *value*, falling back to the default.

    Examples:
        >>> parse_layout_kind("circle")
        <LayoutKind.CIRCLE: 'circle'>
        >>> parse_layout_kind("spiral")
        <LayoutKind.FORCE: 'force'>
    """
    if value is None:
        return DEFAULT_LAYOUT
    try:
        return LayoutKind(value.strip().lower())
    except ValueError:
        return DEFAULT_LAYOUT
