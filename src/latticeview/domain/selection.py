"""Selection states and transitions.

A view has at most one selected node. ``select`` is idempotent and
valid from any state; ``clear`` from ``unselected`` is rejected as a
no-op.
"""

from __future__ import annotations

from enum import StrEnum


class SelectionStatus(StrEnum):
    UNSELECTED = "unselected"
    SELECTED = "selected"


SELECTION_TRANSITIONS: dict[str, list[str]] = {
    "unselected": ["selected"],
    "selected": ["selected", "unselected"],
}


def is_valid_transition(current: str, target: str) -> bool:
    """Check if moving from *current* to *target* is allowed."""
    return target in SELECTION_TRANSITIONS.get(current, [])
