"""Pluggy hook specifications for view lifecycle events.

These hooks are the telemetry side-channel: relayout failures, snapshot
emission and selection changes are reported here instead of being
raised into the interaction loop.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("latticeview")
hookimpl = pluggy.HookimplMarker("latticeview")


class LatticeviewHookSpec:
    """Hook specifications for the latticeview plugin system."""

    @hookspec
    def post_load(self, node_count: int, edge_count: int, warnings: list[str]) -> None:
        """Called after a new GraphModel replaces the previous one."""

    @hookspec
    def post_snapshot(
        self,
        generation: int,
        node_count: int,
        edge_count: int,
        focused: int,
        matched: int,
    ) -> None:
        """Called after each snapshot is handed to the render adapter."""

    @hookspec
    def post_relayout(self, generation: int, layout_kind: str, node_count: int) -> None:
        """Called when a relayout result is accepted."""

    @hookspec
    def relayout_failed(self, generation: int, layout_kind: str, error: str) -> None:
        """Called when a relayout fails; the previous layout stays on screen."""

    @hookspec
    def post_select(self, node_id: str | None) -> None:
        """Called after the selection changes (None when cleared)."""
