"""Standalone command: compute the full view of a dataset."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from latticeview.commands._base import LvCommand, dataset_argument, tier_option, tiers_or_none
from latticeview.domain.types import LayoutKind

if TYPE_CHECKING:
    from latticeview.commands._context import AppContext


@click.command(
    cls=LvCommand,
    examples="""\
  latticeview view graph.json
  latticeview view graph.json --tier mega --tier hyper
  latticeview view graph.json --focus dtu-7 --layout concentric
  latticeview view graph.json --query resonance --no-labels
  latticeview --json view graph.json --select dtu-3""",
)
@dataset_argument
@tier_option
@click.option("--query", default="", help="Highlight nodes whose label contains this text.")
@click.option("--focus", default=None, help="Node id to treat as hovered.")
@click.option("--select", "select_id", default=None, help="Node id to select.")
@click.option(
    "--layout",
    "layout_kind",
    default=None,
    help=f"Layout kind ({', '.join(k.value for k in LayoutKind)}).",
)
@click.option("--labels/--no-labels", default=None, help="Show or hide node labels.")
@click.pass_obj
def view(
    app: AppContext,
    dataset: Path,
    tiers: tuple[str, ...],
    query: str,
    focus: str | None,
    select_id: str | None,
    layout_kind: str | None,
    labels: bool | None,
) -> None:
    """Filter, highlight, search and lay out a dataset."""
    service = app.view_service(dataset, op="view")
    app.emit(
        service.view(
            tiers=tiers_or_none(tiers),
            query=query,
            focus=focus,
            select=select_id,
            layout=layout_kind,
            labels=labels,
        )
    )
