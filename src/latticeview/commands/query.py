"""Standalone commands: neighbours, label search and dataset stats."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from latticeview.commands._base import LvCommand, dataset_argument, tier_option, tiers_or_none

if TYPE_CHECKING:
    from latticeview.commands._context import AppContext


@click.command(
    cls=LvCommand,
    examples="""\
  latticeview neighbors graph.json dtu-7
  latticeview neighbors graph.json dtu-7 --tier mega --tier hyper
  latticeview -q neighbors graph.json dtu-7""",
)
@dataset_argument
@click.argument("node_id")
@tier_option
@click.pass_obj
def neighbors(app: AppContext, dataset: Path, node_id: str, tiers: tuple[str, ...]) -> None:
    """List the visible direct neighbours of a node."""
    service = app.view_service(dataset, op="neighbors")
    app.emit(service.neighbors(node_id, tiers=tiers_or_none(tiers)))


@click.command(
    cls=LvCommand,
    examples="""\
  latticeview search graph.json quantum
  latticeview search graph.json "shadow lattice" --tier shadow
  latticeview --json search graph.json dtu""",
)
@dataset_argument
@click.argument("query")
@tier_option
@click.pass_obj
def search(app: AppContext, dataset: Path, query: str, tiers: tuple[str, ...]) -> None:
    """Find visible nodes by case-insensitive label substring."""
    service = app.view_service(dataset, op="search")
    app.emit(service.search(query, tiers=tiers_or_none(tiers)))


@click.command(
    cls=LvCommand,
    examples="""\
  latticeview stats graph.json
  latticeview --json stats graph.json""",
)
@dataset_argument
@click.pass_obj
def stats(app: AppContext, dataset: Path) -> None:
    """Show node, edge and per-tier counts."""
    app.emit(app.view_service(dataset, op="stats").stats())
