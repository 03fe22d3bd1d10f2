"""Standalone command: export the visible view for an external renderer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from latticeview.commands._base import LvCommand, dataset_argument, tier_option, tiers_or_none
from latticeview.render.export import EXPORT_FORMATS

if TYPE_CHECKING:
    from latticeview.commands._context import AppContext


@click.command(
    cls=LvCommand,
    examples="""\
  latticeview export graph.json
  latticeview export graph.json --format dot --output lattice.dot
  latticeview export graph.json --format d3 --tier hyper --layout circle
  latticeview -q export graph.json --format dot | dot -Tsvg > lattice.svg""",
)
@dataset_argument
@click.option(
    "--format",
    "fmt",
    type=click.Choice(EXPORT_FORMATS, case_sensitive=False),
    default=None,
    help="Export format. Defaults to [export] format in latticeview.toml.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
@tier_option
@click.option("--query", default="", help="Mark nodes whose label contains this text.")
@click.option("--layout", "layout_kind", default=None, help="Layout kind.")
@click.pass_obj
def export(
    app: AppContext,
    dataset: Path,
    fmt: str | None,
    output: Path | None,
    tiers: tuple[str, ...],
    query: str,
    layout_kind: str | None,
) -> None:
    """Serialise the visible view as Cytoscape JSON, D3 JSON or Graphviz DOT."""
    service = app.view_service(dataset, op="export")
    app.emit(
        service.export(
            (fmt or app.settings.export.format).lower(),
            output=output,
            tiers=tiers_or_none(tiers),
            query=query,
            layout=layout_kind,
        )
    )
