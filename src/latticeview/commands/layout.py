"""Command group: layout bundles."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from latticeview.commands._base import LvGroup
from latticeview.services.view import describe_layouts

if TYPE_CHECKING:
    from latticeview.commands._context import AppContext

_LAYOUT_EXAMPLES = """\
  latticeview layout list
  latticeview layout show concentric
  latticeview --json layout show force"""


@click.group(cls=LvGroup, examples=_LAYOUT_EXAMPLES)
@click.pass_obj
def layout(app: AppContext) -> None:
    """Inspect the layout bundles passed to the renderer."""


@layout.command(
    "list",
    examples="""\
  latticeview layout list
  latticeview -v layout list""",
)
@click.pass_obj
def list_layouts(app: AppContext) -> None:
    """List every layout kind and its algorithm."""
    app.emit(describe_layouts())


@layout.command(
    examples="""\
  latticeview layout show hierarchy
  latticeview layout show unknown   # falls back to force""",
)
@click.argument("kind")
@click.pass_obj
def show(app: AppContext, kind: str) -> None:
    """Show the renderer parameters for one layout kind."""
    app.emit(describe_layouts(kind))
