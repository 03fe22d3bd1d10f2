"""Subcommand modules for latticeview.

Provides register_commands() which uses deferred imports to keep
``latticeview --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the layout group and the standalone commands on the root group."""
    # --- Groups ---
    from latticeview.commands.layout import layout

    cli.add_command(layout)

    # --- Standalone commands ---
    from latticeview.commands.export import export
    from latticeview.commands.query import neighbors, search, stats
    from latticeview.commands.view import view

    cli.add_command(view)
    cli.add_command(neighbors)
    cli.add_command(search)
    cli.add_command(stats)
    cli.add_command(export)
