"""Custom Click base classes with --examples support.

Provides LvCommand and LvGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from latticeview.domain.types import Tier


def _examples_option(examples: str) -> click.Option:
    """An eager flag that prints *examples* and exits before the command runs."""

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples and exit.",
    )


class _ExamplesMixin:
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class LvCommand(_ExamplesMixin, click.Command):
    """A command accepting ``examples=`` for its ``--examples`` flag."""


class LvGroup(_ExamplesMixin, click.Group):
    """A group whose subcommands default to :class:`LvCommand`."""

    command_class = LvCommand


# ── Shared arguments and options ──────────────────────────────────────


def dataset_argument[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """The positional DATASET path (a JSON nodes/edges file)."""
    return click.argument("dataset", type=click.Path(dir_okay=False, path_type=Path))(func)


def tier_option[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Repeatable ``--tier``; omitted means the configured default tiers."""
    return click.option(
        "--tier",
        "tiers",
        multiple=True,
        type=click.Choice([t.value for t in Tier], case_sensitive=False),
        help="Visible tier (repeatable). Defaults to the configured tiers.",
    )(func)


def tiers_or_none(tiers: tuple[str, ...]) -> list[str] | None:
    return [t.lower() for t in tiers] if tiers else None
