"""Rich Console factory and theme for latticeview output.

Consoles render into a StringIO buffer so renderers keep a plain
``str`` contract. Outside a terminal Rich drops colour codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from latticeview.domain.styles import TIER_STYLES

LATTICE_THEME = Theme(
    {
        "lv.ok": "bold green",
        "lv.error": "bold red",
        "lv.warning": "bold yellow",
        "lv.op": "bold cyan",
        "lv.key": "dim",
        "lv.id": "bold blue",
        "lv.label": "bold",
        "lv.highlighted": "bold #f59e0b",
        "lv.faded": "dim",
        "lv.match": "bold magenta",
        **{f"lv.tier.{tier}": style.background for tier, style in TIER_STYLES.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=LATTICE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_tier_name(tier: str) -> str:
    """Rich style name for a tier; unknown tiers get no style."""
    return f"lv.tier.{tier}" if tier in TIER_STYLES else ""
