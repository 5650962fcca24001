"""Rich Console factory, theme, and registry rendering.

Creates Console instances that render to a StringIO buffer so callers keep
a plain ``str`` to hand to ``click.echo``. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from kuructl.domain.commands import CommandRegistry

KURU_THEME = Theme(
    {
        "kuru.ok": "bold green",
        "kuru.error": "bold red",
        "kuru.id": "bold blue",
        "kuru.name": "bold cyan",
        "kuru.doc": "dim",
        "kuru.title": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=KURU_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_registry(
    registry: CommandRegistry,
    *,
    title: str | None = None,
    no_color: bool = False,
    width: int | None = None,
) -> str:
    """Render a command registry as an id/name/doc table."""
    console = create_console(no_color=no_color, width=width)
    table = Table(title=title, title_style="kuru.title", show_edge=False)
    table.add_column("ID", style="kuru.id", justify="right")
    table.add_column("Command", style="kuru.name")
    table.add_column("Description", style="kuru.doc")
    for command in registry:
        # Docs like "[echo <text>]" would otherwise parse as markup.
        table.add_row(str(command.id), escape(command.name), escape(command.doc))
    console.print(table)
    return get_output(console)
