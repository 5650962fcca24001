"""Subcommand modules for kuructl.

Provides register_commands() which uses deferred imports to keep
``kuructl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from kuructl.commands.exec_cmd import exec_cmd
    from kuructl.commands.layers import commands
    from kuructl.commands.serve import serve
    from kuructl.commands.shell import shell

    cli.add_command(shell)
    cli.add_command(commands)
    cli.add_command(exec_cmd)
    cli.add_command(serve)
