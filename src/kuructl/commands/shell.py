"""shell — the interactive layer console."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from kuructl.commands._base import KuruCommand

if TYPE_CHECKING:
    from kuructl.commands._context import AppContext


def start_shell(app: AppContext, *, local: bool) -> None:
    """Run the console loop on stdin, interactively when it is a terminal."""
    from kuructl.console.shell import PromptLineReader, StreamLineReader, run_console

    navigator = app.navigator(local=local)
    if sys.stdin.isatty():
        reader = PromptLineReader(navigator, history_file=app.settings.console.history_file)
    else:
        reader = StreamLineReader(sys.stdin)
    run_console(navigator, reader)


@click.command(
    cls=KuruCommand,
    local_option=True,
    examples="""\
  # Connect to the daemon socket discovered for the current user
  kuructl shell

  # Use an explicit socket
  kuructl --socket /var/run/kurud.sock shell

  # Drive the built-in stub layers without a daemon
  kuructl shell --local

  # Scripted session
  printf 'net\\necho hello\\nexit\\nexit\\n' | kuructl shell --local""",
)
@click.pass_obj
def shell(app: AppContext, local: bool) -> None:
    """Open the interactive layer console."""
    start_shell(app, local=local)
