"""exec — run a single layer command without entering the shell."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kuructl.commands._base import LAYER, KuruCommand

if TYPE_CHECKING:
    from kuructl.commands._context import AppContext


@click.command(
    "exec",
    cls=KuruCommand,
    local_option=True,
    examples="""\
  kuructl exec net echo hello world
  kuructl exec link command2 a b c
  kuructl exec net benchmark 1000 --local""",
)
@click.argument("layer_id", metavar="LAYER", type=LAYER)
@click.argument("command_name", metavar="COMMAND")
@click.argument("args", nargs=-1)
@click.pass_obj
def exec_cmd(
    app: AppContext,
    layer_id: int,
    command_name: str,
    args: tuple[str, ...],
    local: bool,
) -> None:
    """Execute COMMAND on LAYER with optional ARGS.

    Exits with status 1 when the layer cannot be loaded, the command is
    unknown or rejected, or the daemon cannot be reached.
    """
    from kuructl.console.navigator import (
        MSG_LOAD_FAILED,
        MSG_NO_SUCH_COMMAND,
        MSG_SEND_FAILED,
    )
    from kuructl.transport.contracts import ExecStatus, LoadStatus

    channel = app.channel(local=local)

    registry, status = channel.get_commands(layer_id)
    if status is not LoadStatus.OK or registry is None:
        click.echo(MSG_LOAD_FAILED, err=True)
        raise SystemExit(1)

    command = registry.find(command_name)
    if command is None:
        click.echo(MSG_NO_SUCH_COMMAND.format(token=command_name), err=True)
        raise SystemExit(1)

    result = channel.execute(layer_id, command.id, " ".join(args))
    if result.status is ExecStatus.OK:
        if result.output:
            click.echo(result.output.rstrip("\n"))
        return
    if result.status is ExecStatus.COMMAND_ERROR:
        click.echo(command.doc, err=True)
    else:
        click.echo(MSG_SEND_FAILED, err=True)
    raise SystemExit(1)
