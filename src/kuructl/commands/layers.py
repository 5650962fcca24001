"""commands — list the commands a layer exposes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kuructl.commands._base import LAYER, KuruCommand, layer_title

if TYPE_CHECKING:
    from kuructl.commands._context import AppContext


@click.command(
    cls=KuruCommand,
    local_option=True,
    examples="""\
  kuructl commands net
  kuructl commands 1
  kuructl commands link --local""",
)
@click.argument("layer_id", metavar="LAYER", type=LAYER)
@click.pass_obj
def commands(app: AppContext, layer_id: int, local: bool) -> None:
    """List the commands of LAYER (name or numeric id)."""
    from kuructl.console.navigator import MSG_LOAD_FAILED
    from kuructl.output.console import render_registry
    from kuructl.transport.contracts import LoadStatus

    registry, status = app.channel(local=local).get_commands(layer_id)
    if status is not LoadStatus.OK or registry is None:
        click.echo(MSG_LOAD_FAILED, err=True)
        raise SystemExit(1)
    click.echo(render_registry(registry, title=layer_title(layer_id)).rstrip("\n"))
