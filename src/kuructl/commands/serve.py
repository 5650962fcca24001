"""serve — expose plugin layers on a console socket."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from kuructl.commands._base import KuruCommand

if TYPE_CHECKING:
    from kuructl.commands._context import AppContext

logger = logging.getLogger(__name__)


@click.command(
    cls=KuruCommand,
    examples="""\
  # Serve on the default per-user socket
  kuructl serve

  # Serve on an explicit path, then connect a console to it
  kuructl --socket /tmp/kurud-dev.sock serve
  kuructl --socket /tmp/kurud-dev.sock shell""",
)
@click.pass_obj
def serve(app: AppContext) -> None:
    """Serve the plugin-provided layers until interrupted."""
    from kuructl.transport.client import default_socket_candidates
    from kuructl.transport.server import ConsoleServer

    path = app.settings.effective_socket or default_socket_candidates()[0]
    layers = app.layers()
    if not layers:
        click.echo("No layers available to serve.", err=True)
        raise SystemExit(1)

    names = ", ".join(f"{layer.name}({layer.layer_id})" for layer in layers)
    click.echo(f"Serving {names} on {path}", err=True)
    try:
        with ConsoleServer(path, layers) as server:
            server.serve_forever()
    except KeyboardInterrupt:
        logger.debug("Console server interrupted")
    except OSError as exc:
        msg = f"Cannot serve on {path}: {exc}"
        raise click.ClickException(msg) from exc
