"""Root CLI group for kuructl with global flags and command registration."""

from __future__ import annotations

import click

from kuructl import __version__
from kuructl.commands import register_commands
from kuructl.commands._context import AppContext
from kuructl.config.settings import KuruSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="kuructl")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--socket",
    "socket_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Daemon console socket (default: per-user socket, then root's).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    socket_path: str | None,
) -> None:
    """kuructl — remote management console for the Kurupira daemon.

    Without a subcommand, opens the interactive shell.
    """
    settings = KuruSettings.from_cli(
        config_path=config_path,
        # Unset flags fall through to env vars and kuructl.toml.
        verbose=verbose or None,
        log_json=log_json or None,
        socket_path=socket_path,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        from kuructl.commands.shell import start_shell

        start_shell(ctx.obj, local=False)


register_commands(cli)
