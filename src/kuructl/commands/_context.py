"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the transport and the navigator lazily so
``--help`` and ``--version`` never touch the daemon socket or plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from kuructl.config.settings import KuruSettings
    from kuructl.console.navigator import Navigator
    from kuructl.plugins.manager import PluginManager
    from kuructl.transport.client import SocketConsoleClient
    from kuructl.transport.contracts import ConsoleLayer
    from kuructl.transport.local import LocalChannel


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: KuruSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._client: SocketConsoleClient | None = None
        self._local: LocalChannel | None = None

        from kuructl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with built-in and entry-point layers loaded."""
        if self._plugins is None:
            from kuructl.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(disabled=self.settings.plugins.disabled)
        return self._plugins

    def layers(self) -> list[ConsoleLayer]:
        return self.plugins.collect_layers()

    def channel(self, *, local: bool = False) -> SocketConsoleClient | LocalChannel:
        """The daemon client, or an in-process channel over plugin layers."""
        if local:
            if self._local is None:
                from kuructl.transport.local import LocalChannel

                self._local = LocalChannel(self.layers())
            return self._local
        if self._client is None:
            from kuructl.transport.client import SocketConsoleClient

            self._client = SocketConsoleClient(
                self.settings.effective_socket,
                timeout=self.settings.daemon.timeout,
            )
        return self._client

    def navigator(
        self,
        *,
        local: bool = False,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> Navigator:
        from kuructl.console.navigator import Navigator

        channel = self.channel(local=local)
        console = self.settings.console
        return Navigator(
            channel,
            channel,
            product=console.product,
            exit_keyword=console.exit_keyword,
            prompt_max_chars=console.prompt_max_chars,
            out=out,
            err=err,
        )

