"""Pluggy hook specifications for kuructl."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from kuructl.transport.contracts import ConsoleLayer

hookspec = pluggy.HookspecMarker("kuructl")


class KuructlHookSpec:
    """Hook specifications for the kuructl plugin system."""

    @hookspec
    def kuructl_layers(self) -> list[ConsoleLayer] | None:
        """Return the console layers this plugin provides."""
