"""Transport layer — how the console reaches the daemon's layers.

The navigator depends only on the two contracts in
:mod:`kuructl.transport.contracts`. Implementations:

- :class:`~kuructl.transport.client.SocketConsoleClient` talks to a running
  daemon over its Unix console socket.
- :class:`~kuructl.transport.local.LocalChannel` calls in-process layers.
"""

from kuructl.transport.contracts import (
    CommandChannel,
    ConsoleLayer,
    ExecResult,
    ExecStatus,
    LayerCommandSource,
    LoadStatus,
)

__all__ = [
    "CommandChannel",
    "ConsoleLayer",
    "ExecResult",
    "ExecStatus",
    "LayerCommandSource",
    "LoadStatus",
]
