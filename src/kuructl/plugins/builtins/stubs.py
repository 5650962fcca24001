"""Built-in stub layers for exercising the console without real protocols.

The link stub answers every command by echoing its id and arguments. The
net stub offers an echo and a loopback benchmark. Both are registered under
the plugin name ``stubs`` and can be disabled with
``[plugins] disabled = ["stubs"]``.
"""

from __future__ import annotations

import time
from collections import deque

import pluggy

from kuructl.domain.commands import CommandRegistry
from kuructl.domain.location import LayerId
from kuructl.errors import CommandFailed

hookimpl = pluggy.HookimplMarker("kuructl")


class LinkStubLayer:
    """Link layer placeholder with four numbered commands."""

    layer_id = int(LayerId.LINK)
    name = "link"

    def __init__(self) -> None:
        self.commands = CommandRegistry.from_entries(
            (n, f"command{n}", f"[command{n}] - execute command {n}") for n in range(1, 5)
        )

    def execute(self, command_id: int, args: str) -> str:
        if self.commands.find_by_id(command_id) is None:
            msg = f"unknown command id {command_id}"
            raise CommandFailed(msg)
        return f"command {command_id} executed.\n  arguments: {args}.\n"


class NetStubLayer:
    """Net layer placeholder."""

    layer_id = int(LayerId.NET)
    name = "net"

    ECHO = 1
    BENCHMARK = 2

    def __init__(self) -> None:
        self.commands = CommandRegistry.from_entries(
            [
                (self.ECHO, "echo", "[echo <text>] - send <text> back."),
                (
                    self.BENCHMARK,
                    "benchmark",
                    "[benchmark <count>] - loop <count> packets through a queue.",
                ),
            ]
        )

    def execute(self, command_id: int, args: str) -> str:
        if command_id == self.ECHO:
            if not args:
                msg = "echo needs some text"
                raise CommandFailed(msg)
            return f"{args}\n"
        if command_id == self.BENCHMARK:
            return self._benchmark(args)
        msg = f"unknown command id {command_id}"
        raise CommandFailed(msg)

    @staticmethod
    def _benchmark(args: str) -> str:
        tokens = args.split()
        if len(tokens) != 1:
            msg = "benchmark takes exactly one argument"
            raise CommandFailed(msg)
        try:
            count = int(tokens[0])
        except ValueError as exc:
            msg = f"not a packet count: {tokens[0]!r}"
            raise CommandFailed(msg) from exc
        if count <= 0:
            msg = "packet count must be positive"
            raise CommandFailed(msg)

        queue: deque[int] = deque()
        start = time.perf_counter()
        for seq in range(count):
            queue.append(seq)
            queue.popleft()
        elapsed = time.perf_counter() - start
        return f"{count} messages sent.\nin {elapsed:.3f} seconds.\n"


class StubLayersPlugin:
    """Contributes the link and net stub layers."""

    @hookimpl
    def kuructl_layers(self) -> list[object]:
        return [LinkStubLayer(), NetStubLayer()]
