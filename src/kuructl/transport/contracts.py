"""Contracts between the console and the layers it drives.

INVARIANT: implementations report failures through status values, never by
raising. The navigator relies on the status trichotomy to decide what to
print and whether to fall back to the root menu.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel

if TYPE_CHECKING:
    from kuructl.domain.commands import CommandRegistry


class LoadStatus(StrEnum):
    """Outcome of a command-list request."""

    OK = "ok"
    ERROR = "error"


class ExecStatus(StrEnum):
    """Outcome of a command execution request."""

    OK = "ok"
    COMMAND_ERROR = "command_error"
    TRANSPORT_ERROR = "transport_error"


class ExecResult(BaseModel):
    """Status plus whatever text the layer produced."""

    model_config = {"frozen": True}

    status: ExecStatus
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ExecStatus.OK


@runtime_checkable
class LayerCommandSource(Protocol):
    """Supplies the command registry of a layer."""

    def get_commands(self, layer_id: int) -> tuple[CommandRegistry | None, LoadStatus]:
        """Return ``(registry, status)``; the registry is meaningless on ERROR."""
        ...


@runtime_checkable
class CommandChannel(Protocol):
    """Executes a layer command on the daemon."""

    def execute(self, layer_id: int, command_id: int, args: str) -> ExecResult:
        """Run *command_id* on *layer_id* with *args* (possibly empty, never None)."""
        ...


@runtime_checkable
class ConsoleLayer(Protocol):
    """What a layer must expose to be navigable from the console.

    Attributes:
        layer_id: Stable, non-negative identifier (see
            :class:`~kuructl.domain.location.LayerId`).
        name: Display name, at most 32 characters.
        commands: The layer's own command registry.
    """

    layer_id: int
    name: str
    commands: CommandRegistry

    def execute(self, command_id: int, args: str) -> str:
        """Execute a command and return its output.

        Raises:
            CommandFailed: The command was rejected (e.g. bad arguments).
        """
        ...
