"""In-process channel that drives layer objects directly."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kuructl.domain.commands import CommandRegistry
from kuructl.errors import CommandFailed
from kuructl.transport.contracts import ConsoleLayer, ExecResult, ExecStatus, LoadStatus

logger = logging.getLogger(__name__)


class LocalChannel:
    """Serve command lists and executions from in-process layers.

    An unknown layer is a transport-level failure, the same as a daemon
    that does not have the layer loaded. Empty output counts as a rejected
    command, as it does over the console socket.
    """

    def __init__(self, layers: Iterable[ConsoleLayer]) -> None:
        self._layers: dict[int, ConsoleLayer] = {}
        for layer in layers:
            self._layers.setdefault(layer.layer_id, layer)

    @property
    def layers(self) -> list[ConsoleLayer]:
        return list(self._layers.values())

    def get_commands(self, layer_id: int) -> tuple[CommandRegistry | None, LoadStatus]:
        layer = self._layers.get(layer_id)
        if layer is None:
            logger.debug("No local layer with id %d", layer_id)
            return None, LoadStatus.ERROR
        return layer.commands, LoadStatus.OK

    def execute(self, layer_id: int, command_id: int, args: str) -> ExecResult:
        layer = self._layers.get(layer_id)
        if layer is None:
            return ExecResult(status=ExecStatus.TRANSPORT_ERROR)
        try:
            output = layer.execute(command_id, args)
        except CommandFailed as exc:
            logger.debug("Layer %s rejected command %d: %s", layer.name, command_id, exc)
            return ExecResult(status=ExecStatus.COMMAND_ERROR)
        except Exception:
            logger.exception("Layer %s crashed executing command %d", layer.name, command_id)
            return ExecResult(status=ExecStatus.COMMAND_ERROR)
        if not output:
            return ExecResult(status=ExecStatus.COMMAND_ERROR)
        return ExecResult(status=ExecStatus.OK, output=output)
