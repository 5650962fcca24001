"""Unix-socket client for the daemon console.

One short-lived connection per request. Any socket or framing failure is
logged and reported as a status; nothing propagates to the navigator.
"""

from __future__ import annotations

import logging
import os
import socket
from collections.abc import Sequence
from pathlib import Path

from kuructl.domain.commands import CommandRegistry
from kuructl.errors import FramingError
from kuructl.transport import framing
from kuructl.transport.contracts import ExecResult, ExecStatus, LoadStatus

logger = logging.getLogger(__name__)

SOCKET_NAME_FORMAT = "/tmp/kurud-{uid}.sock"
ROOT_UID = 0


def default_socket_candidates() -> list[Path]:
    """Per-user socket first, then the one owned by root."""
    uids = [os.getuid()]
    if ROOT_UID not in uids:
        uids.append(ROOT_UID)
    return [Path(SOCKET_NAME_FORMAT.format(uid=uid)) for uid in uids]


class SocketConsoleClient:
    """Talks to the daemon's console socket.

    Implements both :class:`~kuructl.transport.contracts.LayerCommandSource`
    and :class:`~kuructl.transport.contracts.CommandChannel`.

    Args:
        socket_path: Explicit socket path. When None, the default candidates
            are tried in order and the first reachable one is remembered.
        timeout: Per-connection timeout in seconds (None blocks forever).
    """

    def __init__(
        self,
        socket_path: Path | str | None = None,
        *,
        timeout: float | None = 5.0,
        candidates: Sequence[Path] | None = None,
    ) -> None:
        self._timeout = timeout
        self._resolved: Path | None = Path(socket_path) if socket_path else None
        self._candidates = list(candidates) if candidates is not None else default_socket_candidates()

    @property
    def socket_path(self) -> Path | None:
        """The socket in use, once resolved."""
        return self._resolved

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def get_commands(self, layer_id: int) -> tuple[CommandRegistry | None, LoadStatus]:
        try:
            with self._connect() as sock:
                sock.sendall(framing.encode_list_request(layer_id))
                registry = framing.read_command_list(sock)
                sock.sendall(framing.ACK)
        except (OSError, FramingError):
            logger.warning("Could not load commands for layer %d", layer_id, exc_info=True)
            return None, LoadStatus.ERROR
        logger.debug("Loaded %d commands for layer %d", len(registry), layer_id)
        return registry, LoadStatus.OK

    def execute(self, layer_id: int, command_id: int, args: str) -> ExecResult:
        try:
            with self._connect() as sock:
                sock.sendall(framing.encode_exec_request(layer_id, command_id, args))
                output = framing.read_output(sock)
                sock.sendall(framing.ACK)
        except (OSError, FramingError):
            logger.warning(
                "Could not execute command %d on layer %d", command_id, layer_id, exc_info=True
            )
            return ExecResult(status=ExecStatus.TRANSPORT_ERROR)
        # The daemon answers a rejected command with an empty message.
        if not output:
            return ExecResult(status=ExecStatus.COMMAND_ERROR)
        return ExecResult(status=ExecStatus.OK, output=output)

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def _open(self, path: Path) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._timeout)
        try:
            sock.connect(str(path))
        except OSError:
            sock.close()
            raise
        return sock

    def _connect(self) -> socket.socket:
        if self._resolved is not None:
            return self._open(self._resolved)

        last_error: OSError | None = None
        for candidate in self._candidates:
            try:
                sock = self._open(candidate)
            except OSError as exc:
                logger.debug("Console socket %s unavailable: %s", candidate, exc)
                last_error = exc
                continue
            self._resolved = candidate
            logger.debug("Using console socket %s", candidate)
            return sock

        if last_error is None:
            last_error = FileNotFoundError("no console socket candidates")
        raise last_error
