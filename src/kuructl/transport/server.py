"""Daemon-side console server.

Listens on a Unix stream socket and answers the requests produced by
:class:`~kuructl.transport.client.SocketConsoleClient`: command lists come
from each layer's registry, executions are dispatched to ``layer.execute``.
Each connection carries a single request and is handled on its own thread.
"""

from __future__ import annotations

import logging
import os
import socketserver
import threading
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from kuructl.errors import CommandFailed, FramingError
from kuructl.transport import framing
from kuructl.transport.contracts import ConsoleLayer

logger = logging.getLogger(__name__)

SOCKET_PERMISSIONS = 0o660


class _ConsoleRequestHandler(socketserver.BaseRequestHandler):
    server: _UnixConsoleServer

    def handle(self) -> None:
        sock = self.request
        try:
            layer_id, command_id, args = framing.read_request(sock)
        except (OSError, FramingError):
            logger.warning("Malformed console request", exc_info=True)
            return

        layer = self.server.layers.get(layer_id)
        logger.debug(
            "Console request: layer=%d (%s) command=%d",
            layer_id,
            layer.name if layer else "?",
            command_id,
        )

        if layer is None:
            # Closing without a response is how the client learns the layer
            # is not loaded.
            logger.warning("Console request for unknown layer %d", layer_id)
            return

        try:
            if args is None:
                sock.sendall(framing.encode_command_list(layer.commands))
            else:
                sock.sendall(framing.encode_output(self._execute(layer, command_id, args)))
            # Wait for the client's ack before closing.
            sock.recv(1)
        except OSError:
            logger.warning("Console client went away", exc_info=True)

    @staticmethod
    def _execute(layer: ConsoleLayer, command_id: int, args: str) -> str:
        try:
            return layer.execute(command_id, args)
        except CommandFailed as exc:
            logger.debug("Layer %s rejected command %d: %s", layer.name, command_id, exc)
            return ""
        except Exception:
            logger.exception("Layer %s crashed executing command %d", layer.name, command_id)
            return ""


class _UnixConsoleServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, path: str, layers: dict[int, ConsoleLayer]) -> None:
        self.layers = layers
        super().__init__(path, _ConsoleRequestHandler)


class ConsoleServer:
    """Serve a set of layers on a console socket.

    Usage::

        with ConsoleServer(path, layers) as server:
            server.serve_forever()
    """

    def __init__(self, socket_path: Path | str, layers: Iterable[ConsoleLayer]) -> None:
        self._path = Path(socket_path)
        self._layers: dict[int, ConsoleLayer] = {}
        for layer in layers:
            if layer.layer_id in self._layers:
                logger.warning(
                    "Duplicate layer id %d (%s); keeping %s",
                    layer.layer_id,
                    layer.name,
                    self._layers[layer.layer_id].name,
                )
                continue
            self._layers[layer.layer_id] = layer
        self._server: _UnixConsoleServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def socket_path(self) -> Path:
        return self._path

    @property
    def layer_ids(self) -> list[int]:
        return sorted(self._layers)

    def open(self) -> None:
        """Bind the socket, replacing a stale socket file if present."""
        if self._server is not None:
            return
        self._path.unlink(missing_ok=True)
        self._server = _UnixConsoleServer(str(self._path), self._layers)
        os.chmod(self._path, SOCKET_PERMISSIONS)
        logger.info("Console server listening on %s", self._path)

    def serve_forever(self) -> None:
        self.open()
        assert self._server is not None
        self._server.serve_forever()

    def start(self) -> None:
        """Serve on a background thread."""
        self.open()
        assert self._server is not None
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="kuructl-console-server", daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        if self._server is None:
            return
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()
        self._server = None
        self._path.unlink(missing_ok=True)
        logger.info("Console server closed")

    def __enter__(self) -> ConsoleServer:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
