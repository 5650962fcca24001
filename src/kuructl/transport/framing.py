"""Binary framing for the daemon console socket.

Request
    int32 layer_id, int32 command_id, then (unless command_id is
    LIST_REQUEST) uint8 args_len and args_len bytes of UTF-8 arguments.

List response
    int32 byte_size, then byte_size / 100 command records of
    int32 id, char name[32], char doc[64] (NUL padded; a field that is
    full has no terminator).

Exec response
    int32 msg_len, then msg_len bytes of UTF-8 output.

After reading a response the client sends one ack byte. All integers are
network byte order.
"""

from __future__ import annotations

import struct
from typing import Protocol

from kuructl.domain.commands import COMMAND_DOC_LENGTH, COMMAND_NAME_LENGTH, Command, CommandRegistry
from kuructl.errors import FramingError

LIST_REQUEST = -1
MAX_ARGS_LENGTH = 0xFF
MAX_OUTPUT_LENGTH = 1024
ACK = b"\x00"

_INT = struct.Struct("!i")
_HEADER = struct.Struct("!ii")
_ARGS_LEN = struct.Struct("!B")
_RECORD = struct.Struct(f"!i{COMMAND_NAME_LENGTH}s{COMMAND_DOC_LENGTH}s")

RECORD_SIZE = _RECORD.size


class SocketLike(Protocol):
    def recv(self, bufsize: int, /) -> bytes: ...

    def sendall(self, data: bytes, /) -> None: ...


def recv_exact(sock: SocketLike, size: int) -> bytes:
    """Read exactly *size* bytes or raise FramingError on early EOF."""
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = sock.recv(remaining)
        if not chunk:
            msg = f"connection closed after {size - remaining} of {size} bytes"
            raise FramingError(msg)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def to_utf8(text: str) -> bytes:
    """Encode text for the wire without raising.

    Bytes smuggled in as surrogate escapes (undecodable input read with
    ``errors="surrogateescape"``) go out unchanged; any other lone surrogate
    becomes ``?``.
    """
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", errors="replace")


def _fixed(text: str, size: int) -> bytes:
    # No terminator when the text fills the field.
    raw = to_utf8(text)[:size]
    return raw.ljust(size, b"\x00")


def _unfixed(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace")


def clip_args(args: str) -> bytes:
    """Encode arguments, truncated to the 255 bytes a request can carry."""
    return to_utf8(args)[:MAX_ARGS_LENGTH]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def encode_list_request(layer_id: int) -> bytes:
    return _HEADER.pack(layer_id, LIST_REQUEST)


def encode_exec_request(layer_id: int, command_id: int, args: str) -> bytes:
    if command_id < 0:
        msg = f"command id {command_id} is reserved"
        raise FramingError(msg)
    payload = clip_args(args)
    return _HEADER.pack(layer_id, command_id) + _ARGS_LEN.pack(len(payload)) + payload


def read_request(sock: SocketLike) -> tuple[int, int, str | None]:
    """Read one request: ``(layer_id, command_id, args)``.

    ``args`` is None for list requests.
    """
    layer_id, command_id = _HEADER.unpack(recv_exact(sock, _HEADER.size))
    if command_id == LIST_REQUEST:
        return layer_id, command_id, None
    (args_len,) = _ARGS_LEN.unpack(recv_exact(sock, _ARGS_LEN.size))
    raw = recv_exact(sock, args_len) if args_len else b""
    return layer_id, command_id, raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def encode_command_list(registry: CommandRegistry) -> bytes:
    body = b"".join(
        _RECORD.pack(
            command.id,
            _fixed(command.name, COMMAND_NAME_LENGTH),
            _fixed(command.doc, COMMAND_DOC_LENGTH),
        )
        for command in registry
    )
    return _INT.pack(len(body)) + body


def read_command_list(sock: SocketLike) -> CommandRegistry:
    (size,) = _INT.unpack(recv_exact(sock, _INT.size))
    if size < 0 or size % RECORD_SIZE:
        msg = f"invalid command list size {size}"
        raise FramingError(msg)
    body = recv_exact(sock, size) if size else b""
    commands: list[Command] = []
    for offset in range(0, size, RECORD_SIZE):
        cid, name, doc = _RECORD.unpack_from(body, offset)
        try:
            commands.append(Command(id=cid, name=_unfixed(name), doc=_unfixed(doc)))
        except ValueError as exc:
            msg = f"invalid command record at offset {offset}: {exc}"
            raise FramingError(msg) from exc
    return CommandRegistry(commands)


def encode_output(output: str) -> bytes:
    raw = to_utf8(output)[:MAX_OUTPUT_LENGTH]
    return _INT.pack(len(raw)) + raw


def read_output(sock: SocketLike) -> str:
    (size,) = _INT.unpack(recv_exact(sock, _INT.size))
    if size < 0:
        msg = f"invalid output length {size}"
        raise FramingError(msg)
    raw = recv_exact(sock, size) if size else b""
    return raw.decode("utf-8", errors="replace")
