"""Client for the sway IPC protocol spoken over a Unix domain socket."""

from __future__ import annotations

import enum
import os
import socket
import struct
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

MAGIC = b"i3-ipc"
_LENGTHS = struct.Struct("=II")
HEADER_SIZE = len(MAGIC) + _LENGTHS.size
_CLOSE_MARKER = b"close-sway-ipc"
SUBSCRIBE_SUCCESS = '{"success": true}'


class IpcType(enum.IntEnum):
    """Message and event types of the sway IPC protocol."""

    COMMAND = 0
    GET_WORKSPACES = 1
    SUBSCRIBE = 2
    GET_OUTPUTS = 3
    GET_TREE = 4
    GET_MARKS = 5
    GET_BAR_CONFIG = 6
    GET_VERSION = 7
    GET_BINDING_MODES = 8
    GET_CONFIG = 9
    SEND_TICK = 10
    SYNC = 11
    GET_BINDING_STATE = 12
    GET_INPUTS = 100
    GET_SEATS = 101
    EVENT_WORKSPACE = 0x80000000
    EVENT_MODE = 0x80000002
    EVENT_WINDOW = 0x80000003
    EVENT_BARCONFIG_UPDATE = 0x80000004
    EVENT_BINDING = 0x80000005
    EVENT_SHUTDOWN = 0x80000006
    EVENT_TICK = 0x80000007
    EVENT_BAR_STATE_UPDATE = 0x80000014
    EVENT_INPUT = 0x80000015


class IpcError(RuntimeError):
    """Raised when talking to the compositor fails."""


@dataclass(frozen=True)
class IpcResponse:
    """One message received from the compositor."""

    size: int
    type: int
    payload: str


Callback = Callable[[IpcResponse], None]


def get_socket_path(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the IPC socket path from SWAYSOCK or by asking sway."""
    environ = os.environ if env is None else env
    path = environ.get("SWAYSOCK")
    if path is not None:
        return path
    try:
        result = subprocess.run(
            ["sway", "--get-socketpath"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise IpcError("Failed to get socket path") from exc
    output = result.stdout or ""
    if not output:
        raise IpcError("Socket path is empty")
    if output.endswith("\n"):
        output = output[:-1]
    return output


def encode_message(message_type: int, payload: str = "") -> bytes:
    """Build the wire form of one IPC message."""
    body = payload.encode("utf-8")
    return MAGIC + _LENGTHS.pack(len(body), int(message_type)) + body


def decode_header(header: bytes) -> Tuple[int, int]:
    """Return (payload length, message type) from a message header."""
    if len(header) != HEADER_SIZE:
        raise IpcError("Unable to receive IPC header")
    if header[: len(MAGIC)] != MAGIC:
        raise IpcError("Invalid IPC magic")
    return _LENGTHS.unpack(header[len(MAGIC):])


class Ipc:
    """Two connections to the compositor: one for commands, one for events."""

    def __init__(self, socket_path: Optional[str] = None) -> None:
        path = socket_path if socket_path is not None else get_socket_path()
        self.socket_path = path
        self._lock = threading.Lock()
        self._cmd_callbacks: List[Callback] = []
        self._event_callbacks: List[Callback] = []
        self._closed = False
        self._cmd = self._open(path)
        try:
            self._event = self._open(path)
        except IpcError:
            self._cmd.close()
            raise

    @staticmethod
    def _open(path: str) -> socket.socket:
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as exc:
            raise IpcError("Unable to open Unix socket") from exc
        try:
            sock.connect(path)
        except OSError as exc:
            sock.close()
            raise IpcError("Unable to connect to Sway") from exc
        return sock

    def connect_cmd(self, callback: Callback) -> None:
        """Call ``callback`` with every reply to a command."""
        self._cmd_callbacks.append(callback)

    def connect_event(self, callback: Callback) -> None:
        """Call ``callback`` with every event received."""
        self._event_callbacks.append(callback)

    def _read_exact(self, sock: socket.socket, size: int, error: str) -> Optional[bytes]:
        data = bytearray()
        while len(data) < size:
            try:
                chunk = sock.recv(size - len(data))
            except InterruptedError:
                continue
            except OSError as exc:
                if self._closed:
                    return None
                raise IpcError(error) from exc
            if self._closed:
                return None
            if not chunk:
                raise IpcError(error)
            data += chunk
        return bytes(data)

    def _recv(self, sock: socket.socket) -> IpcResponse:
        header = self._read_exact(sock, HEADER_SIZE, "Unable to receive IPC header")
        if header is None:
            return IpcResponse(0, 0, "")
        size, message_type = decode_header(header)
        body = self._read_exact(sock, size, "Unable to receive IPC payload")
        if body is None:
            return IpcResponse(0, 0, "")
        return IpcResponse(size, message_type, body.decode("utf-8", errors="replace"))

    def _exchange(self, sock: socket.socket, message_type: int, payload: str) -> IpcResponse:
        message = encode_message(message_type, payload)
        try:
            sock.sendall(message[:HEADER_SIZE])
        except OSError as exc:
            raise IpcError("Unable to send IPC header") from exc
        try:
            sock.sendall(message[HEADER_SIZE:])
        except OSError as exc:
            raise IpcError("Unable to send IPC payload") from exc
        return self._recv(sock)

    def send_cmd(self, message_type: int, payload: str = "") -> IpcResponse:
        """Send a command, notify command listeners and return the reply."""
        with self._lock:
            response = self._exchange(self._cmd, message_type, payload)
            for callback in list(self._cmd_callbacks):
                callback(response)
        return response

    def subscribe(self, payload: str) -> IpcResponse:
        """Subscribe the event connection to the events named in ``payload``."""
        response = self._exchange(self._event, IpcType.SUBSCRIBE, payload)
        if response.payload != SUBSCRIBE_SUCCESS:
            raise IpcError("Unable to subscribe ipc event")
        return response

    def handle_event(self) -> IpcResponse:
        """Wait for one event, notify event listeners and return it."""
        response = self._recv(self._event)
        for callback in list(self._event_callbacks):
            callback(response)
        return response

    def close(self) -> None:
        """Close both connections; pending reads then return empty responses."""
        if self._closed:
            return
        self._closed = True
        for sock in (self._cmd, self._event):
            try:
                sock.sendall(_CLOSE_MARKER)
            except OSError:
                pass
            sock.close()

    def __enter__(self) -> "Ipc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()