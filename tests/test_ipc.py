import json
import os
import socket
import struct
import tempfile
import threading
from types import SimpleNamespace
from unittest import mock

import pytest

from barkit.ipc import (
    HEADER_SIZE,
    Ipc,
    IpcError,
    IpcResponse,
    IpcType,
    decode_header,
    encode_message,
    get_socket_path,
)


def _recv_exact(conn, size):
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            return None
        data += chunk
    return data


def _serve(conn):
    with conn:
        while True:
            header = _recv_exact(conn, HEADER_SIZE)
            if header is None:
                return
            try:
                size, kind = decode_header(header)
            except IpcError:
                return
            body = _recv_exact(conn, size) if size else b""
            if body is None:
                return
            payload = body.decode()
            if kind == IpcType.SUBSCRIBE:
                if payload == '["bad"]':
                    conn.sendall(encode_message(kind, '{"success": false}'))
                else:
                    conn.sendall(encode_message(kind, '{"success": true}'))
                    conn.sendall(
                        encode_message(IpcType.EVENT_WORKSPACE, json.dumps({"change": "focus"}))
                    )
            else:
                conn.sendall(encode_message(kind, json.dumps({"echo": payload})))


@pytest.fixture
def server_path():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "ipc.sock")
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        listener.bind(path)
        listener.listen()

        def accept_loop():
            while True:
                try:
                    conn, _ = listener.accept()
                except OSError:
                    return
                threading.Thread(target=_serve, args=(conn,), daemon=True).start()

        threading.Thread(target=accept_loop, daemon=True).start()
        yield path
        listener.close()


def test_encode_message_wire_bytes():
    assert encode_message(IpcType.GET_TREE, "") == b"i3-ipc" + struct.pack("=II", 0, 4)


def test_encode_decode_round_trip():
    message = encode_message(IpcType.COMMAND, "workspace 1")
    assert decode_header(message[:HEADER_SIZE]) == (len("workspace 1"), IpcType.COMMAND)
    assert message[HEADER_SIZE:] == b"workspace 1"


def test_payload_length_counts_bytes():
    message = encode_message(IpcType.COMMAND, "é")
    size, _ = decode_header(message[:HEADER_SIZE])
    assert size == len("é".encode("utf-8"))


def test_decode_header_rejects_bad_magic():
    with pytest.raises(IpcError):
        decode_header(b"xx-ipc" + struct.pack("=II", 0, 0))


def test_decode_header_rejects_short_header():
    with pytest.raises(IpcError):
        decode_header(b"i3-ipc")


def test_socket_path_from_environment():
    assert get_socket_path({"SWAYSOCK": "/run/sway.sock"}) == "/run/sway.sock"


def test_socket_path_from_sway_strips_newline():
    fake = SimpleNamespace(stdout="/run/user/sway-ipc.sock\n")
    with mock.patch("barkit.ipc.subprocess.run", return_value=fake):
        assert get_socket_path({}) == "/run/user/sway-ipc.sock"


def test_socket_path_empty_raises():
    with mock.patch("barkit.ipc.subprocess.run", return_value=SimpleNamespace(stdout="")):
        with pytest.raises(IpcError):
            get_socket_path({})


def test_socket_path_missing_sway_raises():
    with mock.patch("barkit.ipc.subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(IpcError):
            get_socket_path({})


def test_connect_failure_raises():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(IpcError):
            Ipc(os.path.join(tmp, "missing.sock"))


def test_send_cmd_returns_reply_and_notifies(server_path):
    seen = []
    with Ipc(server_path) as ipc:
        ipc.connect_cmd(seen.append)
        response = ipc.send_cmd(IpcType.GET_WORKSPACES, "hello")
    assert response.type == IpcType.GET_WORKSPACES
    assert json.loads(response.payload) == {"echo": "hello"}
    assert response.size == len(response.payload.encode())
    assert seen == [response]


def test_subscribe_and_handle_event(server_path):
    events = []
    with Ipc(server_path) as ipc:
        ipc.connect_event(events.append)
        ipc.subscribe('["workspace"]')
        event = ipc.handle_event()
    assert event.type == IpcType.EVENT_WORKSPACE
    assert json.loads(event.payload) == {"change": "focus"}
    assert events == [event]


def test_subscribe_failure_raises(server_path):
    with Ipc(server_path) as ipc:
        with pytest.raises(IpcError):
            ipc.subscribe('["bad"]')


def test_handle_event_after_close_is_empty(server_path):
    ipc = Ipc(server_path)
    ipc.close()
    assert ipc.handle_event() == IpcResponse(0, 0, "")