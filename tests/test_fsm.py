import logging
import socket
import threading
from unittest import mock

import pytest

from sockclient.fsm import ClientSocket, ClientState, run_client
from sockclient.interact import GREETING


class _Stop(Exception):
    pass


def _listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    return srv


def _serve_once(srv, reply, received):
    conn, _ = srv.accept()
    with conn:
        data = b""
        while len(data) < len(GREETING.encode()):
            chunk = conn.recv(1024)
            if not chunk:
                break
            data += chunk
        received.append(data)
        conn.sendall(reply)


def test_states_follow_source_order(caplog):
    assert [s.name for s in ClientState] == [
        "CREATE_FD",
        "SETUP_SSL",
        "CONNECT",
        "SSL_HANDSHAKE",
        "INTERACT",
        "CLOSE",
    ]

    srv = _listener()
    srv.listen(1)
    port = srv.getsockname()[1]
    caplog.set_level(logging.DEBUG)
    try:
        result = ClientSocket("127.0.0.1", port, interact=lambda s, sec: "ok").run()
    finally:
        srv.close()
    assert result == "ok"

    messages = [r.getMessage() for r in caplog.records]
    created = messages.index("Socket file descriptor created.")
    closed = messages.index("Socket successfully closed.")
    assert created < closed
    assert "SSL setup succeeded." not in messages
    assert "SSL handshake succeeded." not in messages


def test_invalid_address_rejected():
    with pytest.raises(ValueError):
        ClientSocket("not-an-address", 50000)


def test_default_interaction_round_trip():
    srv = _listener()
    srv.listen(1)
    port = srv.getsockname()[1]
    received = []
    worker = threading.Thread(target=_serve_once, args=(srv, b"pong", received))
    worker.start()
    try:
        result = run_client("127.0.0.1", port)
    finally:
        worker.join(timeout=5)
        srv.close()
    assert result == b"pong"
    assert received == [GREETING.encode()]


def test_custom_interaction_receives_socket_and_flag():
    srv = _listener()
    srv.listen(1)
    port = srv.getsockname()[1]
    seen = {}

    def interact(sock, secure):
        seen["peer"] = sock.getpeername()
        seen["secure"] = secure
        seen["sock"] = sock
        return "done"

    try:
        client = ClientSocket("127.0.0.1", port, interact=interact)
        result = client.run()
    finally:
        srv.close()
    assert result == "done"
    assert seen["peer"] == ("127.0.0.1", port)
    assert seen["secure"] is False
    assert seen["sock"].fileno() == -1


def test_failed_connect_waits_and_retries():
    srv = _listener()
    port = srv.getsockname()[1]

    def start_listening(_delay):
        srv.listen(1)

    try:
        with mock.patch("sockclient.fsm.time.sleep", side_effect=start_listening) as sleep:
            client = ClientSocket(
                "127.0.0.1", port, interact=lambda s, sec: s.getpeername(), reconnect_delay=0.25
            )
            result = client.run()
    finally:
        srv.close()
    assert result == ("127.0.0.1", port)
    sleep.assert_called_once_with(0.25)


def test_interrupt_exits_successfully():
    srv = _listener()
    srv.listen(1)
    port = srv.getsockname()[1]
    seen = {}

    def interact(sock, secure):
        seen["sock"] = sock
        raise KeyboardInterrupt

    try:
        with pytest.raises(SystemExit) as excinfo:
            ClientSocket("127.0.0.1", port, interact=interact).run()
    finally:
        srv.close()
    assert excinfo.value.code == 0
    assert seen["sock"].fileno() == -1


def test_secure_handshake_failure_goes_back_to_connect(caplog):
    srv = _listener()
    srv.listen(1)
    port = srv.getsockname()[1]

    def accept_and_drop():
        conn, _ = srv.accept()
        conn.close()

    worker = threading.Thread(target=accept_and_drop)
    worker.start()
    caplog.set_level(logging.INFO)
    try:
        with mock.patch("sockclient.fsm.time.sleep", side_effect=_Stop) as sleep:
            with pytest.raises(_Stop):
                ClientSocket("127.0.0.1", port, secure=True, reconnect_delay=0.5).run()
    finally:
        worker.join(timeout=5)
        srv.close()
    messages = [r.getMessage() for r in caplog.records]
    assert "SSL setup succeeded." in messages
    assert "SSL handshake failed." in messages
    sleep.assert_called_once_with(0.5)