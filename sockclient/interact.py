"""Default exchange with the server once a connection is established."""

from __future__ import annotations

import logging
import socket
import ssl
import time

log = logging.getLogger(__name__)

RX_BUFFER_SIZE = 256
TX_BUFFER_SIZE = 256
GREETING = "Hello Server! It's a fine day today, \"innit\"?"
READ_INTERVAL_SEC = 0.001

_WOULD_BLOCK = (BlockingIOError, InterruptedError, ssl.SSLWantReadError, ssl.SSLWantWriteError)


def set_non_blocking(sock: socket.socket) -> None:
    """Put ``sock`` in non-blocking mode; raises OSError on failure."""
    try:
        sock.setblocking(False)
    except OSError:
        log.error("Error while setting the socket non-blocking.")
        raise


def peer_ipv4(sock: socket.socket) -> str:
    """Return the IPv4 address of the peer, or an empty string if not IPv4."""
    if sock.family != socket.AF_INET:
        return ""
    return sock.getpeername()[0]


def _greeting_payload(secure: bool) -> bytes:
    text = GREETING.encode()
    # The secure path writes the whole fixed-size buffer, padding included.
    return text.ljust(TX_BUFFER_SIZE, b"\0") if secure else text


def default_interact(sock: socket.socket, secure: bool) -> bytes:
    """Send the greeting, then read what the server answers.

    Reading stops when the server disconnects, or when no more data is
    pending after something has been read. Returns all bytes received.
    """
    set_non_blocking(sock)
    server_ip = peer_ipv4(sock)

    try:
        sock.send(_greeting_payload(secure))
    except _WOULD_BLOCK:
        pass

    received = bytearray()
    something_read = False
    while True:
        try:
            chunk = sock.recv(RX_BUFFER_SIZE)
        except _WOULD_BLOCK:
            if something_read:
                break
            continue

        if not chunk:
            log.warning("Server with IP <%s> disconnected.", server_ip)
            break

        something_read = True
        received += chunk
        log.info(
            "Data read from server: <%s>",
            chunk.split(b"\0", 1)[0].decode(errors="replace"),
        )
        time.sleep(READ_INTERVAL_SEC)
    return bytes(received)