"""Plain TCP socket primitives used by the client."""

from __future__ import annotations

import socket

_PORT_MIN = 0
_PORT_MAX = 0xFFFF


def create_socket(family: int, kind: int, protocol: int) -> socket.socket:
    """Create a socket of the given family, type and protocol.

    Raises OSError if the operating system refuses to create it.
    """
    return socket.socket(family, kind, protocol)


def prepare_for_connection(server_addr: str, server_port: int) -> tuple[str, int]:
    """Validate and normalise an IPv4 address and port for ``connect``.

    The address is accepted in any dotted form the classic IPv4 parser
    understands (``"127.1"`` and the like) and returned in canonical
    dotted-quad form.
    """
    try:
        packed = socket.inet_aton(server_addr)
    except (OSError, TypeError) as exc:
        raise ValueError(f"invalid IPv4 address: {server_addr!r}") from exc
    if isinstance(server_port, bool) or not isinstance(server_port, int):
        raise ValueError(f"invalid port: {server_port!r}")
    if not _PORT_MIN <= server_port <= _PORT_MAX:
        raise ValueError(f"port out of range: {server_port}")
    return socket.inet_ntoa(packed), server_port


def connect_socket(sock: socket.socket, address: tuple[str, int]) -> None:
    """Connect ``sock`` to ``address``; raises OSError on failure."""
    sock.connect(address)


def close_socket(sock: socket.socket) -> None:
    """Close ``sock``; raises OSError on failure."""
    sock.close()