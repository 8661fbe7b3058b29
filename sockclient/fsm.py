"""Connection state machine driving the client from socket creation to close."""

from __future__ import annotations

import enum
import logging
import socket
import ssl
import time
from typing import Any, Callable, Optional

from .connection import (
    close_socket,
    connect_socket,
    create_socket,
    prepare_for_connection,
)
from .interact import default_interact
from .tls import TLSHandshakeError, TLSSetupError, create_client_context, tls_handshake

log = logging.getLogger(__name__)

RECONNECT_DELAY_SEC = 1.0

Interaction = Callable[[socket.socket, bool], Any]


class ClientState(enum.Enum):
    """States the client goes through for one session."""

    CREATE_FD = 0
    SETUP_SSL = 1
    CONNECT = 2
    SSL_HANDSHAKE = 3
    INTERACT = 4
    CLOSE = 5


class ClientSocket:
    """A client that connects to a server, interacts once and closes.

    Failed connection attempts are retried after ``reconnect_delay``
    seconds with a fresh socket, until the connection succeeds.
    """

    def __init__(
        self,
        server_addr: str,
        server_port: int,
        secure: bool = False,
        interact: Optional[Interaction] = None,
        reconnect_delay: float = RECONNECT_DELAY_SEC,
    ) -> None:
        self.server_addr = server_addr
        self.server_port = server_port
        self.address = prepare_for_connection(server_addr, server_port)
        self.secure = secure
        self.interact: Interaction = interact if interact is not None else default_interact
        self.reconnect_delay = reconnect_delay
        self._sock: Optional[socket.socket] = None
        self._tls_sock: Optional[ssl.SSLSocket] = None
        self._context: Optional[ssl.SSLContext] = None
        self._result: Any = None

    def run(self) -> Any:
        """Run the state machine to completion and return the interaction result.

        An interrupt (Ctrl+C) releases all resources and exits successfully.
        """
        steps = {
            ClientState.CREATE_FD: self._create,
            ClientState.SETUP_SSL: self._setup_ssl,
            ClientState.CONNECT: self._connect,
            ClientState.SSL_HANDSHAKE: self._handshake,
            ClientState.INTERACT: self._interact,
            ClientState.CLOSE: self._close_connection,
        }
        self._result = None
        state: Optional[ClientState] = ClientState.CREATE_FD
        try:
            while state is not None:
                state = steps[state]()
        except KeyboardInterrupt:
            log.warning("Received Ctrl+C (SIGINT). Cleaning up and exiting.")
            self.close()
            raise SystemExit(0) from None
        finally:
            self.close()
        return self._result

    def close(self) -> None:
        """Release the TLS session, TLS context and any open socket."""
        if self._tls_sock is not None:
            log.debug("Cleaning up server SSL data.")
            self._tls_sock.close()
            self._tls_sock = None
        if self._context is not None:
            log.debug("Cleaning up server SSL context.")
            self._context = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _create(self) -> ClientState:
        try:
            self._sock = create_socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_IP)
        except OSError:
            log.error("Socket file descriptor creation failed.")
            return ClientState.CREATE_FD
        log.info("Socket file descriptor created.")
        return ClientState.SETUP_SSL

    def _setup_ssl(self) -> ClientState:
        if not self.secure:
            return ClientState.CONNECT
        try:
            self._context = create_client_context()
        except TLSSetupError:
            log.error("SSL setup failed.")
            return ClientState.CLOSE
        log.info("SSL setup succeeded.")
        return ClientState.CONNECT

    def _connect(self) -> ClientState:
        try:
            connect_socket(self._sock, self.address)
        except OSError:
            log.error(
                "Failed to connect to server with IP <%s> and port <%d>.",
                self.server_addr,
                self.server_port,
            )
            if self._sock is not None:
                self._sock.close()
                self._sock = None
            time.sleep(self.reconnect_delay)
            return ClientState.CREATE_FD
        log.info(
            "Successfully connected to server with IP <%s> and port <%d>.",
            self.server_addr,
            self.server_port,
        )
        return ClientState.SSL_HANDSHAKE

    def _handshake(self) -> ClientState:
        if not self.secure:
            return ClientState.INTERACT
        try:
            self._tls_sock = tls_handshake(self._sock, self._context)
        except TLSHandshakeError:
            log.error("SSL handshake failed.")
            return ClientState.CONNECT
        log.info("SSL handshake succeeded.")
        return ClientState.INTERACT

    def _active_socket(self) -> Optional[socket.socket]:
        return self._tls_sock if self._tls_sock is not None else self._sock

    def _interact(self) -> ClientState:
        self._result = self.interact(self._active_socket(), self.secure)
        return ClientState.CLOSE

    def _close_connection(self) -> None:
        sock = self._active_socket()
        if sock is None:
            return None
        try:
            close_socket(sock)
        except OSError:
            log.error("An error happened while closing the socket.")
        else:
            log.info("Socket successfully closed.")
        return None


def run_client(
    server_addr: str,
    server_port: int,
    secure: bool = False,
    interact: Optional[Interaction] = None,
) -> Any:
    """Connect to the server, run one interaction and close; returns its result."""
    return ClientSocket(server_addr, server_port, secure, interact).run()