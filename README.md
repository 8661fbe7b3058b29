# sockclient

A small TCP client. It connects to a server over IPv4, optionally over TLS,
sends a greeting, logs whatever the server answers and then closes the
connection.

A state machine drives the client through these states, in order: create
socket, set up TLS, connect, TLS handshake, interact, close
(`sockclient.fsm.ClientState`). A failed connection attempt closes the
socket, waits, and starts again with a fresh socket. It keeps doing this
until the server can be reached. A failed TLS handshake goes back to the
connect step.

## Installation

```
pip install .
```

## Command line

```
sockclient --Address 127.0.0.1 --Port 50000
sockclient -a 127.0.0.1 -p 50000 --Secure
```

Options:

- `-a`, `--Address`: target server address (default `192.168.1.148`).
- `-p`, `--Port`: target server port, from 49152 to 65535 (default `50000`).
- `-s`, `--Secure`: use TLS for the connection.

If the options are invalid, the command logs "Arguments parsing failed!" and
exits with a non-zero status. Log messages go to standard error at debug
level.

Press Ctrl+C to stop the client. It releases its socket and TLS resources
and exits with status 0.

## Library use

```python
from sockclient.fsm import ClientSocket, run_client

# Default interaction: send a greeting and log the server's replies.
received = run_client("127.0.0.1", 50000, False, None)

# Custom interaction once the connection is established.
def talk(sock, secure):
    sock.sendall(b"ping")
    return sock.recv(256)

client = ClientSocket("127.0.0.1", 50000, False, talk, 1.0)
reply = client.run()
```

`ClientSocket(server_addr, server_port, secure=False, interact=None,
reconnect_delay=1.0)` checks the address and port when it is created.
If the address is not a valid IPv4 address, or the port is outside
0–65535, it raises `ValueError`.

- `run()` runs one session and returns whatever the interaction returned.
- `close()` releases any open socket and TLS state.

`run_client(server_addr, server_port, secure, interact)` creates a client
and runs it.

A custom interaction is called with the connected socket and the `secure`
flag. When `secure` is true, the socket is wrapped in TLS.

The default interaction is `sockclient.interact.default_interact(sock,
secure)`. It does the following:

- It puts the socket in non-blocking mode.
- It sends the greeting. In secure mode the greeting is padded with zero
  bytes to 256 bytes.
- It reads in chunks of up to 256 bytes.
- It stops when the server disconnects, or when no more data is pending
  after something has been read.
- It returns all the bytes it received.

Lower-level helpers:

- `sockclient.connection`: `create_socket`, `prepare_for_connection`,
  `connect_socket`, `close_socket`.
- `sockclient.tls`: `create_client_context`, `tls_handshake`,
  `describe_certificate`, and the exceptions `TLSSetupError` and
  `TLSHandshakeError`.
- `sockclient.interact`: `default_interact`, `set_non_blocking`,
  `peer_ipv4`.

## Limitations

- TLS connections do not verify the server's certificate or host name.
  When the server sends a certificate, its subject and issuer are only
  logged.
- Only IPv4 addresses are supported.
- Each run makes one connection and one interaction, then ends. The client
  does not stay connected and does not listen for connections.

## Running the tests

```
pip install .[test]
pytest
```