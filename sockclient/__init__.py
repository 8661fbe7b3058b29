"""IPv4 TCP client with optional TLS, driven by a connection state machine."""

__version__ = "0.1.0"