"""TLS context creation and client handshake."""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Any, Mapping

log = logging.getLogger(__name__)

_SHORT_NAMES = {
    "countryName": "C",
    "stateOrProvinceName": "ST",
    "localityName": "L",
    "organizationName": "O",
    "organizationalUnitName": "OU",
    "commonName": "CN",
    "emailAddress": "emailAddress",
    "serialNumber": "serialNumber",
    "domainComponent": "DC",
    "userId": "UID",
}


class TLSSetupError(Exception):
    """The TLS client context could not be created."""


class TLSHandshakeError(Exception):
    """The TLS handshake with the server failed."""


def create_client_context() -> ssl.SSLContext:
    """Create a TLS client context that does not verify the peer."""
    try:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    except (ssl.SSLError, OSError, ValueError) as exc:
        log.error("TLS context creation failed: %s", exc)
        raise TLSSetupError(str(exc)) from exc
    return context


def _oneline(name: Any) -> str:
    parts = []
    for rdn in name or ():
        for key, value in rdn:
            parts.append(f"/{_SHORT_NAMES.get(key, key)}={value}")
    return "".join(parts)


def describe_certificate(cert: Mapping[str, Any]) -> tuple[str, str]:
    """Return the subject and issuer of a decoded certificate in one-line form.

    ``cert`` is a mapping as returned by ``SSLSocket.getpeercert()``.
    """
    return _oneline(cert.get("subject")), _oneline(cert.get("issuer"))


def tls_handshake(sock: socket.socket, context: ssl.SSLContext) -> ssl.SSLSocket:
    """Wrap ``sock`` with ``context`` and perform the client handshake.

    Returns the TLS socket; raises TLSHandshakeError if the handshake fails.
    """
    tls_sock = context.wrap_socket(sock, do_handshake_on_connect=False)
    try:
        tls_sock.do_handshake()
    except (ssl.SSLError, OSError) as exc:
        log.error("TLS handshake failed: %s", exc)
        raise TLSHandshakeError(str(exc)) from exc

    if tls_sock.getpeercert(binary_form=True):
        log.info("Server certificate found:")
        decoded = tls_sock.getpeercert()
        if decoded:
            subject, issuer = describe_certificate(decoded)
            log.info("Subject: %s", subject)
            log.info("Issuer: %s", issuer)
    return tls_sock