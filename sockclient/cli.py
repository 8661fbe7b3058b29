"""Command line entry point: parse options and run the client once."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .fsm import run_client

log = logging.getLogger(__name__)

ADDR_DEFAULT = "192.168.1.148"
PORT_MIN = 49152
PORT_MAX = 65535
PORT_DEFAULT = 50000
SECURE_DEFAULT = False


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}") from exc
    if not PORT_MIN <= value <= PORT_MAX:
        raise argparse.ArgumentTypeError(
            f"port must be between {PORT_MIN} and {PORT_MAX}: {value}"
        )
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the client command."""
    parser = argparse.ArgumentParser(
        prog="sockclient", description="Connect to a server and exchange a greeting."
    )
    parser.add_argument(
        "-s", "--Secure", dest="secure", action="store_true",
        default=SECURE_DEFAULT, help="Secure connection.",
    )
    parser.add_argument(
        "-p", "--Port", dest="port", type=_port,
        default=PORT_DEFAULT, help="Target server port.",
    )
    parser.add_argument(
        "-a", "--Address", dest="address",
        default=ADDR_DEFAULT, help="Target server address.",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line options; raises SystemExit on invalid input."""
    return build_parser().parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the client with the given options; returns the exit status."""
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    try:
        args = parse_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        if code != 0:
            log.error("Arguments parsing failed!")
        return code

    log.info("Arguments successfully parsed!")
    run_client(args.address, args.port, args.secure, None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())