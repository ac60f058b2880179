"""CLI for the mDNS responder."""
from __future__ import annotations

import argparse
import asyncio

from .server import serve


def positive_int(value: str) -> int:
    """Parse a strictly positive integer option.

    Raises:
        argparse.ArgumentTypeError: If `value` is not an integer above zero.
    """
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Options left unset fall back to the configuration file.

    Returns:
        argparse.Namespace: Parsed CLI options:
            - config (str): Path to YAML config file.
            - interface (str | None): Local address for the multicast socket.
            - port (int | None): UDP port.
            - cache_window_ms (int | None): Duplicate suppression window.
            - log_level (str | None): Logging level.
    """
    parser = argparse.ArgumentParser(
        description="Multicast DNS responder (YAML-backed)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", default="config.yaml", help="Path to YAML config")
    parser.add_argument("--interface", default=None, help="Local IPv4 address for multicast")
    parser.add_argument("--port", type=int, default=None, help="UDP port")
    parser.add_argument(
        "--cache-window-ms",
        type=positive_int,
        default=None,
        help="Window during which identical responses are not resent",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Run the CLI entry point.

    Returns:
        None
    """
    args = parse_args()
    try:
        asyncio.run(
            serve(args.config, args.interface, args.port, args.cache_window_ms, args.log_level)
        )
    except (KeyboardInterrupt, SystemExit, SystemError):
        pass
