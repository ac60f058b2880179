"""Server entry point and lifecycle management."""
from __future__ import annotations

import asyncio
import dataclasses
import logging

from .config import Config
from .errors import ConfigError
from .records import Query
from .responder import Responder
from .transport import MulticastProtocol, create_socket


async def serve(
    config_path: str,
    interface: str | None = None,
    port: int | None = None,
    cache_window_ms: int | None = None,
    log_level: str | None = None,
) -> None:
    """Run the mDNS responder until cancelled.

    Arguments left as None fall back to the configuration file. The file is
    re-read when its mtime changes and the advertised records replaced.

    Args:
        config_path (str): Path to the YAML configuration file.
        interface (str, optional): Local address for the multicast socket.
        port (int, optional): UDP port.
        cache_window_ms (int, optional): Duplicate suppression window.
        log_level (str, optional): Logging verbosity level.

    Raises:
        ConfigError: If the configuration or `cache_window_ms` is invalid.
        OSError: If the socket cannot be bound.
    """
    config = Config(config_path)
    if cache_window_ms is not None and cache_window_ms <= 0:
        raise ConfigError("cache_window_ms must be positive")
    logging.basicConfig(
        level=getattr(logging, (log_level or config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

    options = config.transport
    if interface is not None:
        options = dataclasses.replace(options, interface=interface)
    if port is not None:
        options = dataclasses.replace(options, port=port)

    loop = asyncio.get_running_loop()
    published = list(config.records)

    def handle(query: Query) -> None:
        nonlocal published
        if config.maybe_reload():
            responder.unregister(published)
            published = list(config.records)
            responder.register(published)
            logger.info("advertising %d records", len(responder.registry))
        responder.on_query(query)

    protocol = MulticastProtocol(handle, options)
    responder = Responder(
        protocol,
        cache_window_ms=config.cache_window_ms if cache_window_ms is None else cache_window_ms,
        scheduler=loop,
    )
    responder.register(published)
    transport, _ = await loop.create_datagram_endpoint(lambda: protocol, sock=create_socket(options))
    logger.info("advertising %d records", len(responder.registry))

    try:
        await asyncio.Future()
    except asyncio.CancelledError:
        logger.info("server task cancelled")
    finally:
        logger.info("shutting down…")
        responder.close()
        transport.close()
