"""Asyncio UDP transport bound to the mDNS multicast group."""
from __future__ import annotations

import asyncio
import logging
import socket
import struct
from dataclasses import dataclass
from typing import Any, Callable

from dnslib.dns import DNSError
from dnslib.label import DNSLabelError

from .codec import pack_response, parse_query
from .errors import TransmissionError
from .records import Query, Response

logger = logging.getLogger(__name__)

MDNS_GROUP = "224.0.0.251"
MDNS_PORT = 5353


@dataclass(slots=True)
class TransportOptions:
    """Socket settings for the multicast link.

    Attributes:
        interface (str): Local IPv4 address used for membership and sending.
        port (int): UDP port to bind and send to.
        group (str): Multicast group, or unicast peer when multicast is off.
        ttl (int): Multicast TTL.
        loopback (bool): Receive our own multicast packets.
        multicast (bool): Join the group; when False, bind `interface` only.
    """

    interface: str = "0.0.0.0"
    port: int = MDNS_PORT
    group: str = MDNS_GROUP
    ttl: int = 255
    loopback: bool = True
    multicast: bool = True


def create_socket(options: TransportOptions) -> socket.socket:
    """Create a UDP socket configured for the mDNS link.

    Args:
        options: Socket settings.

    Raises:
        OSError: If the socket cannot be bound or the group joined.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        if options.multicast:
            sock.bind(("", options.port))
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, options.ttl)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, int(options.loopback))
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(options.interface))
            mreq = struct.pack("4s4s", socket.inet_aton(options.group), socket.inet_aton(options.interface))
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, mreq)
        else:
            sock.bind((options.interface, options.port))
        sock.setblocking(False)
    except OSError:
        sock.close()
        raise
    return sock


class MulticastProtocol(asyncio.DatagramProtocol):
    """Receives mDNS queries and sends responses to the group.

    Args:
        on_query: Callable invoked with each decoded `Query`.
        options: Destination group and port for outgoing responses.

    Attributes:
        transport: Active UDP transport or None until connected.
    """

    def __init__(self, on_query: Callable[[Query], Any], options: TransportOptions | None = None) -> None:
        self.transport: asyncio.DatagramTransport | None = None
        self.on_query = on_query
        self.options = options or TransportOptions()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Called by asyncio when the UDP socket is ready.

        Args:
            transport: Created datagram transport.
        """
        self.transport = transport  # type: ignore[assignment]
        sock = self.transport.get_extra_info("socket")
        logger.info("mDNS listening on %s", sock.getsockname() if sock else "?")

    def connection_lost(self, exc: Exception | None) -> None:
        """Called by asyncio when the socket is closed.

        Args:
            exc: Error that closed the socket, or None on a normal close.
        """
        if exc is not None:
            logger.warning("mDNS transport lost: %s", exc)
        self.transport = None

    def error_received(self, exc: Exception) -> None:
        """Log a socket error reported by asyncio.

        Args:
            exc: The error, usually an `OSError`.
        """
        logger.warning("mDNS socket error: %s", exc)

    def datagram_received(self, data: bytes, addr: Any) -> None:
        """Decode one datagram and hand queries to `on_query`.

        Args:
            data: Raw DNS message bytes.
            addr: Sender address tuple as provided by asyncio.
        """
        rinfo = {"address": addr[0], "port": addr[1], "family": "IPv4", "size": len(data)}
        logger.debug("received %d bytes from %s", len(data), addr)
        query = parse_query(data, rinfo)
        if query is None or not query.questions:
            return
        self.on_query(query)

    def respond(self, response: Response) -> None:
        """Send a response to the configured destination.

        Args:
            response: Answers and additionals to encode and send.

        Raises:
            TransmissionError: If the transport is closed, the response
                cannot be encoded, or the send fails.
        """
        if self.transport is None:
            raise TransmissionError("transport not connected", response)
        try:
            self.transport.sendto(pack_response(response), (self.options.group, self.options.port))
        except (DNSError, DNSLabelError) as exc:
            raise TransmissionError(f"cannot encode response: {exc}", response) from exc
        except (OSError, RuntimeError) as exc:
            raise TransmissionError(str(exc), response) from exc
