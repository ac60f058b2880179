"""Conversion between mDNS packets and responder data types."""
from __future__ import annotations

import logging
from typing import Any

from dnslib import A, AAAA, CNAME, NS, PTR, QTYPE, RR, SRV, TXT, DNSHeader, DNSLabel, DNSRecord
from dnslib.dns import DNSError

from .records import Query, Question, Record, Response, SrvData

logger = logging.getLogger(__name__)


def parse_query(data: bytes, rinfo: dict[str, Any] | None = None) -> Query | None:
    """Decode a datagram into a `Query`.

    Args:
        data: Raw DNS message bytes.
        rinfo: Sender metadata to attach to the query.

    Returns:
        The query, or None for responses and undecodable packets.
    """
    try:
        packet = DNSRecord.parse(data)
    except DNSError:
        logger.debug("failed to parse packet from %s", (rinfo or {}).get("address"))
        return None

    if packet.header.qr:
        return None

    questions = tuple(
        Question(name=str(q.qname).rstrip("."), type=QTYPE.get(q.qtype, f"TYPE{q.qtype}"))
        for q in packet.questions
    )
    return Query(questions=questions, rinfo=dict(rinfo or {}))


def _txt_strings(data: Any) -> list[bytes | str]:
    """Turn a TXT payload into character strings.

    Args:
        data: None, a string, bytes, a list of those, or a mapping rendered
            as `key=value` (a value of True renders the bare key).

    Returns:
        At least one string; an empty payload becomes a single empty string.
    """
    if data is None:
        return [b""]
    if isinstance(data, (str, bytes)):
        return [data]
    if isinstance(data, dict):
        strings: list[bytes | str] = []
        for key, value in data.items():
            if value is True:
                strings.append(str(key))
            elif isinstance(value, bytes):
                strings.append(str(key).encode() + b"=" + value)
            else:
                strings.append(f"{key}={value}")
        return strings or [b""]
    return list(data) or [b""]


def _rdata(record: Record) -> Any:
    """Build the dnslib rdata object for a record.

    Raises:
        ValueError: For record types the codec does not encode.
    """
    rtype = record.type
    if rtype == "A":
        return A(record.data)
    if rtype == "AAAA":
        return AAAA(record.data)
    if rtype == "PTR":
        return PTR(DNSLabel(record.data))
    if rtype == "CNAME":
        return CNAME(DNSLabel(record.data))
    if rtype == "NS":
        return NS(DNSLabel(record.data))
    if rtype == "TXT":
        return TXT(_txt_strings(record.data))
    if rtype == "SRV":
        srv: SrvData = record.data
        return SRV(priority=srv.priority, weight=srv.weight, port=srv.port, target=DNSLabel(srv.target))
    raise ValueError(f"unsupported record type {rtype}")


def to_rr(record: Record) -> RR | None:
    """Build a `dnslib.RR` for a record.

    Malformed or unsupported records are skipped with a warning.

    Args:
        record: Record to encode.

    Returns:
        The resource record, or None when it cannot be encoded.
    """
    try:
        return RR(DNSLabel(record.name), getattr(QTYPE, record.type), rdata=_rdata(record), ttl=record.ttl)
    except (ValueError, TypeError, AttributeError, IndexError, UnicodeError, DNSError) as exc:
        logger.warning("invalid record skipped: %s %s (%s)", record.type, record.name, exc)
        return None


def pack_response(response: Response) -> bytes:
    """Encode a response as an authoritative mDNS answer packet."""
    reply = DNSRecord(DNSHeader(id=0, qr=1, aa=1, ra=0))
    for record in response.answers:
        rr = to_rr(record)
        if rr is not None:
            reply.add_answer(rr)
    for record in response.additionals:
        rr = to_rr(record)
        if rr is not None:
            reply.add_ar(rr)
    return reply.pack()
