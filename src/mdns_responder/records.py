"""Data structures representing mDNS records, questions and responses."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

DEFAULT_TTL = 120
ANY = "ANY"


@dataclass(frozen=True)
class SrvData:
    """Payload of an SRV record.

    Attributes:
        target (str): Host name serving the instance.
        port (int): Service port.
        priority (int): SRV priority.
        weight (int): SRV weight.
    """

    target: str
    port: int
    priority: int = 0
    weight: int = 0


@dataclass(frozen=True)
class Record:
    """Single resource record advertised by the responder.

    Attributes:
        name (str): Owner name without the trailing root dot.
        type (str): Record type mnemonic (A, AAAA, PTR, SRV, TXT, ...).
        data (Any): Type-dependent payload. PTR carries the target instance
            name and SRV carries an `SrvData`.
        ttl (int): Time to live, in seconds.
    """

    name: str
    type: str
    data: Any = None
    ttl: int = DEFAULT_TTL

    def same_as(self, other: Record) -> bool:
        """Return True when `other` has the same type, name and data."""
        return self.type == other.type and self.name == other.name and self.data == other.data


@dataclass(frozen=True)
class Question:
    """Single question of an incoming query."""

    name: str
    type: str


@dataclass(frozen=True)
class Query:
    """Questions received in one packet.

    Attributes:
        questions (tuple[Question, ...]): Questions in packet order.
        rinfo (dict): Sender metadata (address, port, family, size). Not
            interpreted by the responder.
    """

    questions: tuple[Question, ...]
    rinfo: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Response:
    """Answer and additional sections sent for one question."""

    answers: tuple[Record, ...]
    additionals: tuple[Record, ...] = ()


def service_records(
    name: str,
    type: str,
    port: int,
    host: str,
    addresses: Iterable[str] = (),
    txt: Mapping[str, Any] | None = None,
    protocol: str = "tcp",
    domain: str = "local",
    ttl: int = DEFAULT_TTL,
) -> list[Record]:
    """Build the DNS-SD record set advertising one service instance.

    Args:
        name: Instance label, e.g. "Living Room".
        type: Service type without underscore, e.g. "http".
        port: Port the service listens on.
        host: Host name the SRV record targets.
        addresses: IPv4/IPv6 addresses of `host`; each yields an A or AAAA.
        txt: Key/value metadata for the TXT record.
        protocol: "tcp" or "udp".
        domain: Parent domain.
        ttl: TTL applied to every record.

    Returns:
        PTR, SRV and TXT records followed by one address record per address.
    """
    service_type = f"_{type}._{protocol}.{domain}"
    fqdn = f"{name}.{service_type}"
    records = [
        Record(service_type, "PTR", fqdn, ttl),
        Record(fqdn, "SRV", SrvData(target=host, port=port), ttl),
        Record(fqdn, "TXT", dict(txt or {}), ttl),
    ]
    for address in addresses:
        rtype = "AAAA" if ":" in address else "A"
        records.append(Record(host, rtype, address, ttl))
    return records
