"""Record registry indexed by record type."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

from .records import Record

logger = logging.getLogger(__name__)

# DNS names compare case-insensitively in the ASCII range only.
_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def dns_equal(a: str, b: str) -> bool:
    """Compare two DNS names label-wise, ignoring ASCII case and a trailing dot."""
    return a.rstrip(".").translate(_ASCII_LOWER) == b.rstrip(".").translate(_ASCII_LOWER)


def _as_list(records: Record | Iterable[Record]) -> list[Record]:
    """Normalize a single record or an iterable of records to a list."""
    if isinstance(records, Record):
        return [records]
    return list(records)


class Registry:
    """Records advertised by this host, grouped by type.

    Buckets are created on first insertion and keep insertion order.

    Attributes:
        buckets: Mapping of record type to its records.
    """

    def __init__(self) -> None:
        self.buckets: dict[str, list[Record]] = {}

    def register(self, records: Record | Iterable[Record]) -> None:
        """Add one record or a batch; structural duplicates are skipped.

        Args:
            records: A `Record` or an iterable of them.
        """
        for record in _as_list(records):
            bucket = self.buckets.setdefault(record.type, [])
            if any(record.same_as(existing) for existing in bucket):
                logger.debug("duplicate record ignored: %s %s", record.type, record.name)
                continue
            bucket.append(record)

    def unregister(self, records: Record | Iterable[Record]) -> None:
        """Remove records by type and name.

        Every record of the same type whose name equals the given record's
        name is removed, whatever its data.

        Args:
            records: A `Record` or an iterable of them.
        """
        for record in _as_list(records):
            bucket = self.buckets.get(record.type)
            if bucket is None:
                continue
            self.buckets[record.type] = [r for r in bucket if r.name != record.name]

    def records_for(self, name: str, rtype: str) -> list[Record]:
        """Return records of `rtype` matching `name`.

        A dotted `name` is compared with the whole record name; a bare label
        is compared with the first label of the record name only.

        Args:
            name: Queried name or bare label.
            rtype: Record type mnemonic.

        Returns:
            Matching records in registration order, empty for unknown types.
        """
        bucket = self.buckets.get(rtype)
        if not bucket:
            return []
        qualified = "." in name
        return [
            r for r in bucket
            if dns_equal(r.name if qualified else r.name.split(".", 1)[0], name)
        ]

    def types(self) -> list[str]:
        """Record types present, in bucket creation order."""
        return list(self.buckets)

    def __iter__(self) -> Iterator[Record]:
        for bucket in self.buckets.values():
            yield from bucket

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.buckets.values())
