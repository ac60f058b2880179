"""Configuration loading and static record definitions."""
from __future__ import annotations

import ipaddress
import logging
import os
from typing import Any

import yaml

from .dedup import DEFAULT_CACHE_WINDOW_MS
from .errors import ConfigError
from .records import DEFAULT_TTL, Record, SrvData, service_records
from .transport import TransportOptions

logger = logging.getLogger(__name__)

SUPPORTED_TYPES: tuple[str, ...] = ("A", "AAAA", "PTR", "SRV", "TXT", "CNAME", "NS")


def _parse_data(i: int, rtype: str, data: Any) -> Any:
    """Validate and convert the `data` of one configured record.

    Args:
        i: 1-based record position, for error messages.
        rtype: Upper-case record type.
        data: Raw YAML value; may be None only for TXT.

    Returns:
        The payload stored on the `Record`.

    Raises:
        ConfigError: If the data is missing or malformed for its type.
    """
    if rtype == "TXT":
        return data
    if data is None:
        raise ConfigError(f"record #{i}: {rtype} record requires data")
    if rtype in ("A", "AAAA"):
        try:
            if rtype == "A":
                ipaddress.IPv4Address(str(data))
            else:
                ipaddress.IPv6Address(str(data))
        except ipaddress.AddressValueError as exc:
            raise ConfigError(f"record #{i}: invalid {rtype} address {data!r}") from exc
        return str(data)
    if rtype == "SRV":
        if not isinstance(data, dict):
            raise ConfigError(f"record #{i}: SRV data must be a mapping")
        try:
            return SrvData(
                target=str(data["target"]).rstrip("."),
                port=int(data["port"]),
                priority=int(data.get("priority", 0)),
                weight=int(data.get("weight", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"record #{i}: malformed SRV data: {exc}") from exc
    return str(data).rstrip(".")


def _parse_record(i: int, item: Any, default_ttl: int) -> Record:
    """Build a `Record` from one entry of the `records` list.

    Args:
        i: 1-based record position, for error messages.
        item: Raw YAML mapping with name, type, data and optional ttl.
        default_ttl: TTL used when the entry has none.

    Raises:
        ConfigError: On a malformed entry or unsupported type.
    """
    if not isinstance(item, dict):
        raise ConfigError(f"record #{i}: mapping required, got {type(item).__name__}")
    try:
        name = str(item["name"]).strip().rstrip(".")
        rtype = str(item["type"]).upper().strip()
        ttl = int(item.get("ttl", default_ttl))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"malformed record #{i}: {exc}") from exc
    if rtype not in SUPPORTED_TYPES:
        raise ConfigError(f"record #{i}: unsupported type '{rtype}'")
    return Record(name=name, type=rtype, data=_parse_data(i, rtype, item.get("data")), ttl=ttl)


def _parse_service(i: int, item: Any, default_ttl: int) -> list[Record]:
    """Expand one entry of the `services` list into its DNS-SD records.

    Args:
        i: 1-based service position, for error messages.
        item: Raw YAML mapping with name, type, port, host and optional
            addresses, txt, protocol, domain and ttl.
        default_ttl: TTL used when the entry has none.

    Raises:
        ConfigError: On a malformed entry or invalid address.
    """
    if not isinstance(item, dict):
        raise ConfigError(f"service #{i}: mapping required, got {type(item).__name__}")
    try:
        addresses = [str(a) for a in item.get("addresses", [])]
        for address in addresses:
            ipaddress.ip_address(address)
        return service_records(
            name=str(item["name"]),
            type=str(item["type"]).lstrip("_"),
            port=int(item["port"]),
            host=str(item["host"]).rstrip("."),
            addresses=addresses,
            txt=item.get("txt"),
            protocol=str(item.get("protocol", "tcp")).lstrip("_"),
            domain=str(item.get("domain", "local")),
            ttl=int(item.get("ttl", default_ttl)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"malformed service #{i}: {exc}") from exc


class Config:
    """Parsed responder configuration.

    Args:
        path: Filesystem path to the YAML configuration.

    Attributes:
        path: Path to the YAML config file.
        cache_window_ms: Duplicate suppression window.
        log_level: Logging level name.
        transport: Socket settings.
        default_ttl: TTL applied to records without explicit TTL.
        records: Static records followed by the records of each service.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._mtime = 0.0
        self.cache_window_ms = DEFAULT_CACHE_WINDOW_MS
        self.log_level = "INFO"
        self.transport = TransportOptions()
        self.default_ttl = DEFAULT_TTL
        self.records: list[Record] = []
        self.load(force=True)

    def load(self, force: bool = False) -> bool:
        """Load or reload YAML configuration.

        Args:
            force: Reload regardless of file mtime.

        Returns:
            True if the file was (re)read.

        Raises:
            ConfigError: On invalid YAML structure or record data.
            FileNotFoundError: If the config is missing and `force=True`.
        """
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            if force:
                raise
            return False

        if not force and st.st_mtime <= self._mtime:
            return False

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parsing error: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("top level must be a mapping")

        try:
            cache_window_ms = int(data.get("cache_window_ms", DEFAULT_CACHE_WINDOW_MS))
            default_ttl = int(data.get("default_ttl", DEFAULT_TTL))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid setting: {exc}") from exc
        if cache_window_ms <= 0:
            raise ConfigError("cache_window_ms must be positive")

        raw_transport = data.get("transport") or {}
        if not isinstance(raw_transport, dict):
            raise ConfigError("'transport' must be a mapping")
        try:
            transport = TransportOptions(**raw_transport)
        except TypeError as exc:
            raise ConfigError(f"invalid transport option: {exc}") from exc

        raw_records = data.get("records") or []
        raw_services = data.get("services") or []
        if not isinstance(raw_records, list):
            raise ConfigError("'records' must be a list")
        if not isinstance(raw_services, list):
            raise ConfigError("'services' must be a list")

        records = [_parse_record(i, item, default_ttl) for i, item in enumerate(raw_records, 1)]
        for i, item in enumerate(raw_services, 1):
            records.extend(_parse_service(i, item, default_ttl))

        self.cache_window_ms = cache_window_ms
        self.log_level = str(data.get("log_level", "INFO")).upper()
        self.transport = transport
        self.default_ttl = default_ttl
        self.records = records
        self._mtime = st.st_mtime
        logger.info("configuration loaded: %d records", len(self.records))
        return True

    def maybe_reload(self) -> bool:
        """Reload on mtime change; keep last good config on errors.

        Returns:
            True if a new configuration was loaded.
        """
        try:
            return self.load(force=False)
        except (ConfigError, OSError) as exc:
            logger.error("failed to reload configuration: %s", exc)
            return False
