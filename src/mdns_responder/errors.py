"""Exceptions raised by the mDNS responder."""
from __future__ import annotations

from typing import Any

from .records import Response


class MdnsResponderError(Exception):
    """Base class for responder errors."""


class ConfigError(MdnsResponderError, ValueError):
    """Invalid configuration file or record entry."""


class TransmissionError(MdnsResponderError):
    """A computed response could not be sent.

    Attributes:
        response: The response that failed to go out.
        rinfo: Sender metadata of the query being answered, if known.
    """

    def __init__(self, message: str, response: Response | None = None, rinfo: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.response = response
        self.rinfo = rinfo
