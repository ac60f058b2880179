"""Query handling: matching, duplicate suppression and transmission."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol

from .dedup import DEFAULT_CACHE_WINDOW_MS, ResponseDeduplicator, Scheduler
from .errors import TransmissionError
from .matcher import answer
from .records import Query, Record, Response
from .registry import Registry

logger = logging.getLogger(__name__)


class ResponseSink(Protocol):
    """Outbound side of the transport."""

    def respond(self, response: Response) -> None: ...


class Responder:
    """mDNS responder for the records registered with it.

    Args:
        transport: Object whose `respond(response)` sends a response. It
            signals failure by raising `TransmissionError` or `OSError`.
        cache_window_ms: Duration of the duplicate suppression window.
        scheduler: Timer source for the suppression window; defaults to
            the running asyncio loop.
        on_error: Optional callable receiving each `TransmissionError`.

    Attributes:
        registry: Advertised records.
        dedup: Recently sent responses.
    """

    def __init__(
        self,
        transport: ResponseSink,
        cache_window_ms: int = DEFAULT_CACHE_WINDOW_MS,
        scheduler: Scheduler | None = None,
        on_error: Callable[[TransmissionError], None] | None = None,
    ) -> None:
        self.transport = transport
        self.registry = Registry()
        self.dedup = ResponseDeduplicator(cache_window_ms, scheduler)
        self.on_error = on_error

    def register(self, records: Record | Iterable[Record]) -> None:
        """Advertise one record or a batch.

        Args:
            records: A `Record` or an iterable of them.
        """
        self.registry.register(records)

    def unregister(self, records: Record | Iterable[Record]) -> None:
        """Stop advertising every record sharing a type and name with `records`.

        Args:
            records: A `Record` or an iterable of them.
        """
        self.registry.unregister(records)

    def records_for(self, name: str, rtype: str) -> list[Record]:
        """Return advertised records of `rtype` matching `name`.

        Args:
            name: Full name or bare first label.
            rtype: Record type mnemonic.
        """
        return self.registry.records_for(name, rtype)

    def on_query(self, query: Query) -> list[TransmissionError]:
        """Answer every question of an incoming query.

        Responses already sent in the current window are skipped. A response
        is remembered before it is handed to the transport, so a failed send
        is not retried within the window.

        Args:
            query: Questions and sender metadata.

        Returns:
            Errors raised while sending; empty when every send succeeded.
        """
        self.dedup.arm()
        errors: list[TransmissionError] = []
        for response in answer(self.registry, query):
            if self.dedup.should_suppress(response):
                logger.debug("suppressing recently sent response to %s", query.rinfo.get("address"))
                continue
            self.dedup.record(response)
            error = self._send(response, query)
            if error is not None:
                errors.append(error)
        return errors

    def _send(self, response: Response, query: Query) -> TransmissionError | None:
        """Hand one response to the transport.

        Args:
            response: Response to transmit.
            query: Query being answered, for error context.

        Returns:
            The failure, or None when the send succeeded.
        """
        try:
            self.transport.respond(response)
        except TransmissionError as exc:
            error = exc
        except OSError as exc:
            error = TransmissionError(str(exc), response)
            error.__cause__ = exc
        else:
            logger.debug(
                "sent %d answers, %d additionals", len(response.answers), len(response.additionals)
            )
            return None

        if error.response is None:
            error.response = response
        if error.rinfo is None:
            error.rinfo = query.rinfo
        logger.warning("failed to send response to %s: %s", query.rinfo.get("address"), error)
        if self.on_error is not None:
            try:
                self.on_error(error)
            except Exception:  # last-resort guard
                logger.exception("error callback failed")
        return error

    def close(self) -> None:
        """Stop the suppression timer."""
        self.dedup.close()
