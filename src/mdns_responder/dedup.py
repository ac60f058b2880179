"""Suppression of identical responses sent in quick succession."""
from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Callable, Protocol

from .records import Response

logger = logging.getLogger(__name__)

DEFAULT_CACHE_WINDOW_MS = 5000


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything offering `call_later`, such as an asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class ResponseDeduplicator:
    """Recently sent responses sharing a single expiry timer.

    The timer is started by `arm()` when none is pending and clears the
    whole set when it fires, so the window is anchored to the first query
    after the last clear rather than sliding per entry.

    Args:
        window_ms: Lifetime of the shared window, in milliseconds.
        scheduler: Object with `call_later`; defaults to the running loop.
    """

    def __init__(self, window_ms: int = DEFAULT_CACHE_WINDOW_MS, scheduler: Scheduler | None = None) -> None:
        self.window_ms = window_ms
        self._scheduler = scheduler
        self._recent: list[Response] = []
        self._timer: TimerHandle | None = None

    @property
    def armed(self) -> bool:
        """True while the expiry timer is pending."""
        return self._timer is not None

    def arm(self) -> None:
        """Start the expiry timer unless one is already pending."""
        if self._timer is not None:
            return
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._timer = scheduler.call_later(self.window_ms / 1000.0, self.clear)

    def should_suppress(self, candidate: Response) -> bool:
        """Return True if an identical response was sent in this window."""
        return any(recent == candidate for recent in self._recent)

    def record(self, candidate: Response) -> None:
        """Remember `candidate` as sent."""
        self._recent.append(copy.deepcopy(candidate))

    def clear(self) -> None:
        """Forget every remembered response and mark the timer idle."""
        logger.debug("clearing %d recent responses", len(self._recent))
        self._recent.clear()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None

    def close(self) -> None:
        """Cancel a pending timer and drop the held responses."""
        self.clear()

    def __len__(self) -> int:
        return len(self._recent)
