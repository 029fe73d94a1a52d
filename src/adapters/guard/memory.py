"""
In-memory rate guard adapter - Implements RateGuard protocol.

Fixed-window counter per (caller, route), held in process memory. Suitable
for a single worker; a multi-worker deployment needs a shared store behind
the same protocol.
"""

import logging
import threading
import time
from collections.abc import Callable

from src.domain.exceptions import TooManyRequests

logger = logging.getLogger(__name__)


class InMemoryRateGuard:
    """Implements RateGuard protocol with a fixed window per caller and route."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # (caller, route) -> (window start, count)
        self._windows: dict[tuple[str, str], tuple[float, int]] = {}

    def check(self, caller: str, route: str) -> None:
        """
        Count one request and refuse it when the window budget is spent.

        Raises:
            TooManyRequests: If `caller` already made `max_requests` calls to
                `route` in the current window
        """
        key = (caller, route)
        now = self._clock()

        with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self._window_seconds:
                started, count = now, 0
            if count >= self._max_requests:
                logger.warning("Rate limit hit for %s on %s", caller, route)
                raise TooManyRequests(route)
            self._windows[key] = (started, count + 1)
            self._prune(now)

    def _prune(self, now: float) -> None:
        # Drop expired windows so idle callers do not accumulate
        if len(self._windows) < 10_000:
            return
        expired = [k for k, (s, _) in self._windows.items() if now - s >= self._window_seconds]
        for k in expired:
            del self._windows[k]
