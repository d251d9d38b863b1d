"""Sliding-window rate limiter for catalog requests.

Each limiter is an explicit object owned by the client that uses it; the
time source is injected so limit boundaries can be tested deterministically.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque


class SlidingWindowRateLimiter:
    """Allows at most `limit` acquisitions within any `window_seconds` span.

    Thread-safe: acquisitions from concurrent mapping calls share one window.

    Example:
        >>> limiter = SlidingWindowRateLimiter(limit=90, window_seconds=60)
        >>> limiter.try_acquire()
        True
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum acquisitions per window (>= 1)
            window_seconds: Window length in seconds (> 0)
            clock: Monotonic time source returning seconds

        Raises:
            ValueError: If limit or window_seconds is not positive
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got: {limit}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got: {window_seconds}")

        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._timestamps: Deque[float] = deque()
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        # Acquisitions exactly one window old have expired
        cutoff = now - self.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def try_acquire(self) -> bool:
        """Record one request if the window has room.

        Returns:
            True if the request may proceed, False if the budget is exhausted
        """
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            if len(self._timestamps) >= self.limit:
                return False
            self._timestamps.append(now)
            return True

    def remaining(self) -> int:
        """Number of acquisitions still available in the current window."""
        with self._lock:
            self._evict_expired(self._clock())
            return self.limit - len(self._timestamps)

    def reset(self) -> None:
        """Forget all recorded acquisitions."""
        with self._lock:
            self._timestamps.clear()
