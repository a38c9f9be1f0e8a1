"""Implementation of a rate limiter.

Controls the frequency of outgoing requests so a client never exceeds the
tracker's request allowance. Uses a sliding window of admission timestamps.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 5
DEFAULT_TIME_WINDOW_SECONDS = 10.0


class RateLimiter:
    """Sliding window rate limiter.

    At most ``max_requests`` callers are admitted within any trailing
    ``time_window``. Callers beyond that wait, in arrival order, until the
    oldest admission leaves the window. Nothing is ever rejected.

    Two locks are used: ``_admission`` queues callers (held across the sleep)
    and ``_lock`` guards the deque (held only while evicting or recording).
    Neither is held while the admitted request is in flight.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        time_window: float = DEFAULT_TIME_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initializes the rate limiter.

        Args:
            max_requests: Maximum number of requests allowed in the time window.
            time_window: The time window in seconds.
            clock: Monotonic clock returning seconds.
            sleep: Coroutine function used to wait.

        Raises:
            ValueError: If ``max_requests`` or ``time_window`` is not positive.
        """
        if max_requests <= 0:
            raise ValueError(f"max_requests must be positive, got {max_requests}")
        if time_window <= 0:
            raise ValueError(f"time_window must be positive, got {time_window}")
        self.max_requests = max_requests
        self.time_window = float(time_window)
        self._clock = clock
        self._sleep = sleep
        self._timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()
        self._admission = asyncio.Lock()
        logger.debug(f"RateLimiter initialized: {max_requests} requests / {time_window} seconds")

    def _cleanup_timestamps(self, now: float) -> None:
        """Removes timestamps that have left the window."""
        threshold = now - self.time_window
        while self._timestamps and self._timestamps[0] <= threshold:
            self._timestamps.popleft()

    def _wait_time(self, now: float) -> Optional[float]:
        if len(self._timestamps) < self.max_requests:
            return None
        return self.time_window - (now - self._timestamps[0])

    async def acquire(self) -> float:
        """Waits until a request is permitted, then records it.

        Returns:
            Seconds spent waiting for capacity, ``0.0`` if admitted at once.

        Raises:
            asyncio.CancelledError: If cancelled while waiting. No admission
                is recorded in that case.
        """
        async with self._admission:
            async with self._lock:
                now = self._clock()
                self._cleanup_timestamps(now)
                wait_time = self._wait_time(now)
                if wait_time is None:
                    self._timestamps.append(now)
                    return 0.0

            logger.debug(f"Rate limit reached. Waiting for {wait_time:.2f} seconds.")
            started = self._clock()
            await self._sleep(wait_time)

            async with self._lock:
                now = self._clock()
                self._cleanup_timestamps(now)
                # Sleep may return marginally early; the oldest entry is ours to replace
                if len(self._timestamps) >= self.max_requests:
                    self._timestamps.popleft()
                self._timestamps.append(now)
            return now - started

    async def peek_wait(self) -> Optional[float]:
        """Reports how long the next caller would wait, without admitting it.

        Returns:
            Seconds until capacity frees up, or None if a request would be
            admitted immediately.
        """
        async with self._lock:
            now = self._clock()
            self._cleanup_timestamps(now)
            return self._wait_time(now)
