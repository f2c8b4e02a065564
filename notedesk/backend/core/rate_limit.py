"""
Rate Limiting.

Fixed-window request counting per key (typically one key per owner).
The limiter owns no global state: the application creates one in
create_app, stores it on app.state, and injects the counter store, so a
shared store (e.g. Redis INCR + EXPIRE) can replace the in-memory one.
"""

import time
from collections.abc import Callable
from typing import Protocol

from notedesk.backend.core.exceptions import RateLimitError
from notedesk.backend.core.logging import get_logger

logger = get_logger(__name__)


class RateLimitResult:
    """Result of a rate limit check."""

    def __init__(self, allowed: bool, remaining: int = 0, retry_after_seconds: int = 0) -> None:
        self.allowed = allowed
        self.remaining = remaining
        self.retry_after_seconds = retry_after_seconds


class CounterStore(Protocol):
    """Storage for fixed-window counters."""

    def hit(self, key: str, now: float, window_seconds: int) -> tuple[int, float]:
        """Count one hit; return (count in current window, window start)."""
        ...

    def reset(self, key: str) -> None:
        """Forget the counter for a key."""
        ...

    def prune(self, now: float, window_seconds: int) -> int:
        """Drop every window that has expired; return how many were dropped."""
        ...


class InMemoryCounterStore:
    """
    Process-local counter store.

    A key's window starts at its first hit and expires `window_seconds`
    later; the next hit after expiry starts a fresh window at count 1.
    An expired window is replaced on its key's next hit; windows of keys
    that are never hit again are dropped by `prune`.
    """

    def __init__(self) -> None:
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str, now: float, window_seconds: int) -> tuple[int, float]:
        started, count = self._windows.get(key, (now, 0))
        if now - started >= window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        return count, started

    def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    def prune(self, now: float, window_seconds: int) -> int:
        """Drop every expired window. Returns the number dropped."""
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= window_seconds
        ]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)


class FixedWindowRateLimiter:
    """
    Allow at most `max_requests` hits per key in each fixed window.

    The store is pruned at most once per window length, so windows of
    owners who stop sending requests are released within two windows.

    Args:
        store: Counter storage
        max_requests: Hits allowed per window
        window_seconds: Window length
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        store: CounterStore,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._last_prune: float | None = None

    def _prune_if_due(self, now: float) -> None:
        if self._last_prune is not None and now - self._last_prune < self.window_seconds:
            return
        self._last_prune = now
        dropped = self.store.prune(now, self.window_seconds)
        if dropped:
            logger.debug("Pruned expired rate limit windows", extra={"dropped": dropped})

    def check(self, key: str) -> RateLimitResult:
        """Count a hit for `key` and report whether it is within the limit."""
        now = self._clock()
        self._prune_if_due(now)
        count, started = self.store.hit(key, now, self.window_seconds)

        if count > self.max_requests:
            retry_after = int(self.window_seconds - (now - started)) + 1
            return RateLimitResult(allowed=False, retry_after_seconds=retry_after)

        return RateLimitResult(allowed=True, remaining=self.max_requests - count)

    def enforce(self, key: str) -> RateLimitResult:
        """
        Count a hit and raise when over the limit.

        Returns:
            The allowed result, with the hits remaining in this window

        Raises:
            RateLimitError: With retry_after_seconds until the window resets
        """
        result = self.check(key)
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"key": key, "limit": self.max_requests, "window": self.window_seconds},
            )
            raise RateLimitError(
                f"Rate limit exceeded, retry in {result.retry_after_seconds}s",
                retry_after_seconds=result.retry_after_seconds,
            )
        return result
