"""Sliding-window rate limiter keyed by resource and client identifier."""

import threading
import time
from collections.abc import Callable
from typing import Protocol

import structlog

from src.cache.store import CacheStore
from src.ratelimit.constants import (
    DEFAULT_STORAGE_MAX_ENTRIES,
    DEFAULT_STORAGE_TTL_SECONDS,
)


logger = structlog.get_logger()


class RateLimiterProtocol(Protocol):
    """Protocol for rate limiters.

    Allows dependency injection of rate limiter for testing.
    """

    def check_limit(
        self,
        identifier: str,
        resource: str,
        max_requests: int,
        window_ms: int,
    ) -> bool:
        """Record an attempt unless the caller is over budget.

        Args:
            identifier: Client identifier.
            resource: Resource the budget applies to.
            max_requests: Allowed requests per window.
            window_ms: Window length in milliseconds.

        Returns:
            True if the caller is limited and the attempt was rejected.
        """
        ...

    def remaining(
        self,
        identifier: str,
        resource: str,
        max_requests: int,
        window_ms: int,
    ) -> int:
        """Get the number of requests left in the current window."""
        ...


class SlidingWindowRateLimiter:
    """Sliding-window request counter.

    Each key holds the timestamps of accepted requests. Timestamps at or
    before ``now - window_ms`` are discarded before every check, so the
    count always reflects the trailing window only. Rejected attempts are
    not recorded.

    Timestamps live in a bounded, auto-expiring CacheStore so idle keys are
    reclaimed. This is a best-effort guard: nothing survives a restart.

    Thread-safe implementation for use with concurrent callers.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = DEFAULT_STORAGE_MAX_ENTRIES,
        storage_ttl_seconds: float = DEFAULT_STORAGE_TTL_SECONDS,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            clock: Monotonic time source in seconds.
            max_keys: Maximum number of tracked keys.
            storage_ttl_seconds: Minimum idle lifetime of a tracked key.
        """
        self._clock = clock
        self._storage_ttl = storage_ttl_seconds
        self._storage = CacheStore(
            max_entries=max_keys,
            default_ttl_seconds=storage_ttl_seconds,
            clock=clock,
            name="rate_limiter",
        )
        self._lock = threading.Lock()
        self._log = logger.bind(component="rate_limiter")

    def check_limit(
        self,
        identifier: str,
        resource: str,
        max_requests: int,
        window_ms: int,
    ) -> bool:
        """Record an attempt unless the caller is over budget.

        Args:
            identifier: Client identifier.
            resource: Resource the budget applies to.
            max_requests: Allowed requests per window.
            window_ms: Window length in milliseconds.

        Returns:
            True if the caller is limited and the attempt was rejected,
            False if the attempt was accepted and recorded.
        """
        key = self._key(identifier, resource)

        with self._lock:
            now_ms = self._now_ms()
            timestamps = self._window(key, now_ms, window_ms)

            if len(timestamps) >= max_requests:
                self._log.debug(
                    "rate_limit_rejected",
                    key=key,
                    count=len(timestamps),
                    max_requests=max_requests,
                )
                return True

            # Keep the key alive at least as long as its window.
            ttl = max(window_ms / 1000.0, self._storage_ttl)
            self._storage.set(key, (*timestamps, now_ms), ttl=ttl)
            return False

    def remaining(
        self,
        identifier: str,
        resource: str,
        max_requests: int,
        window_ms: int,
    ) -> int:
        """Get the number of requests left in the current window.

        Args:
            identifier: Client identifier.
            resource: Resource the budget applies to.
            max_requests: Allowed requests per window.
            window_ms: Window length in milliseconds.

        Returns:
            Requests still allowed, never negative.
        """
        key = self._key(identifier, resource)
        with self._lock:
            timestamps = self._window(key, self._now_ms(), window_ms)
        return max(0, max_requests - len(timestamps))

    def reset(
        self,
        identifier: str | None = None,
        resource: str | None = None,
    ) -> None:
        """Forget recorded requests.

        Args:
            identifier: Client identifier; with ``resource`` clears one key.
            resource: Resource name.
        """
        with self._lock:
            if identifier is None and resource is None:
                self._storage.invalidate_all()
                return
            self._storage.delete(self._key(identifier or "", resource or ""))

    def _window(self, key: str, now_ms: float, window_ms: int) -> tuple[float, ...]:
        """Load the timestamps of a key that fall inside the window.

        Must be called while holding the lock.
        """
        window_start = now_ms - window_ms
        stored: tuple[float, ...] = self._storage.get(key) or ()
        return tuple(ts for ts in stored if ts > window_start)

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    @staticmethod
    def _key(identifier: str, resource: str) -> str:
        return f"{resource}:{identifier}"
