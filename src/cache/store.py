"""Bounded in-process cache with LRU eviction and per-entry TTL."""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.cache.constants import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS
from src.errors import CacheError


logger = structlog.get_logger()


class CacheStrategy(BaseModel):
    """Named TTL policy applied at a cache call site."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl_seconds: Annotated[float, Field(gt=0)]


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its absolute expiry on the store's clock."""

    key: str
    value: Any
    expires_at: float


@dataclass
class CacheStats:
    """Counters describing cache behaviour since creation or reset."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert stats to dictionary.

        Returns:
            Dictionary of counter name to value.
        """
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
        }


class CacheStore:
    """Thread-safe key/value store bounded by entry count and TTL.

    Capacity is enforced on insert by evicting the least-recently-used
    entry. Expiry is enforced lazily on read: an entry read after its TTL is
    purged and reported as absent.

    Stored values are handed out as-is, so callers must store immutable
    values (the feed models are frozen).
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        """Initialize the cache store.

        Args:
            max_entries: Maximum number of live entries.
            default_ttl_seconds: TTL used when a call supplies none.
            clock: Monotonic time source in seconds.
            name: Name used in log events.

        Raises:
            ValueError: If capacity or TTL is not positive.
        """
        if max_entries < 1:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        if default_ttl_seconds <= 0:
            msg = f"default_ttl_seconds must be positive, got {default_ttl_seconds}"
            raise ValueError(msg)

        self._max_entries = max_entries
        self._default_ttl = default_ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats()
        self._log = logger.bind(component="cache", cache=name)

    @property
    def max_entries(self) -> int:
        """Get the entry capacity."""
        return self._max_entries

    @property
    def default_ttl_seconds(self) -> float:
        """Get the TTL applied when none is supplied."""
        return self._default_ttl

    @property
    def stats(self) -> CacheStats:
        """Get a snapshot of the cache counters."""
        with self._lock:
            return CacheStats(**self._stats.to_dict())

    def get(self, key: str) -> Any | None:
        """Look up a live entry.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None on miss or expiry.
        """
        self._check_key(key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            if entry.expires_at <= self._clock():
                del self._entries[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                self._log.debug("cache_expired", key=key)
                return None

            self._entries.move_to_end(key)
            self._stats.hits += 1
            return entry.value

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | CacheStrategy | None = None,
    ) -> None:
        """Store a value, replacing any existing entry for the key.

        Args:
            key: Cache key.
            value: Value to store. Must not be None.
            ttl: TTL in seconds, a CacheStrategy, or None for the default.

        Raises:
            CacheError: If the value or TTL cannot be stored.
        """
        self._check_key(key)
        if value is None:
            msg = "Refusing to cache None"
            raise CacheError(msg, key=key)

        ttl_seconds = self._resolve_ttl(key, ttl)

        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                expires_at=self._clock() + ttl_seconds,
            )
            while len(self._entries) > self._max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self._stats.evictions += 1
                self._log.debug("cache_evicted", key=evicted_key)

    def delete(self, key: str) -> None:
        """Remove an entry if present.

        Args:
            key: Cache key.
        """
        self._check_key(key)
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        """Remove every entry."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        self._log.info("cache_invalidated", removed=removed)

    def invalidate_pattern(self, pattern: str) -> None:
        """Invalidate entries matching a pattern.

        Invalidation is coarse: the whole store is cleared whatever the
        pattern is.

        Args:
            pattern: Requested key pattern, recorded in the log only.
        """
        self._log.info("cache_invalidate_pattern", pattern=pattern)
        self.invalidate_all()

    def __len__(self) -> int:
        """Get the number of stored entries, including unread expired ones."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Check for a live entry without touching recency or counters."""
        if not isinstance(key, str):
            return False
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.expires_at > self._clock()

    def _resolve_ttl(self, key: str, ttl: float | CacheStrategy | None) -> float:
        """Resolve the TTL argument of ``set`` to seconds.

        Args:
            key: Cache key, for error reporting.
            ttl: TTL argument as passed to ``set``.

        Returns:
            TTL in seconds.

        Raises:
            CacheError: If the TTL is not positive.
        """
        if ttl is None:
            return self._default_ttl
        seconds = ttl.ttl_seconds if isinstance(ttl, CacheStrategy) else float(ttl)
        if seconds <= 0:
            msg = f"TTL must be positive, got {seconds}"
            raise CacheError(msg, key=key)
        return seconds

    @staticmethod
    def _check_key(key: object) -> None:
        if not isinstance(key, str) or not key:
            msg = f"Cache key must be a non-empty string, got {key!r}"
            raise CacheError(msg, key=None)
