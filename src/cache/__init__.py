"""Process-local caching for acquired feeds."""

from src.cache.constants import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    HISTORY_DATA_TTL_SECONDS,
    HISTORY_KEY_PREFIX,
)
from src.cache.store import CacheEntry, CacheStats, CacheStore, CacheStrategy


CACHE_STRATEGIES: dict[str, CacheStrategy] = {
    "HISTORY_DATA": CacheStrategy(ttl_seconds=HISTORY_DATA_TTL_SECONDS),
}


def history_cache_key(month: int, day: int) -> str:
    """Build the cache key shared by every request for a calendar date.

    Args:
        month: Month number (1-12).
        day: Day of month.

    Returns:
        Key of the form ``history:{month}:{day}``.
    """
    return f"{HISTORY_KEY_PREFIX}:{month}:{day}"


__all__ = [
    "CACHE_STRATEGIES",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL_SECONDS",
    "HISTORY_DATA_TTL_SECONDS",
    "HISTORY_KEY_PREFIX",
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    "CacheStrategy",
    "history_cache_key",
]
