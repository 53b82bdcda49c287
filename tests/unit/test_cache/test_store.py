"""Unit tests for the TTL/LRU cache store."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.cache import (
    CACHE_STRATEGIES,
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    CacheStore,
    CacheStrategy,
    history_cache_key,
)
from src.errors import CacheError, ErrorKind
from tests.helpers.clock import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Create a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CacheStore:
    """Create a small cache store on the fake clock."""
    return CacheStore(max_entries=3, default_ttl_seconds=10, clock=clock)


class TestDefaults:
    """Tests for store defaults and strategies."""

    def test_default_capacity_and_ttl(self) -> None:
        """Default store holds 500 entries for 5 minutes."""
        store = CacheStore()
        assert store.max_entries == DEFAULT_MAX_ENTRIES == 500
        assert store.default_ttl_seconds == DEFAULT_TTL_SECONDS == 300

    def test_history_strategy_is_one_day(self) -> None:
        """History data is cached for 24 hours."""
        assert CACHE_STRATEGIES["HISTORY_DATA"].ttl_seconds == 86400

    def test_history_cache_key(self) -> None:
        """Keys are deterministic and unpadded."""
        assert history_cache_key(2, 29) == "history:2:29"
        assert history_cache_key(12, 1) == history_cache_key(12, 1)

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_rejects_non_positive_capacity(self, capacity: int) -> None:
        """Capacity must be positive."""
        with pytest.raises(ValueError, match="max_entries"):
            CacheStore(max_entries=capacity)


class TestGetSet:
    """Tests for basic get/set/delete."""

    def test_miss_returns_none(self, store: CacheStore) -> None:
        """Unknown keys are absent."""
        assert store.get("missing") is None
        assert store.stats.misses == 1

    def test_set_then_get(self, store: CacheStore) -> None:
        """Stored values are returned."""
        store.set("a", {"value": 1})
        assert store.get("a") == {"value": 1}
        assert store.stats.hits == 1

    def test_set_replaces_existing(self, store: CacheStore) -> None:
        """A second set replaces the value."""
        store.set("a", 1)
        store.set("a", 2)
        assert store.get("a") == 2
        assert len(store) == 1

    def test_delete(self, store: CacheStore) -> None:
        """Deleted keys are absent; deleting twice is harmless."""
        store.set("a", 1)
        store.delete("a")
        store.delete("a")
        assert store.get("a") is None

    def test_refuses_none_value(self, store: CacheStore) -> None:
        """None cannot be cached because it means a miss."""
        with pytest.raises(CacheError) as exc_info:
            store.set("a", None)
        assert exc_info.value.kind == ErrorKind.CACHE
        assert exc_info.value.key == "a"

    def test_rejects_empty_key(self, store: CacheStore) -> None:
        """Keys must be non-empty strings."""
        with pytest.raises(CacheError):
            store.set("", 1)

    def test_rejects_non_positive_ttl(self, store: CacheStore) -> None:
        """TTL must be positive."""
        with pytest.raises(CacheError, match="TTL"):
            store.set("a", 1, ttl=0)


class TestExpiry:
    """Tests for TTL expiry on read."""

    def test_default_ttl(self, store: CacheStore, clock: FakeClock) -> None:
        """Entries expire after the default TTL."""
        store.set("a", 1)
        clock.advance(9.5)
        assert store.get("a") == 1
        clock.advance(0.5)
        assert store.get("a") is None

    def test_call_specific_ttl(self, store: CacheStore, clock: FakeClock) -> None:
        """A per-call TTL overrides the default."""
        store.set("a", 1, ttl=100)
        clock.advance(50)
        assert store.get("a") == 1

    def test_strategy_ttl(self, store: CacheStore, clock: FakeClock) -> None:
        """A CacheStrategy supplies the TTL."""
        store.set("a", 1, CacheStrategy(ttl_seconds=30))
        clock.advance(29)
        assert store.get("a") == 1
        clock.advance(1)
        assert store.get("a") is None

    def test_expired_entry_is_purged(self, store: CacheStore, clock: FakeClock) -> None:
        """Reading an expired entry removes it."""
        store.set("a", 1)
        clock.advance(11)
        assert len(store) == 1
        assert store.get("a") is None
        assert len(store) == 0
        assert store.stats.expirations == 1

    def test_contains_respects_ttl(self, store: CacheStore, clock: FakeClock) -> None:
        """Membership reports only live entries."""
        store.set("a", 1)
        assert "a" in store
        clock.advance(11)
        assert "a" not in store


class TestLruEviction:
    """Tests for capacity enforcement."""

    def test_evicts_least_recently_inserted(self, store: CacheStore) -> None:
        """Inserting beyond capacity evicts the oldest entry."""
        for key in ("a", "b", "c", "d"):
            store.set(key, key)

        assert len(store) == 3
        assert store.get("a") is None
        assert store.get("d") == "d"
        assert store.stats.evictions == 1

    def test_read_refreshes_recency(self, store: CacheStore) -> None:
        """A read makes the entry most recently used."""
        for key in ("a", "b", "c"):
            store.set(key, key)

        store.get("a")
        store.set("d", "d")

        assert store.get("a") == "a"
        assert store.get("b") is None

    def test_eviction_ignores_ttl(self, store: CacheStore) -> None:
        """A long-lived entry is still evicted when it is least recent."""
        store.set("long", 1, ttl=10_000)
        store.set("b", 2, ttl=1)
        store.set("c", 3, ttl=1)
        store.set("d", 4, ttl=1)

        assert store.get("long") is None


class TestInvalidation:
    """Tests for coarse invalidation."""

    def test_invalidate_all(self, store: CacheStore) -> None:
        """Everything is removed."""
        store.set("history:1:1", 1)
        store.set("other", 2)
        store.invalidate_all()
        assert len(store) == 0

    def test_invalidate_pattern_clears_everything(self, store: CacheStore) -> None:
        """Pattern invalidation is all-or-nothing."""
        store.set("history:1:1", 1)
        store.set("other", 2)

        store.invalidate_pattern("history:*")

        assert store.get("history:1:1") is None
        assert store.get("other") is None


class TestThreadSafety:
    """Tests for concurrent access."""

    def test_concurrent_sets_respect_capacity(self) -> None:
        """Concurrent writers never exceed capacity."""
        store = CacheStore(max_entries=50)

        def write_many(offset: int) -> None:
            for i in range(200):
                store.set(f"k{offset}-{i}", i)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(write_many, range(8)))

        assert len(store) == 50
        assert store.stats.evictions == 8 * 200 - 50
