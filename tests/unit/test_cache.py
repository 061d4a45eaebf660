"""Tests for the result cache."""

import threading

from glspgen.core.cache import (
    NullCache,
    ResultCache,
    TTLCache,
    content_key,
    model_key,
)
from glspgen.core.config import CacheSettings


class TestCacheKeys:
    def test_model_key(self) -> None:
        assert model_key("/g/a.langium", "1-2") == "grammar:/g/a.langium:1-2"
        validated = model_key("/g/a.langium", "1-2", validated=True)
        assert validated == "grammar:/g/a.langium:1-2:validated"

    def test_content_key(self) -> None:
        key = content_key("memory://inline.langium", "abc")
        assert key == "content:memory://inline.langium:abc"


class TestTTLCache:
    """Tests for TTLCache."""

    def test_get_set(self, clock) -> None:
        cache: TTLCache[str] = TTLCache(default_ttl=10, clock=clock)
        assert cache.get("a") is None
        cache.set("a", "value")
        assert cache.get("a") == "value"
        assert "a" in cache
        assert len(cache) == 1

    def test_expiry(self, clock) -> None:
        """Entries expire after their TTL."""
        cache: TTLCache[str] = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", "value")
        clock.advance(9.9)
        assert cache.get("a") == "value"
        clock.advance(0.1)
        assert cache.get("a") is None
        assert "a" not in cache
        assert len(cache) == 0

    def test_per_entry_ttl(self, clock) -> None:
        cache: TTLCache[str] = TTLCache(default_ttl=10, clock=clock)
        cache.set("short", "s", ttl=1)
        cache.set("long", "l")
        clock.advance(2)
        assert cache.get("short") is None
        assert cache.get("long") == "l"

    def test_overwrite_last_write_wins(self, clock) -> None:
        cache: TTLCache[str] = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", "first")
        cache.set("a", "second")
        assert cache.get("a") == "second"
        assert len(cache) == 1

    def test_invalidate(self, clock) -> None:
        cache: TTLCache[str] = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", "value")
        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert cache.get("a") is None

    def test_invalidate_prefix(self, clock) -> None:
        cache: TTLCache[int] = TTLCache(default_ttl=10, clock=clock)
        cache.set("grammar:/a:1", 1)
        cache.set("grammar:/a:2", 2)
        cache.set("grammar:/b:1", 3)
        assert cache.invalidate_prefix("grammar:/a:") == 2
        assert cache.get("grammar:/b:1") == 3

    def test_clear(self, clock) -> None:
        cache: TTLCache[int] = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_evicts_expired_first(self, clock) -> None:
        """When full, expired entries make room before live ones are evicted."""
        cache: TTLCache[int] = TTLCache(default_ttl=10, max_entries=2, clock=clock)
        cache.set("old", 1, ttl=1)
        cache.set("live", 2)
        clock.advance(5)
        cache.set("new", 3)
        assert cache.get("live") == 2
        assert cache.get("new") == 3
        assert len(cache) == 2

    def test_evicts_least_hit(self, clock) -> None:
        cache: TTLCache[int] = TTLCache(default_ttl=10, max_entries=2, clock=clock)
        cache.set("hot", 1)
        cache.set("cold", 2)
        cache.get("hot")
        cache.get("hot")
        cache.set("new", 3)
        assert "cold" not in cache
        assert cache.get("hot") == 1
        assert cache.get("new") == 3

    def test_hit_miss_counters(self, clock) -> None:
        cache: TTLCache[int] = TTLCache(default_ttl=10, clock=clock)
        cache.get("a")
        cache.set("a", 1)
        cache.get("a")
        assert (cache.hits, cache.misses) == (1, 1)

    def test_concurrent_access(self) -> None:
        """Concurrent get/set leaves the cache consistent."""
        cache: TTLCache[int] = TTLCache(default_ttl=60, max_entries=1000)

        def worker(offset: int) -> None:
            for i in range(200):
                cache.set(f"k{offset}-{i}", i)
                cache.get(f"k{offset}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 800
        assert cache.hits == 800


class TestResultCache:
    """Tests for the two-namespace ResultCache."""

    def test_namespaces_are_independent(self, clock) -> None:
        cache = ResultCache(CacheSettings(), clock)
        cache.set("k", "model")
        cache.set_document("k", "document")
        assert cache.get("k") == "model"
        assert cache.get_document("k") == "document"

    def test_namespace_ttls(self, clock) -> None:
        """Documents expire before models with the default settings."""
        cache = ResultCache(CacheSettings(), clock)
        cache.set("k", "model")
        cache.set_document("k", "document")
        clock.advance(1800)
        assert cache.get_document("k") is None
        assert cache.get("k") == "model"
        clock.advance(1800)
        assert cache.get("k") is None

    def test_invalidate_both(self, clock) -> None:
        cache = ResultCache(CacheSettings(), clock)
        cache.set("k", "model")
        cache.set_document("k", "document")
        cache.invalidate("k")
        assert cache.get("k") is None
        assert cache.get_document("k") is None

    def test_clear_and_stats(self, clock) -> None:
        cache = ResultCache(CacheSettings(), clock)
        cache.set("a", 1)
        cache.set_document("b", 2)
        cache.get("a")
        cache.get("missing")

        stats = cache.stats()
        assert (stats.models, stats.documents) == (1, 1)
        assert (stats.hits, stats.misses) == (1, 1)

        cache.clear()
        assert cache.stats().models == 0
        assert cache.stats().documents == 0


class TestNullCache:
    def test_stores_nothing(self) -> None:
        cache = NullCache()
        cache.set("k", "v")
        cache.set_document("k", "d")
        assert cache.get("k") is None
        assert cache.get_document("k") is None
        assert cache.invalidate_prefix("k") == 0
        cache.invalidate("k")
        cache.clear()
