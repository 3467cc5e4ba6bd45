"""Tests for the TTL-bounded response cache."""

from hubox.storage.cache import CACHE_TTL_MS, CacheEntry, ResponseCache


class TestResponseCache:
    """Tests for ResponseCache lookups."""

    def test_ttl_is_five_minutes(self):
        assert CACHE_TTL_MS == 300_000

    def test_fresh_entry_returned_just_before_ttl(self):
        cache = ResponseCache()
        cache.store("https://api.github.com/x", '{"a": 1}', 1_000)

        assert cache.lookup("https://api.github.com/x", 1_000 + 299_999) == '{"a": 1}'

    def test_entry_absent_at_ttl_boundary(self):
        cache = ResponseCache()
        cache.store("k", "body", 1_000)

        assert cache.lookup("k", 1_000 + 300_000) is None
        assert cache.lookup("k", 1_000 + 900_000) is None

    def test_missing_key(self):
        assert ResponseCache().lookup("nope", 0) is None

    def test_store_overwrites(self):
        cache = ResponseCache()
        cache.store("k", "old", 0)
        cache.store("k", "new", 500_000)

        assert cache.lookup("k", 500_001) == "new"
        assert len(cache) == 1

    def test_expired_entries_are_not_evicted(self):
        cache = ResponseCache()
        cache.store("k", "body", 0)

        cache.lookup("k", 10**9)

        assert "k" in cache

    def test_persisted_format(self):
        cache = ResponseCache()
        cache.store("k", "body", 42)

        assert cache.to_dict() == {"k": {"response": "body", "timestamp": 42}}
        assert ResponseCache.from_dict(cache.to_dict()).entries == {"k": CacheEntry("body", 42)}
