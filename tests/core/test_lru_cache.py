"""Tests for the bounded LRU mapping."""

import threading

from registry_trust.core.config import clear_config_cache
from registry_trust.core.lru_cache import (
    DEFAULT_CACHE_MAX_SIZE,
    LRUDict,
    get_cache_max_size,
)


class TestGetCacheMaxSize:
    """Tests for get_cache_max_size()."""

    def test_default_value(self, clean_env):
        """Should return default when env var not set."""
        assert get_cache_max_size() == DEFAULT_CACHE_MAX_SIZE

    def test_env_var_override(self, clean_env, monkeypatch):
        """Should return env var value when set."""
        monkeypatch.setenv("REGISTRY_TRUST_CACHE_MAX_SIZE", "500")
        clear_config_cache()

        assert get_cache_max_size() == 500

    def test_invalid_env_var(self, clean_env, monkeypatch):
        """Should return default for invalid env var."""
        monkeypatch.setenv("REGISTRY_TRUST_CACHE_MAX_SIZE", "not_a_number")
        clear_config_cache()

        assert get_cache_max_size() == DEFAULT_CACHE_MAX_SIZE


class TestLRUDict:
    """Tests for LRUDict."""

    def test_basic_set_get(self):
        cache = LRUDict(max_size=10)
        cache["https://a.example"] = 0.5
        assert cache["https://a.example"] == 0.5

    def test_eviction_on_overflow(self):
        """Should evict the oldest entry when exceeding max_size."""
        cache = LRUDict(max_size=3)
        cache["a"] = 1
        cache["b"] = 2
        cache["c"] = 3

        cache["d"] = 4

        assert len(cache) == 3
        assert "a" not in cache
        assert list(cache) == ["b", "c", "d"]

    def test_read_updates_lru_order(self):
        cache = LRUDict(max_size=3)
        cache["a"] = 1
        cache["b"] = 2
        cache["c"] = 3

        _ = cache["a"]
        cache["d"] = 4

        assert "a" in cache
        assert "b" not in cache

    def test_get_is_a_peek(self):
        """get() must not refresh recency."""
        cache = LRUDict(max_size=2)
        cache["a"] = 1
        cache["b"] = 2

        assert cache.get("a") == 1
        cache["c"] = 3

        assert "a" not in cache
        assert cache.get("a") is None
        assert cache.get("a", 0) == 0

    def test_overwrite_refreshes_order(self):
        cache = LRUDict(max_size=2)
        cache["a"] = 1
        cache["b"] = 2
        cache["a"] = 10
        cache["c"] = 3

        assert cache["a"] == 10
        assert "b" not in cache

    def test_delete_and_pop(self):
        cache = LRUDict(max_size=5)
        cache["a"] = 1
        cache["b"] = 2

        del cache["a"]
        assert cache.pop("b") == 2
        assert cache.pop("missing", None) is None

        assert len(cache) == 0
        assert cache.keys() == []

    def test_clear(self):
        cache = LRUDict(max_size=5, a=1, b=2)

        cache.clear()

        assert len(cache) == 0
        assert list(cache) == []

    def test_stats(self):
        cache = LRUDict(max_size=4)
        cache["a"] = 1

        stats = cache.stats()

        assert stats["size"] == 1
        assert stats["max_size"] == 4
        assert stats["utilization"] == 0.25

    def test_max_size_from_config(self, clean_env, monkeypatch):
        monkeypatch.setenv("REGISTRY_TRUST_CACHE_MAX_SIZE", "7")
        clear_config_cache()

        assert LRUDict().max_size == 7

    def test_thread_safety(self):
        """Concurrent writers keep the size bound."""
        cache = LRUDict(max_size=50)

        def writer(offset: int):
            for i in range(200):
                cache[f"{offset}-{i}"] = i

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 50
        assert len(cache.keys()) == 50
