# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""TTL cache for trust scores.

Entry lifecycle:
    absent -> (compute) -> fresh -> (TTL elapses) -> stale, still stored
           -> (next get) -> (compute) -> fresh

``invalidate`` moves entries straight back to absent.

TrustRank is a whole-graph computation: one changed edge can move every
registry's transitive trust. Structural graph changes (edges, trusted set,
blocklist) therefore require ``invalidate()`` with no argument. Dropping a
single entry is only correct after a metadata-only change to that
registry.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from ..core.lru_cache import LRUDict
from .calculator import TrustScore, TrustScoreCalculator
from .graph import TrustGraph

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 3600.0  # 1 hour
DEFAULT_CACHE_MAX_SIZE = 10000


class TrustScoreCache:
    """Memoizes trust scores per registry with a time-to-live.

    Example:
        >>> cache = TrustScoreCache()
        >>> first = cache.get("https://a.example", graph)
        >>> cache.get("https://a.example", graph) is first
        True
    """

    def __init__(
        self,
        calculator: TrustScoreCalculator | None = None,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        max_size: int = DEFAULT_CACHE_MAX_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize cache.

        Args:
            calculator: Calculator used on misses (default parameters if None)
            ttl_seconds: Time-to-live for cache entries
            max_size: Maximum number of entries before LRU eviction
            clock: Time source for freshness checks and ``computed_at``
        """
        self.calculator = calculator or TrustScoreCalculator(clock=clock)
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: LRUDict[str, TrustScore] = LRUDict(max_size=max_size)
        self._counters = {
            "hits": 0,
            "misses": 0,
            "invalidations": 0,
        }

    @property
    def ttl(self) -> float:
        return self._ttl

    def _is_fresh(self, score: TrustScore, now: float) -> bool:
        return now - score.computed_at < self._ttl

    def get(self, url: str, graph: TrustGraph) -> TrustScore:
        """Return the cached score if fresh, otherwise recompute and store it."""
        now = self._clock()
        cached = self._entries.get(url)
        if cached is not None and self._is_fresh(cached, now):
            self._counters["hits"] += 1
            # Touch for LRU ordering
            return self._entries[url]

        self._counters["misses"] += 1
        logger.debug(f"Trust score cache miss for {url} ({'stale' if cached else 'absent'})")
        score = replace(self.calculator.compute(url, graph), computed_at=now)
        self._entries[url] = score
        return score

    def get_many(self, urls: Iterable[str], graph: TrustGraph) -> dict[str, TrustScore]:
        """Return scores for several registries.

        Fresh entries are served from the cache; all absent or stale ones
        are recomputed together with a single propagation pass.
        """
        now = self._clock()
        results: dict[str, TrustScore] = {}
        missing: list[str] = []

        for url in dict.fromkeys(urls):
            cached = self._entries.get(url)
            if cached is not None and self._is_fresh(cached, now):
                self._counters["hits"] += 1
                results[url] = self._entries[url]
            else:
                missing.append(url)

        if missing:
            self._counters["misses"] += len(missing)
            for url, score in self.calculator.compute_all(graph, missing).items():
                fresh = replace(score, computed_at=now)
                self._entries[url] = fresh
                results[url] = fresh

        return results

    def warm(self, graph: TrustGraph, urls: Iterable[str] | None = None) -> int:
        """Precompute and store scores, every known registry by default.

        Returns:
            Number of entries written
        """
        now = self._clock()
        computed = self.calculator.compute_all(graph, urls)
        for url, score in computed.items():
            self._entries[url] = replace(score, computed_at=now)
        logger.debug(f"Warmed trust score cache with {len(computed)} entries")
        return len(computed)

    def peek(self, url: str) -> TrustScore | None:
        """Return the stored entry, fresh or stale, without recomputing."""
        return self._entries.get(url)

    def invalidate(self, url: str | None = None) -> int:
        """Drop one entry, or every entry when ``url`` is None.

        Returns:
            Number of entries invalidated
        """
        self._counters["invalidations"] += 1
        if url is not None:
            if url in self._entries:
                del self._entries[url]
                return 1
            return 0

        count = len(self._entries)
        self._entries.clear()
        if count:
            logger.info(f"Invalidated all {count} cached trust scores")
        return count

    def clear(self) -> None:
        """Clear all cached entries."""
        self._entries.clear()

    def __contains__(self, url: object) -> bool:
        """Whether a fresh entry is stored for ``url``."""
        if not isinstance(url, str):
            return False
        cached = self._entries.get(url)
        return cached is not None and self._is_fresh(cached, self._clock())

    @property
    def size(self) -> int:
        """Number of stored entries, fresh or stale."""
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        lookups = self._counters["hits"] + self._counters["misses"]
        return {
            **self._counters,
            "size": self.size,
            "max_size": self._entries.max_size,
            "ttl_seconds": self._ttl,
            "hit_rate": self._counters["hits"] / max(1, lookups),
        }
