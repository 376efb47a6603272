# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Bounded LRU mapping backing the trust score cache."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Iterator
from typing import Any, Optional, TypeVar

DEFAULT_CACHE_MAX_SIZE = 10000

K = TypeVar("K")
V = TypeVar("V")


def get_cache_max_size() -> int:
    """Get the configured cache max size from config."""
    from pydantic import ValidationError

    from .config import get_config

    try:
        return get_config().cache_max_size
    except ValidationError:
        return DEFAULT_CACHE_MAX_SIZE


class LRUDict(dict[K, V]):
    """
    A dictionary with LRU (Least Recently Used) eviction policy.

    When the mapping exceeds max_size, the least recently written or read
    entries are evicted. Thread-safe for concurrent access.

    Example:
        scores = LRUDict(max_size=2)
        scores["https://a.example"] = score_a
        scores["https://b.example"] = score_b
        scores["https://a.example"]  # a becomes most recent
        scores["https://c.example"] = score_c  # evicts b
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """
        Initialize LRU mapping.

        Args:
            max_size: Maximum number of items. If None, uses
                      REGISTRY_TRUST_CACHE_MAX_SIZE or DEFAULT_CACHE_MAX_SIZE.
        """
        super().__init__()
        self._max_size = max_size if max_size is not None else get_cache_max_size()
        self._order: OrderedDict[K, None] = OrderedDict()
        self._lock = threading.RLock()

        if args or kwargs:
            for k, v in dict(*args, **kwargs).items():
                self[k] = v

    @property
    def max_size(self) -> int:
        """Maximum cache size."""
        return self._max_size

    def __setitem__(self, key: K, value: V) -> None:
        with self._lock:
            if key in self._order:
                self._order.move_to_end(key)
            else:
                self._order[key] = None

            super().__setitem__(key, value)
            self._evict_if_needed()

    def __getitem__(self, key: K) -> V:
        with self._lock:
            value = super().__getitem__(key)
            if key in self._order:
                self._order.move_to_end(key)
            return value

    def __delitem__(self, key: K) -> None:
        with self._lock:
            super().__delitem__(key)
            self._order.pop(key, None)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get item without updating access order (peek)."""
        with self._lock:
            return super().get(key, default)

    def pop(self, key: K, *args: Any) -> V:
        """Remove and return item."""
        with self._lock:
            self._order.pop(key, None)
            return super().pop(key, *args)

    def clear(self) -> None:
        """Clear all items."""
        with self._lock:
            super().clear()
            self._order.clear()

    def _evict_if_needed(self) -> None:
        while len(self._order) > self._max_size:
            oldest_key = next(iter(self._order))
            self._order.pop(oldest_key)
            super().pop(oldest_key, None)

    def __iter__(self) -> Iterator[K]:
        """Iterate over keys oldest to newest."""
        with self._lock:
            return iter(list(self._order.keys()))

    def keys(self) -> Any:
        """Return keys in LRU order."""
        with self._lock:
            return list(self._order.keys())

    def stats(self) -> dict[str, Any]:
        """Return size statistics."""
        with self._lock:
            return {
                "size": len(self),
                "max_size": self._max_size,
                "utilization": len(self) / self._max_size if self._max_size > 0 else 0,
            }
