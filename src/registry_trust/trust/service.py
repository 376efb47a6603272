# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""High-level trust scoring service.

TrustService composes the trust graph, score cache and Sybil detector
into the surface used by the rest of the application. It is an explicit
object: the embedding application creates one and owns its lifetime, and
no score state lives at module level.

Every mutation, invalidation and read runs under one re-entrant lock, and
graph mutations invalidate affected cache entries before the mutating call
returns, so a read never observes a score computed from an older graph.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from ..core.config import TrustSettings, get_config
from ..core.logging import scoring_pass
from .cache import TrustScoreCache
from .calculator import TrustScore, TrustScoreCalculator
from .graph import GraphChange, RegistryNode, TrustGraph
from .sybil import SybilDetector, SybilReport

logger = logging.getLogger(__name__)


class TrustService:
    """Trust scores for registries in a federation.

    Example:
        >>> service = TrustService()
        >>> service.add_user_trusted("https://home.example")
        True
        >>> service.add_edge("https://home.example", "https://apps.example")
        True
        >>> score = service.get_trust_score("https://apps.example")
        >>> score.hops
        1
    """

    def __init__(
        self,
        graph: TrustGraph | None = None,
        cache: TrustScoreCache | None = None,
        sybil_detector: SybilDetector | None = None,
    ):
        """Initialize the service.

        Args:
            graph: Graph to score; an empty graph when None. Mutations made
                   directly on the graph still invalidate the cache.
            cache: Score cache (default parameters if None)
            sybil_detector: Sybil detector (default parameters if None)
        """
        self.graph = graph if graph is not None else TrustGraph()
        self.cache = cache or TrustScoreCache()
        self.sybil_detector = sybil_detector or SybilDetector()
        self._lock = threading.RLock()
        self.graph.add_listener(self._on_graph_change)

    @classmethod
    def from_config(
        cls,
        settings: TrustSettings | None = None,
        graph: TrustGraph | None = None,
        clock: Callable[[], float] = time.time,
    ) -> TrustService:
        """Build a service from TrustSettings (the global config when None)."""
        settings = settings or get_config()
        settings.validate_weights()

        calculator = TrustScoreCalculator.from_settings(settings, clock=clock)
        cache = TrustScoreCache(
            calculator=calculator,
            ttl_seconds=settings.cache_ttl_seconds,
            max_size=settings.cache_max_size,
            clock=clock,
        )
        detector = SybilDetector(
            max_depth=settings.sybil_max_depth,
            alert_threshold=settings.sybil_alert_threshold,
        )
        return cls(graph=graph, cache=cache, sybil_detector=detector)

    def close(self) -> None:
        """Detach from the graph and drop all cached scores."""
        with self._lock:
            self.graph.remove_listener(self._on_graph_change)
            self.cache.clear()

    def _on_graph_change(self, change: GraphChange) -> None:
        with self._lock:
            if change.structural:
                self.cache.invalidate()
            else:
                self.cache.invalidate(change.url)

    # -------------------------------------------------------------------------
    # Graph mutations (federation collaborator)
    # -------------------------------------------------------------------------

    def add_node(self, url: str, metadata: RegistryNode | None = None) -> bool:
        with self._lock:
            return self.graph.add_node(url, metadata)

    def update_node(self, url: str, metadata: RegistryNode) -> bool:
        with self._lock:
            return self.graph.update_node(url, metadata)

    def remove_node(self, url: str) -> bool:
        with self._lock:
            return self.graph.remove_node(url)

    def add_edge(self, source: str, target: str) -> bool:
        with self._lock:
            return self.graph.add_edge(source, target)

    def remove_edge(self, source: str, target: str) -> bool:
        with self._lock:
            return self.graph.remove_edge(source, target)

    def add_user_trusted(self, url: str) -> bool:
        with self._lock:
            return self.graph.add_user_trusted(url)

    def remove_user_trusted(self, url: str) -> bool:
        with self._lock:
            return self.graph.remove_user_trusted(url)

    def add_blocked(self, url: str) -> bool:
        with self._lock:
            return self.graph.add_blocked(url)

    def remove_blocked(self, url: str) -> bool:
        with self._lock:
            return self.graph.remove_blocked(url)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_trust_score(self, url: str) -> TrustScore:
        """Cached trust score of one registry."""
        with self._lock:
            return self.cache.get(url, self.graph)

    def get_trust_scores(self, urls: Iterable[str] | None = None) -> dict[str, TrustScore]:
        """Cached trust scores of many registries, every known one by default.

        Missing entries are computed together in one propagation pass.
        """
        with self._lock, scoring_pass():
            targets = sorted(self.graph.all_nodes()) if urls is None else list(urls)
            return self.cache.get_many(targets, self.graph)

    def get_sybil_suspicion(self, url: str) -> float:
        """Uncached Sybil suspicion score in [0, 1]."""
        with self._lock:
            return self.sybil_detector.suspicion(self.graph, url)

    def analyze_sybil(self, url: str) -> SybilReport:
        """Sybil suspicion with the heuristics that fired."""
        with self._lock:
            return self.sybil_detector.analyze(self.graph, url)

    def invalidate(self, url: str | None = None) -> int:
        """Drop one cached score, or all of them when ``url`` is None."""
        with self._lock:
            return self.cache.invalidate(url)

    def snapshot(self) -> TrustGraph:
        """Independent copy of the current graph."""
        with self._lock:
            return self.graph.snapshot()

    def stats(self) -> dict[str, Any]:
        """Graph and cache statistics."""
        with self._lock:
            return {
                "nodes": len(self.graph.all_nodes()),
                "edges": self.graph.edge_count,
                "user_trusted": len(self.graph.user_trusted),
                "blocked": len(self.graph.blocked),
                "cache": self.cache.stats(),
            }
