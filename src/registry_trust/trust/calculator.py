# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Final trust score combination.

A registry's trust score blends three components:

- direct: 1.0 when the user vouches for the registry, else 0.0
- transitive: TrustRank score decayed by hop distance,
  ``raw * hop_decay ** (hops - 1)``; undecayed for the trusted set itself
  and 0 for unreachable registries
- reputation: confidence-adjusted community reputation

``final`` is the weighted average of the three. A blocked registry always
has ``final == 0``; its components are still reported for diagnostics.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ValidationException
from .graph import TrustGraph
from .hops import HopDistance
from .propagation import TrustPropagation
from .reputation import ReputationScore

if TYPE_CHECKING:
    from ..core.config import TrustSettings

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_HOP_DECAY = 0.8
DEFAULT_WEIGHTS: dict[str, float] = {
    "direct": 1.0,
    "transitive": 0.6,
    "reputation": 0.3,
}


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


# =============================================================================
# TRUST SCORE
# =============================================================================


@dataclass(frozen=True)
class TrustScore:
    """Composite trust score for one registry."""

    direct: float  # 0 or 1
    transitive: float  # already hop-decayed
    reputation: float
    final: float
    computed_at: float  # epoch seconds
    hops: int | None  # None when unreachable from the trusted set
    blocked: bool = False

    @property
    def reachable(self) -> bool:
        return self.hops is not None

    @classmethod
    def zero(cls, computed_at: float) -> TrustScore:
        """Score of a registry the graph knows nothing about."""
        return cls(
            direct=0.0,
            transitive=0.0,
            reputation=0.0,
            final=0.0,
            computed_at=computed_at,
            hops=None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "direct": self.direct,
            "transitive": self.transitive,
            "reputation": self.reputation,
            "final": self.final,
            "computed_at": self.computed_at,
            "hops": self.hops,
            "reachable": self.reachable,
            "blocked": self.blocked,
        }


# =============================================================================
# CALCULATOR
# =============================================================================


class TrustScoreCalculator:
    """Combine direct, transitive and reputation trust into one score.

    ``compute`` answers a single query and runs a whole-graph TrustRank
    pass for it. ``compute_all`` runs one pass and one BFS for a batch of
    registries; both produce identical component values.

    Example:
        >>> graph = TrustGraph.from_edges([("a", "b")], user_trusted=["a"])
        >>> calculator = TrustScoreCalculator()
        >>> score = calculator.compute("b", graph)
        >>> score.hops, round(score.transitive, 2)
        (1, 0.85)
    """

    def __init__(
        self,
        propagation: TrustPropagation | None = None,
        reputation: ReputationScore | None = None,
        hop_distance: HopDistance | None = None,
        weights: Mapping[str, float] | None = None,
        hop_decay: float = DEFAULT_HOP_DECAY,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the calculator.

        Args:
            propagation: TrustRank engine (default parameters if None)
            reputation: Reputation scorer (default parameters if None)
            hop_distance: Hop distance search
            weights: Combination weights keyed direct/transitive/reputation
            hop_decay: Transitive trust retained per hop beyond the first
            clock: Source of ``computed_at`` timestamps
        """
        merged = dict(DEFAULT_WEIGHTS)
        if weights:
            unknown = set(weights) - set(DEFAULT_WEIGHTS)
            if unknown:
                raise ValidationException(
                    f"Unknown weight components: {', '.join(sorted(unknown))}",
                    field="weights",
                    value=sorted(unknown),
                )
            merged.update(weights)
        if any(w < 0 for w in merged.values()) or sum(merged.values()) <= 0:
            raise ValidationException(
                "weights must be non-negative and not all zero",
                field="weights",
                value=merged,
            )
        if not 0.0 <= hop_decay <= 1.0:
            raise ValidationException(
                f"hop_decay must be between 0.0 and 1.0, got {hop_decay}",
                field="hop_decay",
                value=hop_decay,
            )

        self.propagation = propagation or TrustPropagation()
        self.reputation = reputation or ReputationScore()
        self.hop_distance = hop_distance or HopDistance()
        self.weights = merged
        self.hop_decay = hop_decay
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: TrustSettings,
        clock: Callable[[], float] = time.time,
    ) -> TrustScoreCalculator:
        """Build a calculator from TrustSettings."""
        return cls(
            propagation=TrustPropagation(damping=settings.damping, iterations=settings.iterations),
            weights=settings.weights,
            hop_decay=settings.hop_decay,
            clock=clock,
        )

    def compute(
        self,
        url: str,
        graph: TrustGraph,
        transitive: Mapping[str, float] | None = None,
    ) -> TrustScore:
        """Compute the trust score of one registry.

        Args:
            url: Registry to score
            graph: Trust graph
            transitive: Precomputed TrustRank scores; a fresh whole-graph
                        pass runs when omitted

        Returns:
            TrustScore; all zeros and unreachable for unknown registries
        """
        computed_at = self.clock()
        if url not in graph:
            return TrustScore.zero(computed_at)

        if transitive is None:
            transitive = self.propagation.compute(graph)
        hops = self.hop_distance.distance(graph, url)
        return self._compose(url, graph, transitive.get(url, 0.0), hops, computed_at)

    def compute_all(
        self,
        graph: TrustGraph,
        urls: Iterable[str] | None = None,
    ) -> dict[str, TrustScore]:
        """Compute scores for many registries with one propagation pass.

        Args:
            graph: Trust graph
            urls: Registries to score; every known registry when None

        Returns:
            Dict mapping registry URL -> TrustScore
        """
        computed_at = self.clock()
        targets = sorted(graph.all_nodes()) if urls is None else list(urls)
        if not targets:
            return {}

        transitive = self.propagation.compute(graph)
        distances = self.hop_distance.distances(graph)

        results: dict[str, TrustScore] = {}
        for url in targets:
            if url not in graph:
                results[url] = TrustScore.zero(computed_at)
                continue
            results[url] = self._compose(
                url,
                graph,
                transitive.get(url, 0.0),
                distances.get(url),
                computed_at,
            )

        logger.debug(f"Computed {len(results)} trust scores in one pass")
        return results

    def decay(self, raw_transitive: float, hops: int | None) -> float:
        """Apply hop-distance decay to a raw TrustRank score."""
        if hops is None:
            return 0.0
        if hops == 0:
            return raw_transitive
        return raw_transitive * self.hop_decay ** (hops - 1)

    def _compose(
        self,
        url: str,
        graph: TrustGraph,
        raw_transitive: float,
        hops: int | None,
        computed_at: float,
    ) -> TrustScore:
        direct = 1.0 if graph.is_trusted(url) else 0.0
        transitive = _clamp(self.decay(raw_transitive, hops))
        reputation = _clamp(self.reputation.compute(graph.metadata(url)))

        total_weight = sum(self.weights.values())
        final = _clamp(
            (
                direct * self.weights["direct"]
                + transitive * self.weights["transitive"]
                + reputation * self.weights["reputation"]
            )
            / total_weight
        )

        blocked = graph.is_blocked(url)
        if blocked:
            final = 0.0

        return TrustScore(
            direct=direct,
            transitive=transitive,
            reputation=reputation,
            final=final,
            computed_at=computed_at,
            hops=hops,
            blocked=blocked,
        )


def compute_trust_score(url: str, graph: TrustGraph) -> TrustScore:
    """Compute one registry's score with default parameters (convenience function)."""
    return TrustScoreCalculator().compute(url, graph)
