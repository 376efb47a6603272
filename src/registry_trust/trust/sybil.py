# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Sybil-pattern detection for registries.

Scores how likely a registry is to belong to a cluster of fake identities
manufacturing trust. The score is advisory: it does not feed the final
trust score, callers apply their own policy on top of it.

Heuristics (additive, capped at 1.0):
- Asymmetric popularity: many followers while following almost nobody
- Rapid adoption: a very young registry with a very large install count
- Circular following: the registry's follow edges lead back to itself
  within a few hops (A -> B -> C -> A)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .graph import TrustGraph

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

ASYMMETRIC_FOLLOWER_MIN = 100  # followers strictly above this
ASYMMETRIC_FOLLOWING_MAX = 10  # following strictly below this
ASYMMETRIC_PENALTY = 0.3

RAPID_ADOPTION_MAX_AGE = 30  # days, strictly below
RAPID_ADOPTION_MIN_INSTALLS = 10000  # strictly above
RAPID_ADOPTION_PENALTY = 0.4

CIRCULARITY_WEIGHT = 0.3
DEFAULT_MAX_CYCLE_DEPTH = 5
DEFAULT_ALERT_THRESHOLD = 0.7

REASON_ASYMMETRIC = "asymmetric_follow"
REASON_RAPID_ADOPTION = "rapid_adoption"
REASON_CIRCULAR = "circular_follow"


@dataclass
class SybilReport:
    """Suspicion score for one registry and the heuristics that fired."""

    url: str
    score: float
    circular: bool = False
    reasons: list[str] = field(default_factory=list)

    @property
    def suspicious(self) -> bool:
        return self.score > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "score": round(self.score, 3),
            "circular": self.circular,
            "reasons": self.reasons.copy(),
        }


class SybilDetector:
    """Heuristic and cycle-based Sybil suspicion.

    Example:
        >>> graph = TrustGraph.from_edges([("a", "b"), ("b", "c"), ("c", "a")])
        >>> SybilDetector().suspicion(graph, "a")
        0.3
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_CYCLE_DEPTH,
        alert_threshold: float = DEFAULT_ALERT_THRESHOLD,
    ):
        """Initialize the detector.

        Args:
            max_depth: Longest cycle, in edges, that counts as circular
            alert_threshold: Score at which a warning is logged
        """
        self.max_depth = max_depth
        self.alert_threshold = alert_threshold

    def suspicion(self, graph: TrustGraph, url: str) -> float:
        """Return the suspicion score in [0, 1]."""
        return self.analyze(graph, url).score

    def analyze(self, graph: TrustGraph, url: str) -> SybilReport:
        """Evaluate every heuristic for a registry.

        Missing metadata disables the metadata heuristics; the cycle
        check only needs edges.
        """
        score = 0.0
        reasons: list[str] = []
        metadata = graph.metadata(url)

        if metadata is not None:
            if (
                metadata.value("follower_count") > ASYMMETRIC_FOLLOWER_MIN
                and metadata.value("following_count") < ASYMMETRIC_FOLLOWING_MAX
            ):
                score += ASYMMETRIC_PENALTY
                reasons.append(REASON_ASYMMETRIC)

            if (
                metadata.value("age") < RAPID_ADOPTION_MAX_AGE
                and metadata.value("install_count") > RAPID_ADOPTION_MIN_INSTALLS
            ):
                score += RAPID_ADOPTION_PENALTY
                reasons.append(REASON_RAPID_ADOPTION)

        circular = self.has_cycle(graph, url)
        if circular:
            score += CIRCULARITY_WEIGHT
            reasons.append(REASON_CIRCULAR)

        report = SybilReport(url=url, score=min(score, 1.0), circular=circular, reasons=reasons)

        if report.score >= self.alert_threshold:
            logger.warning(
                f"Sybil suspicion {report.score:.2f} for {url}: {', '.join(reasons)}",
                extra={"extra_data": report.to_dict()},
            )
        return report

    def has_cycle(self, graph: TrustGraph, start: str) -> bool:
        """Whether follow edges lead from ``start`` back to itself.

        Depth-first search with a per-path visited set, so every branch
        is explored independently; paths longer than ``max_depth`` edges
        are abandoned.
        """
        path: set[str] = {start}

        def dfs(current: str, depth: int) -> bool:
            for neighbor in sorted(graph.successors(current)):
                if neighbor == start:
                    return True
                if neighbor in path or depth + 1 >= self.max_depth:
                    continue
                path.add(neighbor)
                if dfs(neighbor, depth + 1):
                    return True
                path.discard(neighbor)
            return False

        return dfs(start, 0)


def detect_sybil(graph: TrustGraph, url: str) -> float:
    """Compute Sybil suspicion with default parameters (convenience function)."""
    return SybilDetector().suspicion(graph, url)
