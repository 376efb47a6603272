# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""TrustRank: personalized PageRank over the follow graph.

Trust mass starts on the registries the user vouches for directly and
flows along follow edges, split evenly across each source's out-edges.
On every iteration a fraction (1 - damping) teleports back to the trusted
set, which anchors the walk at the user's own judgement.

Key properties:
- Fixed iteration count, no convergence threshold. Changing to a
  threshold stop would change scores for existing graphs.
- Synchronous update: each iteration reads only the previous scores.
- Final scores are normalized by the maximum so the best-trusted
  registry sits at 1.0.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict

from ..core.exceptions import ValidationException
from .graph import TrustGraph

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_DAMPING = 0.85
DEFAULT_ITERATIONS = 20


# =============================================================================
# PROPAGATION ENGINE
# =============================================================================


class TrustPropagation:
    """Compute transitive trust for every registry in a graph.

    Example:
        >>> graph = TrustGraph.from_edges([("a", "b")], user_trusted=["a"])
        >>> scores = TrustPropagation().compute(graph)
        >>> scores["a"], round(scores["b"], 3)
        (1.0, 0.85)
    """

    def __init__(
        self,
        damping: float = DEFAULT_DAMPING,
        iterations: int = DEFAULT_ITERATIONS,
    ):
        """Initialize the propagation engine.

        Args:
            damping: Probability that trust follows an edge rather than
                     teleporting back to the trusted set (0-1)
            iterations: Number of synchronous update rounds
        """
        if not 0.0 <= damping <= 1.0:
            raise ValidationException(
                f"damping must be between 0.0 and 1.0, got {damping}",
                field="damping",
                value=damping,
            )
        if iterations < 0:
            raise ValidationException(
                f"iterations must be non-negative, got {iterations}",
                field="iterations",
                value=iterations,
            )
        self.damping = damping
        self.iterations = iterations

    def compute(self, graph: TrustGraph) -> dict[str, float]:
        """Run TrustRank over the whole graph.

        Every registry known to the graph gets a score, including ones
        with metadata but no edges (0 unless directly trusted).

        Returns:
            Dict mapping registry URL -> transitive trust in [0, 1]
        """
        start_time = time.perf_counter()

        nodes = sorted(graph.all_nodes())
        trusted = graph.user_trusted

        # Incoming index and out-degrees, built once per pass
        incoming: dict[str, list[str]] = defaultdict(list)
        out_degree: dict[str, int] = {}
        for source in sorted(graph.edges):
            targets = graph.edges[source]
            if not targets:
                continue
            out_degree[source] = len(targets)
            for target in targets:
                incoming[target].append(source)

        scores = {url: 1.0 if url in trusted else 0.0 for url in nodes}
        teleport = 1.0 - self.damping

        for _ in range(self.iterations):
            new_scores: dict[str, float] = {}
            for url in nodes:
                score = teleport if url in trusted else 0.0
                for source in incoming.get(url, ()):
                    score += self.damping * (scores[source] / out_degree[source])
                new_scores[url] = score
            scores = new_scores

        max_score = max(scores.values(), default=0.0)
        if max_score > 0:
            scores = {url: min(1.0, score / max_score) for url, score in scores.items()}

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"TrustRank pass: {len(nodes)} nodes, {sum(out_degree.values())} edges, "
            f"{self.iterations} iterations in {elapsed_ms:.1f}ms",
            extra={
                "extra_data": {
                    "nodes": len(nodes),
                    "iterations": self.iterations,
                    "duration_ms": elapsed_ms,
                }
            },
        )
        return scores


# =============================================================================
# MODULE-LEVEL FUNCTIONS
# =============================================================================


def compute_trust_rank(
    graph: TrustGraph,
    damping: float = DEFAULT_DAMPING,
    iterations: int = DEFAULT_ITERATIONS,
) -> dict[str, float]:
    """Run TrustRank with the given parameters (convenience function)."""
    return TrustPropagation(damping=damping, iterations=iterations).compute(graph)
