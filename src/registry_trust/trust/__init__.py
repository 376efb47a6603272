"""Trust scoring for federated content registries.

This package is organized into the following modules:
- graph: RegistryNode metadata, TrustGraph and change notifications
- hops: HopDistance, shortest distance from the user's trusted set
- propagation: TrustPropagation (TrustRank, personalized PageRank)
- reputation: ReputationScore (Wilson lower bound over community signals)
- sybil: SybilDetector, advisory manufactured-trust suspicion
- calculator: TrustScore and TrustScoreCalculator (final combination)
- cache: TrustScoreCache (TTL memoization with explicit invalidation)
- service: TrustService, the composed API used by callers
"""

from __future__ import annotations

from .cache import DEFAULT_CACHE_TTL, TrustScoreCache
from .calculator import (
    DEFAULT_HOP_DECAY,
    DEFAULT_WEIGHTS,
    TrustScore,
    TrustScoreCalculator,
    compute_trust_score,
)
from .graph import (
    ChangeKind,
    GraphChange,
    RegistryNode,
    TrustGraph,
)
from .hops import HopDistance, compute_hops
from .propagation import (
    DEFAULT_DAMPING,
    DEFAULT_ITERATIONS,
    TrustPropagation,
    compute_trust_rank,
)
from .reputation import (
    ReputationBreakdown,
    ReputationScore,
    compute_reputation,
    wilson_lower_bound,
)
from .service import TrustService
from .sybil import SybilDetector, SybilReport, detect_sybil

__all__ = [
    # Graph
    "ChangeKind",
    "GraphChange",
    "RegistryNode",
    "TrustGraph",
    # Algorithms
    "HopDistance",
    "compute_hops",
    "TrustPropagation",
    "compute_trust_rank",
    "DEFAULT_DAMPING",
    "DEFAULT_ITERATIONS",
    "ReputationBreakdown",
    "ReputationScore",
    "compute_reputation",
    "wilson_lower_bound",
    "SybilDetector",
    "SybilReport",
    "detect_sybil",
    # Scores
    "TrustScore",
    "TrustScoreCalculator",
    "compute_trust_score",
    "DEFAULT_HOP_DECAY",
    "DEFAULT_WEIGHTS",
    "TrustScoreCache",
    "DEFAULT_CACHE_TTL",
    # Service
    "TrustService",
]
