# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Registry Trust - trust scores for federated content registries.

Combines three signals into one score in [0, 1]:
  - direct trust: registries the user vouches for explicitly
  - transitive trust: TrustRank (personalized PageRank) over "follow"
    edges, decayed by hop distance from the user's trusted set
  - reputation: Wilson-bounded install, rating, age and activity signals,
    penalized by abuse reports

A separate advisory Sybil suspicion score flags manufactured-trust
patterns. The blocklist always wins: a blocked registry scores 0.

Entry point for callers: ``TrustService`` (see registry_trust.trust.service).
No network or disk I/O happens in this package.
"""

__version__ = "1.0.0"

from .core.exceptions import (
    ConfigException,
    TrustException,
    ValidationException,
)
from .trust import (
    RegistryNode,
    SybilDetector,
    TrustGraph,
    TrustScore,
    TrustScoreCache,
    TrustScoreCalculator,
    TrustService,
)

__all__ = [
    "__version__",
    "ConfigException",
    "TrustException",
    "ValidationException",
    "RegistryNode",
    "SybilDetector",
    "TrustGraph",
    "TrustScore",
    "TrustScoreCache",
    "TrustScoreCalculator",
    "TrustService",
]
