# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Reputation score from a registry's own community signals.

Four signals are normalized to [0, 1] and averaged, then scaled down by
unresolved abuse reports:

- install: Wilson lower bound of installs out of ``app_count * 100``
  assumed trials, so small registries are not overweighted
- quality: average app rating / 5, left out until the registry has ratings
- longevity: one year of age earns the maximum, at half weight (0.5)
- activity: four updates a month earns the maximum

The score depends only on the registry's metadata, never on the graph.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .graph import RegistryNode

# =============================================================================
# CONSTANTS
# =============================================================================

Z_95 = 1.96  # 95% confidence
TRIALS_PER_APP = 100
LONGEVITY_DAYS = 365.0
LONGEVITY_WEIGHT = 0.5
ACTIVITY_CAP = 4.0  # updates per month
REPORT_LIMIT = 10.0  # reports that zero the score


def wilson_lower_bound(successes: float, trials: float, z: float = Z_95) -> float:
    """Lower bound of the Wilson score interval for a proportion.

    Successes are capped at the trial count so the observed proportion
    stays within [0, 1].

    Returns:
        Conservative estimate of the true proportion, 0 when trials is 0
    """
    if trials <= 0:
        return 0.0

    successes = min(max(successes, 0.0), trials)
    phat = successes / trials
    z2 = z * z

    numerator = phat + z2 / (2 * trials) - z * math.sqrt((phat * (1 - phat) + z2 / (4 * trials)) / trials)
    denominator = 1 + z2 / trials

    return max(0.0, numerator / denominator)


@dataclass(frozen=True)
class ReputationBreakdown:
    """Individual reputation signals for diagnostics."""

    install: float
    quality: float | None  # None when omitted (no ratings yet)
    longevity: float
    activity: float
    report_penalty: float
    score: float

    @property
    def signals(self) -> list[float]:
        """The signals included in the average."""
        included = [self.install, self.longevity, self.activity]
        if self.quality is not None:
            included.insert(1, self.quality)
        return included

    def to_dict(self) -> dict[str, Any]:
        return {
            "install": self.install,
            "quality": self.quality,
            "longevity": self.longevity,
            "activity": self.activity,
            "report_penalty": self.report_penalty,
            "score": self.score,
        }


_EMPTY = ReputationBreakdown(
    install=0.0,
    quality=None,
    longevity=0.0,
    activity=0.0,
    report_penalty=1.0,
    score=0.0,
)


class ReputationScore:
    """Confidence-adjusted reputation from registry metadata."""

    def __init__(self, z: float = Z_95, trials_per_app: int = TRIALS_PER_APP):
        self.z = z
        self.trials_per_app = trials_per_app

    def compute(self, metadata: RegistryNode | None) -> float:
        """Return the reputation in [0, 1]; 0 when metadata is missing."""
        return self.breakdown(metadata).score

    def breakdown(self, metadata: RegistryNode | None) -> ReputationBreakdown:
        """Compute every signal and the combined score."""
        if metadata is None:
            return _EMPTY

        trials = metadata.value("app_count") * self.trials_per_app
        install = wilson_lower_bound(metadata.value("install_count"), trials, self.z)

        rating = metadata.value("avg_app_rating")
        quality = min(rating / 5.0, 1.0) if rating > 0 else None

        longevity = min(metadata.value("age") / LONGEVITY_DAYS, 1.0) * LONGEVITY_WEIGHT
        activity = min(metadata.value("update_frequency") / ACTIVITY_CAP, 1.0)
        report_penalty = max(0.0, 1.0 - metadata.value("report_count") / REPORT_LIMIT)

        signals = [install, longevity, activity]
        if quality is not None:
            signals.insert(1, quality)
        mean = sum(signals) / len(signals)
        score = min(1.0, max(0.0, mean * report_penalty))

        return ReputationBreakdown(
            install=install,
            quality=quality,
            longevity=longevity,
            activity=activity,
            report_penalty=report_penalty,
            score=score,
        )


def compute_reputation(metadata: RegistryNode | None) -> float:
    """Compute reputation with default parameters (convenience function)."""
    return ReputationScore().compute(metadata)
