"""Core configuration for registry trust scoring.

All environment-based configuration flows through this module. Settings
only tune the algorithms; computed scores are never held here.

Usage:
    from registry_trust.core.config import get_config
    config = get_config()

    damping = config.damping
    ttl = config.cache_ttl_seconds
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException


class TrustSettings(BaseSettings):
    """Configuration settings for trust scoring.

    Every setting reads a REGISTRY_TRUST_ environment variable and falls
    back to the default used by the scoring algorithms.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # PROPAGATION SETTINGS
    # ==========================================================================

    damping: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Probability mass that follows edges instead of teleporting to the trusted set",
        validation_alias="REGISTRY_TRUST_DAMPING",
    )
    iterations: int = Field(
        default=20,
        ge=0,
        description="Fixed number of TrustRank iterations",
        validation_alias="REGISTRY_TRUST_ITERATIONS",
    )

    # ==========================================================================
    # SCORE COMBINATION SETTINGS
    # ==========================================================================

    hop_decay: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Transitive trust retained per hop beyond the first",
        validation_alias="REGISTRY_TRUST_HOP_DECAY",
    )
    weight_direct: float = Field(
        default=1.0,
        ge=0.0,
        description="Weight of direct (explicit) trust",
        validation_alias="REGISTRY_TRUST_WEIGHT_DIRECT",
    )
    weight_transitive: float = Field(
        default=0.6,
        ge=0.0,
        description="Weight of decayed transitive trust",
        validation_alias="REGISTRY_TRUST_WEIGHT_TRANSITIVE",
    )
    weight_reputation: float = Field(
        default=0.3,
        ge=0.0,
        description="Weight of community reputation",
        validation_alias="REGISTRY_TRUST_WEIGHT_REPUTATION",
    )

    # ==========================================================================
    # CACHE SETTINGS
    # ==========================================================================

    cache_ttl_seconds: float = Field(
        default=3600.0,
        gt=0.0,
        description="Seconds a computed trust score stays fresh",
        validation_alias="REGISTRY_TRUST_CACHE_TTL",
    )
    cache_max_size: int = Field(
        default=10000,
        gt=0,
        description="Maximum number of cached trust scores",
        validation_alias="REGISTRY_TRUST_CACHE_MAX_SIZE",
    )

    # ==========================================================================
    # SYBIL DETECTION SETTINGS
    # ==========================================================================

    sybil_max_depth: int = Field(
        default=5,
        ge=1,
        description="Longest follow cycle (in edges) counted as circular",
        validation_alias="REGISTRY_TRUST_SYBIL_MAX_DEPTH",
    )
    sybil_alert_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Suspicion score at which a warning is logged",
        validation_alias="REGISTRY_TRUST_SYBIL_ALERT_THRESHOLD",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="REGISTRY_TRUST_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="REGISTRY_TRUST_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="REGISTRY_TRUST_LOG_FILE",
    )

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def weights(self) -> dict[str, float]:
        """Score combination weights keyed by component name."""
        return {
            "direct": self.weight_direct,
            "transitive": self.weight_transitive,
            "reputation": self.weight_reputation,
        }

    @property
    def total_weight(self) -> float:
        """Sum of the combination weights."""
        return self.weight_direct + self.weight_transitive + self.weight_reputation

    def validate_weights(self) -> None:
        """Raise ConfigException when the weights cannot form an average."""
        if self.total_weight <= 0:
            raise ConfigException(
                "Trust score weights must not all be zero",
                missing_vars=[
                    "REGISTRY_TRUST_WEIGHT_DIRECT",
                    "REGISTRY_TRUST_WEIGHT_TRANSITIVE",
                    "REGISTRY_TRUST_WEIGHT_REPUTATION",
                ],
            )


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: TrustSettings | None = None


def get_config() -> TrustSettings:
    """Get the global configuration instance.

    Returns:
        The singleton TrustSettings instance.
    """
    global _config
    if _config is None:
        _config = TrustSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
