"""Registry trust core - configuration, logging, errors and caching primitives."""

from .config import TrustSettings, clear_config_cache, get_config
from .exceptions import (
    ConfigException,
    TrustException,
    ValidationException,
)
from .logging import (
    configure_logging,
    get_logger,
    scoring_pass,
)
from .lru_cache import LRUDict

__all__ = [
    "TrustSettings",
    "get_config",
    "clear_config_cache",
    "TrustException",
    "ValidationException",
    "ConfigException",
    "configure_logging",
    "get_logger",
    "scoring_pass",
    "LRUDict",
]
