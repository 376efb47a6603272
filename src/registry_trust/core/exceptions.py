# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Exception hierarchy for registry trust scoring.

Scoring itself never raises for missing or malformed graph data; these
exceptions cover caller-supplied input that cannot be represented at all
(negative metadata counts, out-of-range algorithm parameters) and invalid
configuration.
"""

from __future__ import annotations

from typing import Any


class TrustException(Exception):  # noqa: N818
    """Base exception for all registry trust errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TrustException):
    """Exception for validation errors.

    Raised when:
    - Registry metadata holds a negative or non-numeric value
    - An average rating lies outside the 0-5 scale
    - An algorithm parameter (damping, iterations, decay) is out of range
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(TrustException):
    """Exception for configuration errors.

    Raised when settings load but describe an unusable combination,
    such as score weights that sum to zero.
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []
