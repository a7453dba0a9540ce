"""Entity query exceptions.

All exceptions inherit from ``EntityQueryError`` and provide ``to_dict()``
for API-friendly error payloads.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class EntityQueryError(Exception):
    """Base exception for entity query errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class MalformedConditionError(EntityQueryError):
    """Raised when a condition's value does not fit its operator."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_CONDITION",
            "message": str(self),
            "field": self.field,
        }


class UnsupportedOperatorError(EntityQueryError):
    """Raised when an operator/conjunction pairing has no clause lowering.

    Suggests close matches when the operator was given as text.
    """

    def __init__(
        self,
        operator: Any,
        conjunction: Any = None,
        valid_operators: list[str] | None = None,
    ) -> None:
        self.operator = str(getattr(operator, "value", operator))
        self.conjunction = None if conjunction is None else str(getattr(conjunction, "value", conjunction))
        self.suggestions = (
            get_close_matches(self.operator.upper(), valid_operators, n=3, cutoff=0.6) if valid_operators else []
        )

        message = f"Unsupported operator '{self.operator}'"
        if self.conjunction is not None:
            message += f" with conjunction '{self.conjunction}'"
        message += "."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "conjunction": self.conjunction,
            "suggestions": self.suggestions,
        }


class QueryBuildError(EntityQueryError):
    """Raised when sort/range directives cannot form a valid request."""


class ClusterError(EntityQueryError):
    """Base exception for search cluster failures."""


class ConfigurationError(ClusterError):
    """Raised when the cluster client is misconfigured or unavailable."""


class ClusterConnectionError(ClusterError):
    """Raised when the cluster cannot be reached."""


class ClusterQueryError(ClusterError):
    """Raised when the cluster rejects or fails a request."""
