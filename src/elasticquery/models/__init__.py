"""Data models for condition trees, query directives and compiled requests."""

from elasticquery.models.condition import Condition, ConditionGroup, Conjunction, Operator
from elasticquery.models.query import QueryRequest, RangeSpec, SortDirection, SortSpec

__all__ = [
    "Condition",
    "ConditionGroup",
    "Conjunction",
    "Operator",
    "QueryRequest",
    "RangeSpec",
    "SortDirection",
    "SortSpec",
]
