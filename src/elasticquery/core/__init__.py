"""Core query compilation and execution."""

from elasticquery.core.compiler import DEFAULT_MAX_RESULT_WINDOW, QueryCompiler
from elasticquery.core.query import EntityQuery

__all__ = ["DEFAULT_MAX_RESULT_WINDOW", "EntityQuery", "QueryCompiler"]
