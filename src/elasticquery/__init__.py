"""elasticquery — Entity queries compiled to Elasticsearch / OpenSearch bool queries."""

from elasticquery.core.compiler import DEFAULT_MAX_RESULT_WINDOW, QueryCompiler
from elasticquery.core.query import EntityQuery
from elasticquery.models.condition import Condition, ConditionGroup, Conjunction, Operator
from elasticquery.models.query import QueryRequest, RangeSpec, SortDirection, SortSpec

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_MAX_RESULT_WINDOW",
    "Condition",
    "ConditionGroup",
    "Conjunction",
    "EntityQuery",
    "Operator",
    "QueryCompiler",
    "QueryRequest",
    "RangeSpec",
    "SortDirection",
    "SortSpec",
    "__version__",
]
