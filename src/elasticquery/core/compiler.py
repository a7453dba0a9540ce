"""Query compiler — Lowers condition trees into search-cluster bool queries.

The compiler walks a ``ConditionGroup`` and produces the three clause
buckets of a bool query:

  - ``must``: every clause must match (positive conditions under AND)
  - ``should``: at least one clause must match (everything under OR)
  - ``must_not``: no clause may match (negated conditions under AND)

A bool query has no "OR of a NOT", so negated conditions under OR are
wrapped in their own ``{"bool": {"must_not": ...}}`` before going into
``should``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

from elasticquery.exceptions import QueryBuildError, UnsupportedOperatorError
from elasticquery.models.condition import Condition, ConditionGroup, Conjunction, Operator
from elasticquery.models.query import QueryRequest, RangeSpec, SortSpec

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULT_WINDOW = 10000
"""Default ``index.max_result_window`` of Elasticsearch and OpenSearch."""

_DIGITS = re.compile(r"(\d+)")


def natural_key(value: Any) -> list[tuple[int, Any, str]]:
    """Sort key ordering numbers numerically and digit runs inside strings by value.

    ``natural_key("item9") < natural_key("item10")`` and ``5 < "10"``.
    """
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return [(0, value, "")]
    if not isinstance(value, str):
        value = value.isoformat() if hasattr(value, "isoformat") else str(value)
    key: list[tuple[int, Any, str]] = []
    for chunk in _DIGITS.split(value):
        if not chunk:
            continue
        key.append((0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk))
    return key


def _between(condition: Condition) -> dict[str, Any]:
    low, high = sorted(condition.value, key=natural_key)
    return {"range": {condition.field: {"gt": low, "lt": high}}}


_CLAUSE_BUILDERS: dict[Operator, Callable[[Condition], dict[str, Any]]] = {
    Operator.EQ: lambda c: {"term": {c.field: c.value}},
    Operator.NE: lambda c: {"term": {c.field: c.value}},
    Operator.IN: lambda c: {"terms": {c.field: list(c.value)}},
    Operator.NOT_IN: lambda c: {"terms": {c.field: list(c.value)}},
    Operator.IS_NULL: lambda c: {"exists": {"field": c.field}},
    Operator.IS_NOT_NULL: lambda c: {"exists": {"field": c.field}},
    Operator.GT: lambda c: {"range": {c.field: {"gt": c.value}}},
    Operator.GE: lambda c: {"range": {c.field: {"gte": c.value}}},
    Operator.LT: lambda c: {"range": {c.field: {"lt": c.value}}},
    Operator.LE: lambda c: {"range": {c.field: {"lte": c.value}}},
    Operator.BETWEEN: _between,
    Operator.STARTS_WITH: lambda c: {"prefix": {c.field: c.value}},
    Operator.ENDS_WITH: lambda c: {"wildcard": {c.field: f"*{c.value}"}},
    Operator.CONTAINS: lambda c: {"wildcard": {c.field: f"*{c.value}*"}},
}

# Operators whose clause describes the documents to exclude.
_NEGATED = frozenset({Operator.NE, Operator.NOT_IN, Operator.IS_NULL})

_LEADING_WILDCARD = frozenset({Operator.ENDS_WITH, Operator.CONTAINS})

_unmapped = [op.value for op in Operator if op not in _CLAUSE_BUILDERS]
if _unmapped:
    raise RuntimeError(f"No clause lowering for operators: {_unmapped}")


class QueryCompiler:
    """Compiles condition trees and query directives into ``QueryRequest``s.

    Compilation is pure: the same tree and directives always produce an
    equal request, and nothing is cached between calls.

    Args:
        max_result_window: Result cap used when no explicit length is set.
        warn_on_leading_wildcard: Log a warning for ``ENDS_WITH``/``CONTAINS``.
    """

    def __init__(
        self,
        max_result_window: int = DEFAULT_MAX_RESULT_WINDOW,
        warn_on_leading_wildcard: bool = True,
    ) -> None:
        if max_result_window < 1:
            raise ValueError("max_result_window must be positive")
        self.max_result_window = max_result_window
        self.warn_on_leading_wildcard = warn_on_leading_wildcard

    # ── Clause lowering ──────────────────────────────────────────────────

    def lower(self, group: ConditionGroup) -> dict[str, Any]:
        """Lower a group into the body of a ``bool`` query.

        Raises:
            UnsupportedOperatorError: If a member's operator or the group's
                conjunction has no lowering.
        """
        conjunction = group.conjunction
        if not isinstance(conjunction, Conjunction):
            raise UnsupportedOperatorError("group", conjunction)

        bool_query: dict[str, list[Any]] = {"must": []}
        for member in group.members:
            if isinstance(member, ConditionGroup):
                bucket = "must" if conjunction is Conjunction.AND else "should"
                bool_query.setdefault(bucket, []).append({"bool": self.lower(member)})
                continue

            builder = _CLAUSE_BUILDERS.get(member.operator) if isinstance(member.operator, Operator) else None
            if builder is None:
                raise UnsupportedOperatorError(member.operator, conjunction)
            if member.operator in _LEADING_WILDCARD and self.warn_on_leading_wildcard:
                logger.warning(
                    "Leading-wildcard query on field '%s' (%s) can be slow on large indexes",
                    member.field,
                    member.operator.value,
                )

            clause = builder(member)
            negated = member.operator in _NEGATED
            if conjunction is Conjunction.AND:
                bool_query.setdefault("must_not" if negated else "must", []).append(clause)
            elif negated:
                bool_query.setdefault("should", []).append({"bool": {"must_not": clause}})
            else:
                bool_query.setdefault("should", []).append(clause)

        return bool_query

    # ── Request assembly ─────────────────────────────────────────────────

    def build_request(
        self,
        index: str,
        condition: ConditionGroup,
        *,
        sorts: Sequence[SortSpec] = (),
        range_: RangeSpec | None = None,
        count: bool = False,
    ) -> QueryRequest:
        """Combine the lowered filter with sort and range directives.

        Count requests carry the filter only. Search requests never include
        ``_source``, honor the last sort directive, and default ``size`` to
        the rest of the result window after ``from``.

        Raises:
            QueryBuildError: If ``from`` leaves no room in the result window.
        """
        filter_ = self.lower(condition)
        if count:
            return QueryRequest(index=index, count=True, filter=filter_)

        sort = sorts[-1].to_clause() if sorts else None
        from_ = range_.start if range_ is not None and range_.start else None
        size = range_.length if range_ is not None and range_.length else None
        if size is None:
            size = self.max_result_window - (from_ or 0)
            if size < 1:
                raise QueryBuildError(
                    f"Range start {from_} is outside the result window of {self.max_result_window}; "
                    "set an explicit length."
                )

        return QueryRequest(
            index=index,
            filter=filter_,
            include_source=False,
            sort=sort,
            from_=from_,
            size=size,
        )
