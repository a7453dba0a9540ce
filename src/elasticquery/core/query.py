"""Entity query — Builds, compiles and executes a filtered entity lookup.

An ``EntityQuery`` collects a condition tree and sort / range / count
directives, then on ``execute()``:
  1. Compiles a fresh ``QueryRequest`` from the current tree and directives
  2. Sends it to the cluster client's ``count`` or ``search``
  3. Returns the count, or the matching identifiers in hit order
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from elasticquery.core.compiler import QueryCompiler
from elasticquery.exceptions import ClusterQueryError, QueryBuildError
from elasticquery.models.condition import ConditionGroup, Conjunction, Operator
from elasticquery.models.query import QueryRequest, RangeSpec, SortDirection, SortSpec

if TYPE_CHECKING:
    from elasticquery.clients.base import ClusterClient
    from elasticquery.config.settings import Settings

logger = logging.getLogger(__name__)


class EntityQuery:
    """Query for entity identifiers of one entity type.

    Example:
        >>> query = EntityQuery("node", client)
        >>> query.condition("status", 1).condition("type", ["article", "page"], "IN")
        >>> group = query.or_condition_group().condition("promote", 1).exists("sticky")
        >>> ids = query.condition(group).sort("created", "DESC").range(0, 20).execute()

    Args:
        entity_type: Entity type identifier, used as the index name.
        client: Cluster client that runs the compiled requests.
        conjunction: Conjunction of the top-level condition group.
        settings: Optional settings for the result window and warnings.
    """

    def __init__(
        self,
        entity_type: str,
        client: ClusterClient,
        conjunction: Conjunction | str = Conjunction.AND,
        settings: Settings | None = None,
    ) -> None:
        if not entity_type:
            raise QueryBuildError("entity_type must not be empty")
        self.entity_type = entity_type
        self._client = client
        self._condition = ConditionGroup(conjunction=conjunction)
        self._sorts: list[SortSpec] = []
        self._range: RangeSpec | None = None
        self._count = False

        if settings is not None:
            self._compiler = QueryCompiler(
                max_result_window=settings.query.max_result_window,
                warn_on_leading_wildcard=settings.query.warn_on_leading_wildcard,
            )
        else:
            self._compiler = QueryCompiler()

    @property
    def conjunction(self) -> Conjunction:
        return self._condition.conjunction

    @property
    def condition_group(self) -> ConditionGroup:
        """The top-level condition group."""
        return self._condition

    # ── Conditions ───────────────────────────────────────────────────────

    def condition(
        self,
        field: str | ConditionGroup,
        value: Any = None,
        operator: Operator | str | None = None,
    ) -> EntityQuery:
        """Add a condition (or a nested group) to the top-level group."""
        self._condition.condition(field, value, operator)
        return self

    def exists(self, field: str) -> EntityQuery:
        self._condition.exists(field)
        return self

    def not_exists(self, field: str) -> EntityQuery:
        self._condition.not_exists(field)
        return self

    def and_condition_group(self) -> ConditionGroup:
        """Create a detached AND group, to be added back via ``condition()``."""
        return ConditionGroup(conjunction=Conjunction.AND)

    def or_condition_group(self) -> ConditionGroup:
        """Create a detached OR group, to be added back via ``condition()``."""
        return ConditionGroup(conjunction=Conjunction.OR)

    # ── Directives ───────────────────────────────────────────────────────

    def sort(self, field: str, direction: SortDirection | str = SortDirection.ASC) -> EntityQuery:
        """Add a sort directive. Only the last one is applied to the request."""
        if isinstance(direction, str):
            direction = direction.upper()
        try:
            self._sorts.append(SortSpec(field=field, direction=direction))
        except ValidationError as e:
            raise QueryBuildError(f"Invalid sort on '{field}': {e}") from e
        return self

    def range(self, start: int | None = None, length: int | None = None) -> EntityQuery:
        """Restrict search results to ``length`` hits starting at ``start``.

        Calling with no arguments clears the range.
        """
        if start is None and length is None:
            self._range = None
            return self
        try:
            self._range = RangeSpec(start=start, length=length)
        except ValidationError as e:
            raise QueryBuildError(f"Invalid range start={start!r} length={length!r}: {e}") from e
        return self

    def count(self, count: bool = True) -> EntityQuery:
        """Switch between count mode and search mode."""
        self._count = count
        return self

    @property
    def sorts(self) -> list[SortSpec]:
        return list(self._sorts)

    @property
    def is_count(self) -> bool:
        return self._count

    # ── Execution ────────────────────────────────────────────────────────

    def debug(self) -> QueryRequest:
        """Compile the request without executing it."""
        return self._build_request()

    def get_result(self) -> dict[str, Any]:
        """Compile and run the request, returning the raw cluster response."""
        request = self._build_request()
        if request.count:
            return self._client.count(request)
        return self._client.search(request)

    def execute(self) -> int | dict[str, str]:
        """Run the query.

        Returns:
            In count mode, the cluster's count. Otherwise the matching
            identifiers keyed by themselves, in hit order with duplicates
            collapsed onto their first occurrence.

        Raises:
            MalformedConditionError: If the tree cannot be compiled.
            UnsupportedOperatorError: If a condition has no lowering.
            ClusterError: If the cluster client fails.
        """
        start = time.monotonic()
        result = self.get_result()
        took_ms = int((time.monotonic() - start) * 1000)

        if self._count:
            try:
                count = result["count"]
            except (KeyError, TypeError) as e:
                raise ClusterQueryError(f"Count response for '{self.entity_type}' has no 'count'") from e
            logger.info("Counted %s '%s' entities in %dms", count, self.entity_type, took_ms)
            return count

        try:
            hits = result["hits"]["hits"]
        except (KeyError, TypeError) as e:
            raise ClusterQueryError(f"Search response for '{self.entity_type}' has no hits") from e

        ids: dict[str, str] = {}
        for hit in hits:
            ids.setdefault(hit["_id"], hit["_id"])
        logger.info("Found %d '%s' entities in %dms", len(ids), self.entity_type, took_ms)
        return ids

    def _build_request(self) -> QueryRequest:
        return self._compiler.build_request(
            self.entity_type,
            self._condition,
            sorts=self._sorts,
            range_=self._range,
            count=self._count,
        )
