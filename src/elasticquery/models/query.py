"""Query directive and compiled request models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SortDirection(str, Enum):
    """Sort order for a single field."""

    ASC = "ASC"
    DESC = "DESC"


class SortSpec(BaseModel):
    """One sort directive."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1, description="Field to sort on")
    direction: SortDirection = Field(default=SortDirection.ASC, description="ASC or DESC")

    def to_clause(self) -> dict[str, Any]:
        return {self.field: {"order": self.direction.value.lower()}}


class RangeSpec(BaseModel):
    """Pagination window for search-mode execution."""

    model_config = ConfigDict(frozen=True)

    start: int | None = Field(default=None, ge=0, description="Offset of the first hit")
    length: int | None = Field(default=None, ge=1, description="Maximum number of hits")


class QueryRequest(BaseModel):
    """A compiled search-cluster request.

    Built fresh for every execution and never mutated afterwards. Count
    requests carry only ``index`` and ``filter``.
    """

    model_config = ConfigDict(frozen=True)

    index: str = Field(description="Target index (the entity type identifier)")
    count: bool = Field(default=False, description="Whether this is a count request")
    filter: dict[str, Any] = Field(default_factory=dict, description="Compiled bool clause")
    include_source: bool | None = Field(default=None, description="Value of _source, omitted when None")
    sort: dict[str, Any] | None = Field(default=None, description="Sort clause")
    from_: int | None = Field(default=None, description="Offset of the first hit")
    size: int | None = Field(default=None, description="Resolved result cap")

    @property
    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.include_source is not None:
            body["_source"] = self.include_source
        body["query"] = {"bool": self.filter}
        if self.sort is not None:
            body["sort"] = self.sort
        if self.from_ is not None:
            body["from"] = self.from_
        if self.size is not None:
            body["size"] = self.size
        return body

    def to_params(self) -> dict[str, Any]:
        """Render the request as the nested-map document sent to the cluster."""
        return {"index": self.index, "body": self.body}
