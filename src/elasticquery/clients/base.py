"""Base cluster client — Abstract interface to the search cluster.

Entity queries depend only on this interface. A client takes a compiled
``QueryRequest`` verbatim and returns the cluster's raw response:

  - ``search()`` -> ``{"hits": {"hits": [{"_id": ...}, ...]}, ...}``
  - ``count()``  -> ``{"count": <int>, ...}``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from elasticquery.models.query import QueryRequest


class ClusterClient(ABC):
    """Abstract base class for search cluster clients.

    Implementations own transport, authentication, retries and timeouts.
    Errors should be raised as ``ClusterError`` subclasses.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique client name (e.g., 'opensearch')."""

    @abstractmethod
    def search(self, request: QueryRequest) -> dict[str, Any]:
        """Run a search request.

        Args:
            request: A compiled search-mode request.

        Returns:
            The raw search response.
        """

    @abstractmethod
    def count(self, request: QueryRequest) -> dict[str, Any]:
        """Run a count request.

        Args:
            request: A compiled count-mode request.

        Returns:
            The raw count response.
        """

    def close(self) -> None:  # noqa: B027
        """Release transport resources. No-op by default."""

    def __enter__(self) -> ClusterClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
