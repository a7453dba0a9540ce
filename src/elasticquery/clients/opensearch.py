"""OpenSearch cluster client — Runs compiled requests through ``opensearch-py``.

OpenSearch keeps the Elasticsearch query DSL, so compiled requests are
sent unchanged to the ``_search`` and ``_count`` endpoints.

Install the optional dependency::

    pip install elasticquery[opensearch]
    # or: pip install opensearch-py
"""

from __future__ import annotations

import logging
from typing import Any

from elasticquery.clients.base import ClusterClient
from elasticquery.exceptions import ClusterConnectionError, ClusterQueryError, ConfigurationError
from elasticquery.models.query import QueryRequest

logger = logging.getLogger(__name__)


class OpenSearchClusterClient(ClusterClient):
    """Cluster client for OpenSearch (v2+) and compatible Elasticsearch clusters.

    The underlying ``OpenSearch`` client is created on first use.

    Args:
        hosts: List of node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        timeout: Per-request timeout in seconds.
        **kwargs: Additional keyword arguments forwarded to ``OpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["https://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._timeout = timeout
        self._extra_kwargs = kwargs
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: Any) -> OpenSearchClusterClient:
        """Create a client from ``ClusterSettings``."""
        return cls(
            hosts=list(settings.hosts),
            username=settings.username,
            password=settings.password,
            verify_certs=settings.verify_certs,
            timeout=settings.timeout,
        )

    @property
    def name(self) -> str:
        return "opensearch"

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        try:
            from opensearchpy import OpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install elasticquery[opensearch]"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)
        client_kwargs.update(self._extra_kwargs)

        self._client = OpenSearch(**client_kwargs)
        logger.info("Created OpenSearch client for %s", ", ".join(self._hosts))
        return self._client

    def close(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            self._client.close()
            self._client = None

    # ── Requests ─────────────────────────────────────────────────────────

    def search(self, request: QueryRequest) -> dict[str, Any]:
        """Run a search request against ``_search``."""
        return self._call("search", request)

    def count(self, request: QueryRequest) -> dict[str, Any]:
        """Run a count request against ``_count``."""
        return self._call("count", request)

    def _call(self, method: str, request: QueryRequest) -> dict[str, Any]:
        client = self._get_client()
        params = request.to_params()
        try:
            response = getattr(client, method)(index=params["index"], body=params["body"])
        except Exception as e:
            if "ConnectionError" in type(e).__name__:
                raise ClusterConnectionError(f"Failed to reach OpenSearch: {e}") from e
            raise ClusterQueryError(f"OpenSearch {method} on '{request.index}' failed: {e}") from e
        return dict(response)
