"""Cluster clients — Transports that run compiled requests.

Built-in clients:
  - opensearch: OpenSearch v2+ / Elasticsearch-compatible clusters

Implement ``ClusterClient`` to connect your own transport.
"""

from elasticquery.clients.base import ClusterClient
from elasticquery.clients.opensearch import OpenSearchClusterClient

__all__ = ["ClusterClient", "OpenSearchClusterClient"]
