"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from elasticquery.clients.base import ClusterClient
from elasticquery.config.settings import Settings
from elasticquery.core.compiler import QueryCompiler
from elasticquery.core.query import EntityQuery


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        cluster={"hosts": ["http://localhost:9201"], "verify_certs": False},
    )


@pytest.fixture
def compiler() -> QueryCompiler:
    return QueryCompiler()


@pytest.fixture
def search_response() -> dict[str, Any]:
    """Search response with a duplicate hit for ``a``."""
    return {
        "took": 3,
        "hits": {
            "total": {"value": 3, "relation": "eq"},
            "hits": [
                {"_index": "node", "_id": "a", "_score": None},
                {"_index": "node", "_id": "b", "_score": None},
                {"_index": "node", "_id": "a", "_score": None},
            ],
        },
    }


@pytest.fixture
def mock_client(search_response: dict[str, Any]) -> MagicMock:
    """Cluster client mock answering both search and count."""
    client = MagicMock(spec=ClusterClient)
    client.search.return_value = search_response
    client.count.return_value = {"count": 42, "_shards": {"total": 1, "successful": 1}}
    return client


@pytest.fixture
def query(mock_client: MagicMock) -> EntityQuery:
    return EntityQuery("node", mock_client)
