"""Integration test fixtures — Docker-based OpenSearch with mock entities.

Expects a cluster to be running, e.g.::

    docker run -d -p 9201:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Seed data is loaded into the ``node`` index on first use.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import pytest

OPENSEARCH_HOST = "http://localhost:9201"
INDEX = "node"

MOCK_ENTITIES: list[dict[str, Any]] = [
    {"id": "1", "type": "article", "status": 1, "title": "Solar Nowcasting", "created": 100, "sticky": True},
    {"id": "2", "type": "article", "status": 0, "title": "Wind Forecasting", "created": 200},
    {"id": "3", "type": "page", "status": 1, "title": "About Solar Panels", "created": 300, "sticky": False},
    {"id": "4", "type": "page", "status": 1, "title": "Contact", "created": 400},
    {"id": "5", "type": "event", "status": 1, "title": "Solar Summit Meeting", "created": 500},
]


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


def _seed_opensearch(host: str = OPENSEARCH_HOST, index: str = INDEX) -> None:
    with httpx.Client(base_url=host, timeout=30) as client:
        client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        mapping = {
            "mappings": {
                "properties": {
                    "type": {"type": "keyword"},
                    "status": {"type": "integer"},
                    "title": {"type": "keyword"},
                    "created": {"type": "integer"},
                    "sticky": {"type": "boolean"},
                }
            }
        }
        resp = client.put(f"/{index}", json=mapping)
        resp.raise_for_status()

        for entity in MOCK_ENTITIES:
            resp = client.put(f"/{index}/_doc/{entity['id']}", json=entity)
            resp.raise_for_status()

        client.post(f"/{index}/_refresh")


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    if not _wait_for_service(OPENSEARCH_HOST, timeout=10.0):
        pytest.skip(f"OpenSearch not available at {OPENSEARCH_HOST}")
    _seed_opensearch()
    return OPENSEARCH_HOST
