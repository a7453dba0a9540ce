"""CLI entry point — Compile or run a declarative entity query file.

Query files are JSON or YAML::

    index: node
    conjunction: AND
    conditions:
      - {field: status, value: 1}
      - conjunction: OR
        conditions:
          - {field: type, operator: IN, value: [article, page]}
          - {field: title, operator: CONTAINS, value: solar}
    sort: [[created, DESC]]
    range: {start: 0, length: 20}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from elasticquery.exceptions import EntityQueryError, MalformedConditionError

if TYPE_CHECKING:
    from elasticquery.clients.base import ClusterClient
    from elasticquery.config.settings import Settings
    from elasticquery.core.query import EntityQuery

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit code.
    """
    parser = argparse.ArgumentParser(
        prog="elasticquery",
        description="elasticquery — compile entity queries to search-cluster bool queries",
    )
    parser.add_argument(
        "command",
        choices=["compile", "count", "search"],
        help="compile: print the request; count / search: run it against the cluster",
    )
    parser.add_argument("file", type=str, help="Path to a JSON or YAML query file")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--index",
        "-i",
        type=str,
        default=None,
        help="Index / entity type (overrides the query file)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"elasticquery {_get_version()}",
    )

    args = parser.parse_args(argv)

    from elasticquery.config.settings import Settings
    from elasticquery.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    try:
        spec = load_query_file(args.file)
        index = args.index or spec.get("index")
        if not index:
            print("Error: No index given (use --index or an 'index' key)", file=sys.stderr)
            return 1

        if args.command == "compile":
            query = build_query(spec, index, client=None, settings=settings)
            print(json.dumps(query.debug().to_params(), indent=2, default=str))
            return 0

        from elasticquery.clients.opensearch import OpenSearchClusterClient

        with OpenSearchClusterClient.from_settings(settings.cluster) as client:
            query = build_query(spec, index, client=client, settings=settings)
            query.count(args.command == "count")
            result = query.execute()
        if isinstance(result, dict):
            for entity_id in result:
                print(entity_id)
        else:
            print(result)
        return 0
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except EntityQueryError as e:
        logger.error("Query failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2


def load_query_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON (``.json``) or YAML query file into a mapping."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Query file not found: {file_path}")

    with open(file_path) as f:
        if file_path.suffix.lower() == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise MalformedConditionError(f"Invalid JSON in {file_path}: {e}") from e
        else:
            import yaml  # type: ignore[import-untyped]

            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise MalformedConditionError(f"Invalid YAML in {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise MalformedConditionError(f"Query file {file_path} must contain a mapping")
    return data


def build_query(
    spec: dict[str, Any],
    index: str,
    client: ClusterClient | None,
    settings: Settings | None = None,
) -> EntityQuery:
    """Build an ``EntityQuery`` from the declarative query form."""
    from elasticquery.core.query import EntityQuery
    from elasticquery.models.condition import ConditionGroup

    group = ConditionGroup.from_dict(spec)
    query = EntityQuery(index, client, conjunction=group.conjunction, settings=settings)
    for member in group.members:
        query.condition_group.add(member)

    for item in spec.get("sort") or []:
        if isinstance(item, str):
            query.sort(item)
        elif isinstance(item, dict):
            query.sort(item.get("field", ""), item.get("direction", "ASC"))
        elif isinstance(item, (list, tuple)) and 1 <= len(item) <= 2:
            query.sort(*item)
        else:
            raise MalformedConditionError(f"Invalid sort entry: {item!r}")

    range_spec = spec.get("range")
    if range_spec:
        if not isinstance(range_spec, dict):
            raise MalformedConditionError(f"Invalid range: {range_spec!r}")
        query.range(range_spec.get("start"), range_spec.get("length"))

    if spec.get("count"):
        query.count()
    return query


def _get_version() -> str:
    """Get the package version."""
    try:
        from elasticquery import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
