"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (ELASTICQUERY_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from elasticquery.core.compiler import DEFAULT_MAX_RESULT_WINDOW


class ClusterSettings(BaseModel):
    """Search cluster connection configuration."""

    hosts: list[str] = Field(default_factory=lambda: ["https://localhost:9200"], description="Cluster node URLs")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class QuerySettings(BaseModel):
    """Query compilation configuration."""

    max_result_window: int = Field(
        default=DEFAULT_MAX_RESULT_WINDOW,
        ge=1,
        description="Result cap when no explicit range length is set (the index's max_result_window)",
    )
    warn_on_leading_wildcard: bool = Field(
        default=True,
        description="Log a warning when ENDS_WITH / CONTAINS compile to leading-wildcard queries",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the ELASTICQUERY_
    prefix. Nested settings use double underscores:

    Example:
        ELASTICQUERY_CLUSTER__HOSTS='["http://es1:9200", "http://es2:9200"]'
        ELASTICQUERY_QUERY__MAX_RESULT_WINDOW=50000
        ELASTICQUERY_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "ELASTICQUERY_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    cluster: ClusterSettings = Field(default_factory=ClusterSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values given in the YAML file take precedence over environment
        variables; anything it leaves out still falls back to the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
