"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from elasticquery.config.settings import ObservabilitySettings
from elasticquery.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_installs_single_stderr_handler(self) -> None:
        setup_logging(ObservabilitySettings(log_level="warning"))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.WARNING

    def test_json_renders_stdlib_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_format="json"))
        logging.getLogger("elasticquery.test").info("Found %d '%s' entities", 2, "node")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Found 2 'node' entities"
        assert event["level"] == "info"
        assert event["logger"] == "elasticquery.test"

    def test_defaults_without_settings(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.INFO
