"""Tests for logging setup."""

import logging

import pytest
import structlog

from py_climategrid.utils.logging import configure_logging


class TestConfigureLogging:
    """Test structlog configuration."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    @pytest.mark.parametrize("fmt", ["json", "console"])
    def test_configures_renderer(self, fmt):
        configure_logging(level="debug", fmt=fmt)

        processors = structlog.get_config()["processors"]
        renderer = processors[-1]
        if fmt == "json":
            assert isinstance(renderer, structlog.processors.JSONRenderer)
        else:
            assert isinstance(renderer, structlog.dev.ConsoleRenderer)
        assert logging.getLogger().level == logging.DEBUG

    def test_emits_through_stdlib(self, caplog):
        configure_logging(level="INFO", fmt="json")

        with caplog.at_level(logging.INFO):
            structlog.get_logger("py_climategrid.test").info("Built biome pool", biomes=3)

        assert any("Built biome pool" in record.getMessage() for record in caplog.records)
