"""Tests for log renderers and setup."""

import json
import logging

from dataapi.observability.logging import (
    ConsoleFormatter,
    JSONFormatter,
    LogFormat,
    LogLevel,
    StructuredFormatter,
    get_logger,
    setup_logging,
    setup_testing_logging,
)


class TestJSONFormatter:
    """Test JSON rendering."""

    def test_renders_level_and_fields(self):
        """Test the event renders as JSON with the level added."""
        output = JSONFormatter()(
            None,
            "error",
            {"event": "Prometheus server failed", "component": "DataAPIMetrics", "port": 9100},
        )

        data = json.loads(output)
        assert data["level"] == "ERROR"
        assert data["event"] == "Prometheus server failed"
        assert data["port"] == 9100
        assert "timestamp" in data


class TestConsoleFormatter:
    """Test console rendering."""

    def test_plain_output(self):
        """Test output without colors."""
        output = ConsoleFormatter(colors=False, show_timestamp=False)(
            None,
            "info",
            {"event": "Starting metrics server", "component": "DataAPIMetrics", "port": 9100},
        )

        assert output == "INFO [DataAPIMetrics] Starting metrics server port=9100"


class TestStructuredFormatter:
    """Test key-value rendering."""

    def test_field_order(self):
        """Test leading keys come before free-form fields."""
        output = StructuredFormatter()(
            None,
            "warning",
            {"port": 9100, "event": "Metrics server already running", "component": "DataAPIMetrics"},
        )

        assert output == (
            "level=WARNING | component=DataAPIMetrics"
            " | message=Metrics server already running | port=9100"
        )

    def test_nested_values_as_json(self):
        """Test dict values are rendered as JSON."""
        output = StructuredFormatter()(None, "info", {"event": "x", "labels": {"quorum": "1"}})

        assert 'labels={"quorum": "1"}' in output


class TestSetupLogging:
    """Test logging setup."""

    def test_sets_root_level(self):
        """Test the stdlib root level follows the setting."""
        setup_logging(level=LogLevel.ERROR, format_type=LogFormat.STRUCTURED)

        assert logging.getLogger().level == logging.ERROR

        setup_testing_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_library_loggers_held_at_warning(self):
        """Test HTTP server and AWS client loggers stay quiet at DEBUG."""
        setup_logging(level=LogLevel.DEBUG, format_type=LogFormat.STRUCTURED)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("uvicorn.error").level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING

        setup_testing_logging()

    def test_reconfigure_replaces_handler(self):
        """Test repeated setup leaves exactly one root handler."""
        setup_logging(format_type=LogFormat.JSON)
        setup_testing_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_get_logger_binds(self):
        """Test loggers accept bound context."""
        logger = get_logger("dataapi.test").bind(component="DataAPIMetrics")

        logger.info("bound logger works")
