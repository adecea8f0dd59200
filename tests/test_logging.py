"""Tests for logging configuration."""

import io
import json
import logging

import pytest
import structlog

from addressimport.utils.logging import configure_logging, get_logger, level_number, log_context


@pytest.fixture
def stream() -> io.StringIO:
    """Log destination, restored to structlog defaults afterwards."""
    buffer = io.StringIO()
    yield buffer
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_filters_and_json(self, stream: io.StringIO) -> None:
        """Test that lines below the level are dropped and the rest is JSON."""
        configure_logging(level="warning", json_output=True, stream=stream)
        log = get_logger("tests.level")

        log.info("not shown")
        log.warning("Load step failed", table="lgus", batch=None)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["event"] == "Load step failed"
        assert entry["level"] == "warning"
        assert entry["table"] == "lgus"
        assert "timestamp" in entry

    def test_context_is_merged(self, stream: io.StringIO) -> None:
        """Test that log_context values appear on lines inside the block only."""
        configure_logging(json_output=True, stream=stream)
        log = get_logger("tests.context")

        with log_context(source="psgc.csv"):
            log.info("inside")
        log.info("outside")

        inside, outside = (json.loads(line) for line in stream.getvalue().splitlines())
        assert inside["source"] == "psgc.csv"
        assert "source" not in outside

    def test_console_output(self, stream: io.StringIO) -> None:
        """Test the plain console renderer."""
        configure_logging(level="DEBUG", stream=stream)
        get_logger("tests.console").debug("Running load step", step="clear barangays")

        text = stream.getvalue()
        assert "Running load step" in text
        assert "clear barangays" in text
        assert "\x1b[" not in text


def test_level_number() -> None:
    """Test level name lookup."""
    assert level_number("debug") == logging.DEBUG
    assert level_number("ERROR") == logging.ERROR
    assert level_number("chatty") == logging.INFO
