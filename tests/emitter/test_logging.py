"""
Tests for structured logging setup.
"""

import io
import json

import pytest
import structlog

from xml_emitter import Emitter, InvalidPayload, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test logging configuration."""

    def test_json_output(self, capsys):
        configure_logging(level="DEBUG", log_format="json")
        get_logger("tests").info("Document written", bytes_written=12)

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "Document written"
        assert record["bytes_written"] == 12
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_console_output(self, capsys):
        configure_logging(level="INFO", log_format="console")
        get_logger("tests").info("Document written", root="feed")

        out = capsys.readouterr().out
        assert "Document written" in out
        assert "root=feed" in out

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", log_format="json")
        logger = get_logger("tests")
        logger.info("hidden")
        logger.warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_rejected_events_are_logged(self, capsys):
        configure_logging(level="DEBUG", log_format="json")
        emitter = Emitter()
        sink = io.BytesIO()
        emitter.emit_start_element(sink, "a")
        with pytest.raises(InvalidPayload):
            emitter.emit_cdata(sink, "]]>")

        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        rejected = [r for r in records if r["event"] == "Event rejected"]
        assert len(rejected) == 1
        assert rejected[0]["operation"] == "emit_cdata"
        assert rejected[0]["component"] == "Emitter"
        assert rejected[0]["kind"] == "invalid_payload"
