"""Tests for structured logging."""

import json
import logging

from multichat.logging_config import JSONFormatter, log_context


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="multichat.test",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg="Unknown block type, skipping message set",
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_format(self):
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "multichat.test"
        assert data["message"] == "Unknown block type, skipping message set"
        assert "context" not in data

    def test_context(self):
        """Test that log_context() fields end up in the output."""
        record = self._record(**log_context(message_set_id="set1", block_type="canvas"))

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"message_set_id": "set1", "block_type": "canvas"}
