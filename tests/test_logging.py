"""Tests for designfields logging utilities."""

import json
import logging

import pytest

from designfields.lib.errors import DocumentError, InvalidInputError
from designfields.lib.logging import JSONFormatter, setup_logging


def _record(msg="Test message", args=(), exc_info=None, level=logging.INFO):
    return logging.LogRecord(
        name="designfields.lib.store",
        level=level,
        pathname="/test/store.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_format(self):
        """Should format log record as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "designfields.lib.store"
        assert data["message"] == "Test message"
        assert data["timestamp"].endswith("Z")

    def test_format_with_args(self):
        """Should format message with arguments."""
        record = _record("Added field %s (%s)", ("field_size_1", "dropdown"))

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Added field field_size_1 (dropdown)"

    def test_format_with_exception(self):
        """Should include exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            import sys

            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record(exc_info=exc_info, level=logging.ERROR)))

        assert "ValueError" in data["exception"]

    def test_builder_error_lifted(self):
        """A FieldConfigError payload exposes its field id and type at top level."""
        error = InvalidInputError("'Green' is not an option of this field", field_id="field_color_1")
        record = _record("Command set-default rejected", level=logging.DEBUG)
        record.error = error.to_dict()

        data = json.loads(JSONFormatter().format(record))

        assert data["field_id"] == "field_color_1"
        assert data["error_type"] == "InvalidInputError"
        assert data["error"]["message"] == "'Green' is not an option of this field"

    def test_error_without_field(self):
        record = _record()
        record.error = DocumentError("Field document not found", path="/tmp/f.json").to_dict()

        data = json.loads(JSONFormatter().format(record))

        assert data["error_type"] == "DocumentError"
        assert "field_id" not in data

    def test_other_extra_attributes(self):
        """Should include extra fields without overriding core keys."""
        record = _record()
        record.command = "add-option"

        data = json.loads(JSONFormatter().format(record))

        assert data["command"] == "add-option"
        assert data["message"] == "Test message"


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_default_setup(self):
        setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_verbose_overrides_level(self):
        setup_logging(verbose=True, level="ERROR")

        assert logging.getLogger().level == logging.DEBUG

    def test_named_level(self):
        setup_logging(level="warning")

        assert logging.getLogger().level == logging.WARNING

    def test_json_format_setup(self):
        """Should use JSON formatter when json_format=True."""
        setup_logging(json_format=True)

        handlers = logging.getLogger().handlers
        assert any(isinstance(h.formatter, JSONFormatter) for h in handlers)

    def test_log_file_setup(self, tmp_path):
        """Should add file handler when log_file specified."""
        log_file = tmp_path / "builder.log"
        setup_logging(log_file=str(log_file))

        logging.getLogger("designfields").info("Test message")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Test message" in log_file.read_text(encoding="utf-8")
