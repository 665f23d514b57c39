"""Tests for umbrella_mbox.logging."""

from __future__ import annotations

import io
import json
import logging

import pytest
import structlog

from umbrella_mbox.errors import MessageParseError
from umbrella_mbox.logging import setup_logging
from umbrella_mbox.reader import MboxReader


def _records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestSetupLogging:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("Warning", logging.WARNING)],
    )
    def test_root_level(self, level: str, expected: int):
        setup_logging(level=level)
        assert logging.getLogger().level == expected

    def test_default_level_is_warning(self):
        setup_logging(json=True)
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler_after_repeated_setup(self):
        logging.getLogger().addHandler(logging.StreamHandler())
        setup_logging()
        setup_logging(json=True)
        assert len(logging.getLogger().handlers) == 1


class TestLogOutput:
    def test_json_records_go_to_stream(self):
        stream = io.StringIO()
        setup_logging(json=True, level="DEBUG", stream=stream)
        structlog.get_logger("mbox_test").info("mbox_test_event", key="value")
        (record,) = _records(stream)
        assert record["event"] == "mbox_test_event"
        assert record["key"] == "value"
        assert record["level"] == "info"

    def test_console_records_are_plain_text(self):
        stream = io.StringIO()
        setup_logging(level="INFO", stream=stream)
        structlog.get_logger("mbox_test").info("mbox_console_event", key="value")
        line = stream.getvalue()
        assert "mbox_console_event" in line
        assert "key=value" in line
        assert "\x1b[" not in line

    def test_level_filters_debug_progress(self):
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)
        assert len(list(MboxReader(b"From a@b\nSubject: x\n\nbody\n"))) == 1
        assert stream.getvalue() == ""

    def test_parse_failure_is_logged(self):
        stream = io.StringIO()
        setup_logging(json=True, stream=stream)
        with pytest.raises(MessageParseError):
            MboxReader(b"Subject: no envelope\n\nbody\n").read()
        (record,) = _records(stream)
        assert record["event"] == "mbox_parse_failed"
        assert record["index"] == 1
        assert record["level"] == "warning"
