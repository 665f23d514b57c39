"""Tests for umbrella_mbox.models."""

from __future__ import annotations

import json

from tests.conftest import (
    _build_mixedalt_message,
    _build_simple_message,
    _parse,
)

from umbrella_mbox.header import Header
from umbrella_mbox.message import Part
from umbrella_mbox.models import MessageSummary, PartSummary


class TestPartSummary:
    def test_attachment(self):
        part = Part(
            header=Header([
                ("Content-Type", 'application/pdf; name="a.pdf"'),
                ("Content-Disposition", 'Attachment; filename="a.pdf"'),
            ]),
            body=b"JVBERi0=\n",
        )
        summary = PartSummary.from_part(part)
        assert summary.content_type == "application/pdf"
        assert summary.disposition == "attachment"
        assert summary.filename == "a.pdf"
        assert summary.size == 9

    def test_malformed_content_type(self):
        summary = PartSummary.from_part(Part(header=Header([("Content-Type", "bogus")])))
        assert summary.content_type == ""
        assert summary.size == 0

    def test_headerless_part_is_plain_text(self):
        assert PartSummary.from_part(Part(body=b"x")).content_type == "text/plain"


class TestMessageSummary:
    def test_from_multipart_message(self):
        (message,) = _parse(_build_mixedalt_message(to_addr="a@example.com, B <b@example.com>"))
        summary = MessageSummary.from_message(3, message)
        assert summary.index == 3
        assert summary.message_id == "<mixedalt-001@example.com>"
        assert summary.sender == "sender@example.com"
        assert summary.to == ["a@example.com", "b@example.com"]
        assert summary.cc == []
        assert summary.is_multipart
        assert not summary.is_reply
        assert summary.files == ["report.pdf"]
        assert [p.content_type for p in summary.parts] == [
            "text/plain",
            "text/html",
            "application/pdf",
        ]

    def test_json_round_trip(self):
        (message,) = _parse(_build_simple_message())
        data = json.loads(MessageSummary.from_message(1, message).model_dump_json())
        assert data["index"] == 1
        assert data["subject"] == "mbox test"
        assert data["date"].startswith("2025-06-02T12:00:00")
        assert data["parts"] == [
            {"content_type": "", "disposition": "", "filename": "", "size": 14}
        ]
