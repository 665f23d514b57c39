"""Shared test fixtures for the mbox reader test suite."""

from __future__ import annotations

import base64
import logging

import pytest
import structlog

from umbrella_mbox.config import ReaderConfig
from umbrella_mbox.message import Message
from umbrella_mbox.reader import MboxReader

FROM_LINE = "From sender@example.com Mon Jun  2 12:00:00 2025"
DEFAULT_SUBJECT = "mbox test"
DEFAULT_FROM = "Sender <sender@example.com>"
DEFAULT_DATE = "Mon, 02 Jun 2025 12:00:00 +0000"

PDF_PAYLOAD = b"%PDF-1.4 fake pdf content"


@pytest.fixture
def reader_config() -> ReaderConfig:
    return ReaderConfig(max_depth=8, log_level="DEBUG", log_json=False)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Drop handlers installed by setup_logging() and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


# ------------------------------------------------------------------
# Sample mbox builders
# ------------------------------------------------------------------


def _mbox(*messages: str) -> bytes:
    """Concatenate message texts into raw mbox bytes."""
    return "".join(messages).encode("utf-8")


def _envelope(
    *,
    subject: str = DEFAULT_SUBJECT,
    from_addr: str = DEFAULT_FROM,
    to_addr: str = "recipient@example.com",
    message_id: str = "<test-001@example.com>",
    date: str = DEFAULT_DATE,
    extra_headers: tuple[str, ...] = (),
) -> list[str]:
    return [
        FROM_LINE,
        f"From: {from_addr}",
        f"To: {to_addr}",
        f"Subject: {subject}",
        f"Date: {date}",
        f"Message-ID: {message_id}",
        *extra_headers,
    ]


def _b64(payload: bytes) -> str:
    return base64.encodebytes(payload).decode("ascii").strip()


def _build_simple_message(
    *,
    body: str = "Hello, World!\n",
    **headers,
) -> str:
    """A plain, non-MIME message."""
    return "\n".join([*_envelope(**headers), "", body])


def _build_reply_message(**headers) -> str:
    return _build_simple_message(
        message_id="<reply-001@example.com>",
        extra_headers=("In-Reply-To: <test-001@example.com>",),
        **headers,
    )


def _build_alternative_message(**headers) -> str:
    """multipart/alternative with a quoted-printable text part and an HTML part."""
    headers.setdefault("message_id", "<alt-001@example.com>")
    return "\n".join([
        *_envelope(**headers),
        "MIME-Version: 1.0",
        'Content-Type: multipart/alternative; boundary="alt-boundary"',
        "",
        "This is a multi-part message in MIME format.",
        "--alt-boundary",
        'Content-Type: text/plain; charset="utf-8"',
        "Content-Transfer-Encoding: quoted-printable",
        "",
        "Plain body with a soft=",
        " break and an =C3=A9",
        "--alt-boundary",
        'Content-Type: text/html; charset="utf-8"',
        "",
        "<p>HTML body</p>",
        "--alt-boundary--",
        "",
    ])


def _build_mixed_message(*, payload: bytes = PDF_PAYLOAD, **headers) -> str:
    """multipart/mixed with a text part and a base64 PDF attachment."""
    headers.setdefault("message_id", "<mixed-001@example.com>")
    return "\n".join([
        *_envelope(**headers),
        "MIME-Version: 1.0",
        "Content-Type: multipart/mixed;",
        ' boundary="===============0123456789=="',
        "",
        "--===============0123456789==",
        "Content-Type: text/plain",
        "",
        "See attached.",
        "--===============0123456789==",
        'Content-Type: application/pdf; name="report.pdf"',
        "Content-Transfer-Encoding: base64",
        'Content-Disposition: attachment; filename="report.pdf"',
        "",
        _b64(payload),
        "--===============0123456789==--",
        "",
    ])


def _build_mixedalt_message(
    *,
    alternative_epilog: str = "",
    attachment_body: str | None = None,
    **headers,
) -> str:
    """multipart/mixed holding a multipart/alternative and one attachment."""
    headers.setdefault("message_id", "<mixedalt-001@example.com>")
    lines = [
        *_envelope(**headers),
        "MIME-Version: 1.0",
        'Content-Type: multipart/mixed; boundary="mixed-boundary"',
        "",
        "--mixed-boundary",
        'Content-Type: multipart/alternative; boundary="alt-boundary"',
        "",
        "--alt-boundary",
        'Content-Type: text/plain; charset="utf-8"',
        "",
        "Plain body",
        "--alt-boundary",
        'Content-Type: text/html; charset="utf-8"',
        "",
        "<p>HTML body</p>",
        "--alt-boundary--",
    ]
    if alternative_epilog:
        lines.append(alternative_epilog)
    lines += [
        "",
        "--mixed-boundary",
        'Content-Type: application/pdf; name="report.pdf"',
        "Content-Transfer-Encoding: base64",
        'Content-Disposition: attachment; filename="report.pdf"',
        "",
        attachment_body if attachment_body is not None else _b64(PDF_PAYLOAD),
        "--mixed-boundary--",
        "",
    ]
    return "\n".join(lines)


@pytest.fixture
def simple_mbox() -> bytes:
    return _mbox(_build_simple_message())


@pytest.fixture
def mixedalt_mbox() -> bytes:
    return _mbox(_build_mixedalt_message())


@pytest.fixture
def archive_mbox() -> bytes:
    """Five messages covering every body shape."""
    return _mbox(
        _build_simple_message(),
        _build_alternative_message(),
        _build_mixed_message(),
        _build_mixedalt_message(),
        _build_reply_message(),
    )


def _parse(*messages: str) -> list[Message]:
    """Parse message texts into Message objects."""
    return list(MboxReader(_mbox(*messages)))
