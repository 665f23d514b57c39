"""Message and Part records with their semantic accessors.

Accessors are computed from the headers on every call; nothing is cached,
so header rewrites through :class:`~umbrella_mbox.header.Header` are
reflected immediately.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .decoder import decode_body
from .errors import MediaTypeError
from .header import Header, MediaType, parse_media_type, parse_value_field

HDR_MIME_VERSION = "Mime-Version"
HDR_CONTENT_TYPE = "Content-Type"
HDR_CONTENT_DISPOSITION = "Content-Disposition"
HDR_CONTENT_ENCODING = "Content-Transfer-Encoding"
HDR_DATE = "Date"
HDR_FROM = "From"
HDR_TO = "To"
HDR_CC = "Cc"
HDR_SUBJECT = "Subject"
HDR_MESSAGE_ID = "Message-Id"
HDR_IN_REPLY_TO = "In-Reply-To"

MULTIPART = "multipart"
DISPOSITION_ATTACHMENT = "attachment"
DISPOSITION_INLINE = "inline"


def default_media_type() -> MediaType:
    """RFC 2045 section 5.2: a part without Content-Type is plain US-ASCII text."""
    return MediaType("text", "plain", {"charset": "us-ascii"})


ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)

_TIME_PATTERN = "%a, %d %b %Y %H:%M:%S %z"
_ZONE_COMMENT = re.compile(r"\s*\([^()]*\)\s*$")


def parse_time(value: str) -> datetime:
    """Parse an RFC 2822 date, with or without a trailing ``(ZONE)`` comment.

    Returns the time in UTC, or :data:`ZERO_TIME` when the value does not
    match.
    """
    value = value.strip()
    for candidate in (value, _ZONE_COMMENT.sub("", value)):
        try:
            return datetime.strptime(candidate, _TIME_PATTERN).astimezone(UTC)
        except ValueError:
            continue
    return ZERO_TIME


def parse_address(value: str) -> str:
    """Return the ``<...>`` part of an address, or the value unchanged."""
    start = value.find("<")
    if start < 0:
        return value
    value = value[start + 1 :]
    end = value.find(">")
    if end > 0:
        value = value[:end]
    return value


def parse_address_list(value: str) -> list[str]:
    if not value:
        return []
    return [parse_address(segment.strip()) for segment in value.split(",")]


def _media_type(header: Header, implicit: bool = True) -> MediaType | None:
    value = header.get(HDR_CONTENT_TYPE)
    if not value:
        return default_media_type() if implicit else None
    try:
        return parse_media_type(value)
    except MediaTypeError:
        return None


@dataclass
class Part:
    """A leaf MIME part: its own headers and its raw, still-encoded body.

    ``implicit_type`` is cleared on the synthetic part that carries the body
    of a non-multipart message.  That part has no headers of its own, so a
    missing Content-Type there says nothing about the body.
    """

    header: Header = field(default_factory=Header)
    body: bytes = b""
    implicit_type: bool = True

    def content_type(self) -> MediaType | None:
        """Parsed Content-Type.

        ``None`` when the header is malformed, or absent on a part without
        an implicit type.
        """
        return _media_type(self.header, self.implicit_type)

    def content(self) -> bytes:
        """Body decoded according to Content-Transfer-Encoding."""
        return decode_body(self.header.get(HDR_CONTENT_ENCODING), self.body)

    def text(self) -> bytes:
        return self._decoded_if("text", "plain")

    def html(self) -> bytes:
        return self._decoded_if("text", "html")

    def _decoded_if(self, main_type: str, sub_type: str) -> bytes:
        mt = self.content_type()
        if mt is None or (mt.main_type, mt.sub_type) != (main_type, sub_type):
            return b""
        return self.content()

    def disposition(self) -> str:
        value, _ = parse_value_field(self.header.get(HDR_CONTENT_DISPOSITION))
        return value.lower()

    def filename(self) -> str:
        """Filename of an attachment or inline part, ``""`` for anything else.

        Content-Disposition's ``filename`` parameter wins over the ``name``
        parameter of Content-Type.
        """
        value, params = parse_value_field(self.header.get(HDR_CONTENT_DISPOSITION))
        if value.lower() not in (DISPOSITION_ATTACHMENT, DISPOSITION_INLINE):
            return ""
        name = (params or {}).get("filename", "")
        if not name:
            mt = self.content_type()
            name = mt.params.get("name", "") if mt is not None else ""
        return name

    def is_attachment(self) -> bool:
        return self.disposition() == DISPOSITION_ATTACHMENT

    def is_inline(self) -> bool:
        return self.disposition() == DISPOSITION_INLINE

    def is_multipart(self) -> bool:
        mt = self.content_type()
        return mt is not None and mt.main_type == MULTIPART


@dataclass
class Message:
    """One message of an mbox stream.

    ``parts`` always holds at least one leaf part once the message has been
    read: the MIME leaves in document order, or a single synthetic part
    carrying the whole body of a non-multipart message.
    """

    header: Header = field(default_factory=Header)
    parts: list[Part] = field(default_factory=list)
    envelope: str = ""

    def date(self) -> datetime:
        return parse_time(self.header.get(HDR_DATE))

    def subject(self) -> str:
        return self.header.get(HDR_SUBJECT)

    def message_id(self) -> str:
        return self.header.get(HDR_MESSAGE_ID)

    def sender(self) -> str:
        return parse_address(self.header.get(HDR_FROM))

    def to(self) -> list[str]:
        return parse_address_list(self.header.get(HDR_TO))

    def cc(self) -> list[str]:
        return parse_address_list(self.header.get(HDR_CC))

    def is_mime(self) -> bool:
        return self.header.has(HDR_MIME_VERSION)

    def content_type(self) -> MediaType | None:
        return _media_type(self.header)

    def is_multipart(self) -> bool:
        if not self.is_mime():
            return False
        mt = self.content_type()
        return mt is not None and mt.main_type == MULTIPART

    def is_reply(self) -> bool:
        return self.header.has(HDR_IN_REPLY_TO)

    def files(self) -> list[str]:
        return [name for part in self.parts if (name := part.filename())]

    def filter(self, predicate: Callable[[Header], bool]) -> list[Part]:
        """Return the parts whose headers satisfy *predicate*."""
        return [part for part in self.parts if predicate(part.header)]
