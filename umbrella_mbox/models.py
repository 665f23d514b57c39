"""Serializable summaries of parsed messages."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .message import Message, Part


class PartSummary(BaseModel):
    """Shape of one leaf part, without its body."""

    content_type: str = Field(description="Media type, empty when malformed or unknown")
    disposition: str = Field(description="Content-Disposition value, lower-cased")
    filename: str = Field(description="Attachment or inline filename, if any")
    size: int = Field(description="Raw (still encoded) body size in bytes")

    @classmethod
    def from_part(cls, part: Part) -> PartSummary:
        mt = part.content_type()
        return cls(
            content_type=mt.value if mt is not None else "",
            disposition=part.disposition(),
            filename=part.filename(),
            size=len(part.body),
        )


class MessageSummary(BaseModel):
    """One line of ``umbrella-mbox list --json`` output."""

    index: int = Field(description="1-based position of the message in the mbox")
    message_id: str = Field(description="Message-Id header value")
    date: datetime = Field(description="Date header in UTC (year 1 when unparseable)")
    sender: str = Field(description="Address extracted from From")
    to: list[str] = Field(default_factory=list, description="Addresses extracted from To")
    cc: list[str] = Field(default_factory=list, description="Addresses extracted from Cc")
    subject: str = Field(description="Subject header value")
    is_reply: bool = Field(description="True when In-Reply-To is present")
    is_multipart: bool = Field(description="True for MIME multipart messages")
    files: list[str] = Field(default_factory=list, description="Attachment filenames")
    parts: list[PartSummary] = Field(default_factory=list, description="Leaf parts")

    @classmethod
    def from_message(cls, index: int, message: Message) -> MessageSummary:
        return cls(
            index=index,
            message_id=message.message_id(),
            date=message.date(),
            sender=message.sender(),
            to=message.to(),
            cc=message.cc(),
            subject=message.subject(),
            is_reply=message.is_reply(),
            is_multipart=message.is_multipart(),
            files=message.files(),
            parts=[PartSummary.from_part(p) for p in message.parts],
        )
