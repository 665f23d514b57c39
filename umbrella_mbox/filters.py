"""Message selection predicates used by the ``list`` command.

Address matchers use a small expression syntax::

    alice@example.com     substring match
    ^alice                prefix match
    example.com$          suffix match
    =alice@example.com    exact match
    !spam.example.com$    negation of any of the above

All comparisons are case-insensitive and run against extracted addresses
(the ``<...>`` part when present).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .message import ZERO_TIME, Message


class MatchMode(str, Enum):
    """How an address pattern is compared."""

    SUBSTRING = "substring"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    EXACT = "exact"


class AddressMatcher(BaseModel):
    """A single parsed address expression."""

    model_config = {"frozen": True}

    pattern: str = Field(description="Lower-cased text to look for")
    mode: MatchMode = Field(default=MatchMode.SUBSTRING, description="Comparison mode")
    negate: bool = Field(default=False, description="Invert the result")

    @classmethod
    def parse(cls, expr: str) -> AddressMatcher:
        expr = expr.strip()
        negate = expr.startswith("!")
        if negate:
            expr = expr[1:]
        if expr.startswith("^"):
            mode, pattern = MatchMode.PREFIX, expr[1:]
        elif expr.startswith("="):
            mode, pattern = MatchMode.EXACT, expr[1:]
        elif expr.endswith("$"):
            mode, pattern = MatchMode.SUFFIX, expr[:-1]
        else:
            mode, pattern = MatchMode.SUBSTRING, expr
        if not pattern:
            raise ValueError(f"empty address pattern in {expr!r}")
        return cls(pattern=pattern.lower(), mode=mode, negate=negate)

    def matches(self, address: str) -> bool:
        address = address.strip().lower()
        if self.mode is MatchMode.PREFIX:
            hit = address.startswith(self.pattern)
        elif self.mode is MatchMode.SUFFIX:
            hit = address.endswith(self.pattern)
        elif self.mode is MatchMode.EXACT:
            hit = address == self.pattern
        else:
            hit = self.pattern in address
        return hit != self.negate


def match_addresses(matchers: Iterable[AddressMatcher], addresses: list[str]) -> bool:
    """Positive matchers are alternatives; every negated matcher must hold."""
    positive = [m for m in matchers if not m.negate]
    negative = [m for m in matchers if m.negate]
    if positive and not any(m.matches(a) for m in positive for a in addresses):
        return False
    return all(m.matches(a) for m in negative for a in addresses)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


class MessageFilter(BaseModel):
    """Caller-supplied criteria a message must meet to be surfaced."""

    since: date | None = Field(default=None, description="Earliest date, inclusive (UTC)")
    until: date | None = Field(default=None, description="Latest date, exclusive (UTC)")
    senders: list[AddressMatcher] = Field(
        default_factory=list,
        description="Expressions matched against the From address",
    )
    recipients: list[AddressMatcher] = Field(
        default_factory=list,
        description="Expressions matched against the To and Cc addresses",
    )
    subject: str | None = Field(default=None, description="Case-insensitive subject substring")
    reply: bool | None = Field(default=None, description="Require (or exclude) replies")
    attachment: bool | None = Field(
        default=None,
        description="Require (or exclude) messages with named attachments",
    )
    unique: bool = Field(default=False, description="Drop repeated Message-Id values")

    @field_validator("senders", "recipients", mode="before")
    @classmethod
    def _parse_matchers(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [AddressMatcher.parse(v) if isinstance(v, str) else v for v in value]
        return value

    def accepts(self, message: Message) -> bool:
        """Check every criterion except deduplication."""
        if not self._in_range(message.date()):
            return False
        if self.senders and not match_addresses(self.senders, [message.sender()]):
            return False
        if self.recipients and not match_addresses(
            self.recipients, message.to() + message.cc()
        ):
            return False
        if self.subject is not None and self.subject.lower() not in message.subject().lower():
            return False
        if self.reply is not None and message.is_reply() != self.reply:
            return False
        if self.attachment is not None and bool(message.files()) != self.attachment:
            return False
        return True

    def select(self, messages: Iterable[Message]) -> Iterator[Message]:
        """Yield accepted messages, dropping Message-Id duplicates if asked."""
        seen: set[str] = set()
        for message in messages:
            if not self.accepts(message):
                continue
            if self.unique:
                message_id = message.message_id()
                if message_id and message_id in seen:
                    continue
                seen.add(message_id)
            yield message

    def _in_range(self, when: datetime) -> bool:
        if self.since is None and self.until is None:
            return True
        if when == ZERO_TIME:
            return False
        if self.since is not None and when < _start_of_day(self.since):
            return False
        if self.until is not None and when >= _start_of_day(self.until):
            return False
        return True
