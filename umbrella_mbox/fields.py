"""Header field dumps for the ``dump`` command."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .header import Header, canonical_key
from .message import Message

FIELD_GROUPS: dict[str, tuple[str, ...]] = {
    "sender": ("From", "Sender", "Reply-To"),
    "recipient": ("To", "Cc", "Bcc", "Delivered-To"),
    "date": ("Date",),
    "subject": ("Subject",),
    "thread": ("Message-Id", "In-Reply-To", "References"),
    "mime": (
        "Mime-Version",
        "Content-Type",
        "Content-Transfer-Encoding",
        "Content-Disposition",
    ),
    "trace": ("Received", "Return-Path"),
}

EXPERIMENTAL_PREFIX = "x-"
PART_PREFIX = "> "

_COMMENT = re.compile(r"\([^()]*\)")
_SPACES = re.compile(r"\s+")


def strip_comments(value: str) -> str:
    """Remove parenthetical comments and collapse the remaining whitespace."""
    return _SPACES.sub(" ", _COMMENT.sub(" ", value)).strip()


def resolve_fields(names: Iterable[str]) -> list[str]:
    """Expand group names and canonicalize field names, keeping first order."""
    fields: list[str] = []
    for name in names:
        group = FIELD_GROUPS.get(name.lower())
        for field in group if group is not None else (canonical_key(name),):
            if field not in fields:
                fields.append(field)
    return fields


class FieldDumper:
    """Render selected header fields as aligned ``name: value`` lines."""

    def __init__(
        self,
        fields: Iterable[str] = (),
        *,
        strip_comments: bool = False,
        experimental: bool = False,
    ) -> None:
        self._fields = resolve_fields(fields)
        self._strip_comments = strip_comments
        self._experimental = experimental

    def header_lines(self, header: Header, prefix: str = "") -> Iterator[str]:
        if self._fields:
            pairs = ((f, v) for f in self._fields for v in header.get_all(f))
        else:
            pairs = (
                (k, v)
                for k, v in header.items()
                if self._experimental or not k.lower().startswith(EXPERIMENTAL_PREFIX)
            )
        for name, value in pairs:
            if self._strip_comments:
                value = strip_comments(value)
            yield f"{prefix}{name:<16}: {value}"

    def message_lines(self, message: Message) -> Iterator[str]:
        """Message headers, a blank line, then each part's headers."""
        yield from self.header_lines(message.header)
        yield ""
        for i, part in enumerate(message.parts):
            if i > 0:
                yield ""
            yield from self.header_lines(part.header, PART_PREFIX)
