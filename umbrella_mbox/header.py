"""Header store, header-block reader and Content-Type parameter parsing."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .errors import HeaderSyntaxError, MediaTypeError
from .stream import LineReader

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")
_FOLD_CHARS = (b" ", b"\t")


def canonical_key(key: str) -> str:
    """Return the canonical form of a header field name.

    ``content-type`` becomes ``Content-Type``.  Names containing characters
    outside the token set (spaces, for example) are returned unchanged.
    """
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    return "-".join(word[:1].upper() + word[1:].lower() for word in key.split("-"))


def _split_segments(value: str) -> list[str]:
    # ';' inside a quoted-string does not separate parameters
    segments: list[str] = []
    current: list[str] = []
    quoted = False
    for ch in value:
        if ch == '"':
            quoted = not quoted
        elif ch == ";" and not quoted:
            segments.append("".join(current))
            current = []
            continue
        current.append(ch)
    segments.append("".join(current))
    return segments


def parse_value_field(value: str) -> tuple[str, dict[str, str] | None]:
    """Split ``main; name=value; ...`` into the main value and its parameters.

    Parameter names are lower-cased; surrounding quotes and spaces are
    stripped from values.  Returns ``(value, None)`` when there is no ``;``.
    """
    segments = _split_segments(value)
    if len(segments) == 1:
        return segments[0].strip(), None
    params: dict[str, str] = {}
    for segment in segments[1:]:
        segment = segment.strip()
        if not segment:
            continue
        name, _, val = segment.partition("=")
        params[name.strip().lower()] = val.strip('" ')
    return segments[0].strip(), params


class Header:
    """Case-insensitive, multi-valued header mapping.

    Keys are stored in canonical form and every lookup canonicalizes the
    requested key first.  Repeated fields keep their values in encounter
    order; :meth:`get` returns the last one.
    """

    def __init__(self, fields: Iterable[tuple[str, str]] | None = None) -> None:
        self._fields: dict[str, list[str]] = {}
        for key, value in fields or ():
            self.add(key, value)

    def has(self, key: str) -> bool:
        return canonical_key(key) in self._fields

    def get(self, key: str) -> str:
        """Return the last value stored for *key*, or ``""``."""
        values = self._fields.get(canonical_key(key))
        return values[-1] if values else ""

    def get_all(self, key: str) -> list[str]:
        return list(self._fields.get(canonical_key(key), ()))

    def add(self, key: str, value: str) -> None:
        self._fields.setdefault(canonical_key(key), []).append(value.strip())

    def set(self, key: str, value: str) -> None:
        self._fields[canonical_key(key)] = []
        self.add(key, value)

    def delete(self, key: str) -> None:
        self._fields.pop(canonical_key(key), None)

    def split_param(self, key: str) -> tuple[str, dict[str, str] | None]:
        """Parse the single value of *key* with :func:`parse_value_field`.

        Returns ``("", None)`` unless exactly one value is stored.
        """
        values = self._fields.get(canonical_key(key))
        if not values or len(values) != 1:
            return "", None
        return parse_value_field(values[0])

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs, one per stored value."""
        for key, values in self._fields.items():
            for value in values:
                yield key, value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __delitem__(self, key: str) -> None:
        self.delete(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Header):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"Header({self._fields!r})"


@dataclass(frozen=True)
class MediaType:
    """A parsed Content-Type value."""

    main_type: str
    sub_type: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def value(self) -> str:
        return f"{self.main_type}/{self.sub_type}"


def parse_media_type(value: str) -> MediaType:
    """Parse ``type/subtype; name=value`` into a :class:`MediaType`."""
    main, params = parse_value_field(value)
    main_type, sep, sub_type = main.lower().partition("/")
    main_type, sub_type = main_type.strip(), sub_type.strip()
    if not sep or not main_type or not sub_type or "/" in sub_type:
        raise MediaTypeError(f"malformed media type: {value!r}")
    return MediaType(main_type, sub_type, params or {})


def _decode_line(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def read_header(reader: LineReader) -> Header:
    """Read one header block, up to a blank line or the end of the stream.

    A line starting with a space or a tab continues the previous field.
    Space-led continuations are trimmed; tab-led ones are kept as written.
    """
    header = Header()
    while True:
        raw = reader.readline()
        if not raw:
            break
        line = _decode_line(raw).strip()
        if not line:
            break
        name, sep, value = line.partition(":")
        if not sep:
            raise HeaderSyntaxError(f"missing colon in header: {line!r}")
        value = value.strip()
        while (lead := reader.peek(1)) in _FOLD_CHARS:
            continuation = _decode_line(reader.readline())[1:]
            if lead == b" ":
                continuation = continuation.strip()
            else:
                continuation = continuation.rstrip("\r\n")
            value += " " + continuation
        header.add(name.strip(), value)
    return header
