"""Multipart body partitioning.

A multipart body is consumed in four stages: the prolog up to the first
delimiter line, one or more parts each closed by a line *starting with* the
delimiter, and an epilog after the closing ``--`` delimiter.  The prolog
needs an exact delimiter line while parts only look for the delimiter
prefix, so the closing ``--<token>--`` line is recognised as a boundary too.

Parts that are themselves multipart are re-read from their own body and
replaced by their leaves, so callers only ever see a flat list.
"""

from __future__ import annotations

from .errors import MultipartError
from .header import read_header
from .message import MULTIPART, Part
from .stream import LineReader

FROM_LINE_PREFIX = b"From "
DEFAULT_MAX_DEPTH = 16

_CLOSE_MARKER = b"--"


def delimiter(boundary: str) -> bytes:
    """Return the delimiter line prefix for a boundary token."""
    return _CLOSE_MARKER + boundary.encode("utf-8")


def read_body(
    reader: LineReader,
    boundary: str,
    parent: bytes | None = None,
    *,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Part]:
    """Split a multipart body into its leaf parts.

    *parent* is the delimiter of the enclosing multipart body, or ``None``
    at the top level of a message, in which case the epilog runs up to the
    next ``From `` line.
    """
    if not boundary:
        raise MultipartError("empty boundary delimiter")
    if depth >= max_depth:
        raise MultipartError(f"multipart nesting deeper than {max_depth} levels")

    delim = delimiter(boundary)
    skip_prolog(reader, delim)

    parts: list[Part] = []
    while True:
        part, final = read_part(reader, delim)
        parts.extend(flatten_part(part, delim, depth=depth, max_depth=max_depth))
        if final:
            break
    skip_epilog(reader, parent)
    return parts


def skip_prolog(reader: LineReader, delim: bytes) -> None:
    while True:
        line = reader.readline()
        if not line:
            raise MultipartError(
                f"end of stream before boundary {delim.decode('utf-8', 'replace')!r}"
            )
        if line.strip() == delim:
            return


def read_part(reader: LineReader, delim: bytes) -> tuple[Part, bool]:
    """Read one part up to the next delimiter line.

    Returns the part and whether it was the last one, either because the
    closing delimiter was found or because the stream ended.
    """
    part = Part(header=read_header(reader))
    body = bytearray()
    while True:
        line = reader.readline()
        if not line:
            part.body = bytes(body)
            return part, True
        if line.startswith(delim):
            break
        body += line
    part.body = bytes(body)
    return part, line.strip().endswith(_CLOSE_MARKER)


def flatten_part(
    part: Part,
    parent: bytes,
    *,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Part]:
    mt = part.content_type()
    if mt is None or mt.main_type != MULTIPART:
        return [part]
    nested = LineReader(part.body)
    return read_body(
        nested,
        mt.params.get("boundary", ""),
        parent,
        depth=depth + 1,
        max_depth=max_depth,
    )


def skip_epilog(reader: LineReader, parent: bytes | None) -> None:
    """Skip lines until the reader sits on *parent* (or a ``From `` line).

    Reaching the end of the stream is not reported.
    """
    delim = parent if parent is not None else FROM_LINE_PREFIX
    while reader.peek(len(delim)) != delim:
        if not reader.readline():
            return
