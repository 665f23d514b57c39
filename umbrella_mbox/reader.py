"""Message assembly: envelope framing, headers, then body capture.

:func:`read_message` consumes exactly one message from a shared
:class:`~umbrella_mbox.stream.LineReader` per call and returns ``None`` once
the stream is exhausted.  :class:`MboxReader` iterates over a whole stream
and attaches the message position to structural errors.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike
from typing import BinaryIO

import structlog

from .config import ReaderConfig
from .errors import FramingError, MboxError, MessageParseError
from .header import read_header
from .message import Message, Part
from .multipart import DEFAULT_MAX_DEPTH, FROM_LINE_PREFIX, read_body
from .stream import LineReader

logger = structlog.get_logger()


def read_envelope(reader: LineReader) -> str | None:
    """Consume the ``From `` line that opens a message.

    Blank lines before it are skipped.  Returns ``None`` at a clean end of
    stream.
    """
    while True:
        raw = reader.readline()
        if not raw:
            return None
        line = raw.strip()
        if not line:
            continue
        if not line.startswith(FROM_LINE_PREFIX):
            text = line.decode("utf-8", errors="replace")
            raise FramingError(f"expected From line, got {text!r}")
        return line.decode("utf-8", errors="replace")


def read_plain(reader: LineReader) -> Part:
    """Capture everything up to the next ``From `` line as one part."""
    body = bytearray()
    while reader.peek(len(FROM_LINE_PREFIX)) != FROM_LINE_PREFIX:
        line = reader.readline()
        if not line:
            break
        body += line
    return Part(body=bytes(body), implicit_type=False)


def read_message(
    reader: LineReader,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Message | None:
    """Read the next message, or return ``None`` when the stream is exhausted.

    Only messages carrying a MIME-Version header are split into MIME parts;
    everything else becomes a single part holding the raw body.

    Raises
    ------
    MboxError
        On a missing ``From `` line, a header line without a colon, or a
        multipart body whose boundary is missing or never found.
    """
    envelope = read_envelope(reader)
    if envelope is None:
        return None

    message = Message(header=read_header(reader), envelope=envelope)
    if not message.is_multipart():
        message.parts.append(read_plain(reader))
        return message

    mt = message.content_type()
    boundary = mt.params.get("boundary", "") if mt is not None else ""
    message.parts.extend(read_body(reader, boundary, max_depth=max_depth))
    return message


class MboxReader:
    """Iterate over the messages of one mbox stream.

    Usage::

        with MboxReader.open("archive.mbox") as mbox:
            for message in mbox:
                print(message.date(), message.sender(), message.subject())

    A structural error is re-raised as :class:`MessageParseError` carrying
    the 1-based message index; the reader is exhausted afterwards.
    """

    def __init__(
        self,
        stream: BinaryIO | bytes | LineReader,
        config: ReaderConfig | None = None,
    ) -> None:
        self._config = config or ReaderConfig()
        self._reader = stream if isinstance(stream, LineReader) else LineReader(stream)
        self._count = 0
        self._done = False

    @classmethod
    @contextmanager
    def open(
        cls,
        path: str | PathLike[str],
        config: ReaderConfig | None = None,
    ) -> Iterator[MboxReader]:
        with open(path, "rb") as fp:
            yield cls(fp, config)

    @property
    def messages_read(self) -> int:
        return self._count

    def read(self) -> Message | None:
        """Return the next message, or ``None`` at the end of the stream."""
        if self._done:
            return None
        index = self._count + 1
        try:
            message = read_message(self._reader, max_depth=self._config.max_depth)
        except MboxError as exc:
            self._done = True
            logger.warning(
                "mbox_parse_failed",
                index=index,
                lineno=self._reader.lineno,
                error=str(exc),
            )
            raise MessageParseError(index, self._reader.lineno, str(exc)) from exc

        if message is None:
            self._done = True
            return None

        self._count = index
        logger.debug(
            "mbox_message_read",
            index=index,
            parts=len(message.parts),
            multipart=message.is_multipart(),
        )
        return message

    def __iter__(self) -> Iterator[Message]:
        while (message := self.read()) is not None:
            yield message
