"""Line-oriented byte cursor with lookahead.

Every parsing stage shares one :class:`LineReader` per mbox stream.  The
cursor only moves forward; :meth:`LineReader.peek` lets the header and
envelope logic look at upcoming bytes without consuming them.
"""

from __future__ import annotations

import io
from typing import BinaryIO


class LineReader:
    """Blocking line reader over a binary stream (or an in-memory buffer)."""

    def __init__(self, stream: BinaryIO | bytes | bytearray) -> None:
        if isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(bytes(stream))
        self._stream = stream
        self._pending = b""
        self.lineno = 0

    def readline(self) -> bytes:
        """Return the next line including its terminator, ``b""`` at the end."""
        if self._pending:
            idx = self._pending.find(b"\n")
            if idx >= 0:
                line = self._pending[: idx + 1]
                self._pending = self._pending[idx + 1 :]
            else:
                line = self._pending + self._stream.readline()
                self._pending = b""
        else:
            line = self._stream.readline()
        if line:
            self.lineno += 1
        return line

    def peek(self, size: int) -> bytes:
        """Return up to *size* upcoming bytes without consuming them.

        Fewer bytes are returned only when the stream ends first.
        """
        while len(self._pending) < size:
            chunk = self._stream.read(size - len(self._pending))
            if not chunk:
                break
            self._pending += chunk
        return self._pending[:size]
