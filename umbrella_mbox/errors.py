"""Exception hierarchy for mbox parsing.

Structural errors abort the current message and propagate to the caller.
Clean end-of-stream is not an error: ``read_message`` returns ``None``.
"""

from __future__ import annotations


class MboxError(Exception):
    """Base class for all structural parse errors."""


class FramingError(MboxError):
    """The ``From `` envelope line is missing where content exists."""


class HeaderSyntaxError(MboxError):
    """A header line has no colon and is not a continuation."""


class MultipartError(MboxError):
    """A multipart body cannot be partitioned (bad or missing boundary)."""


class MediaTypeError(MboxError, ValueError):
    """A Content-Type value is not of the form ``type/subtype``."""


class MessageParseError(MboxError):
    """Raised by :class:`~umbrella_mbox.reader.MboxReader` with position context.

    The original structural error is available as ``__cause__``.
    """

    def __init__(self, index: int, lineno: int, reason: str) -> None:
        super().__init__(f"message {index} (line {lineno}): {reason}")
        self.index = index
        self.lineno = lineno
        self.reason = reason
