"""Umbrella mbox reader: streaming mbox parsing with recursive MIME multipart support."""

from .config import ReaderConfig
from .decoder import decode_body
from .errors import (
    FramingError,
    HeaderSyntaxError,
    MboxError,
    MediaTypeError,
    MessageParseError,
    MultipartError,
)
from .fields import FIELD_GROUPS, FieldDumper, resolve_fields, strip_comments
from .filters import AddressMatcher, MatchMode, MessageFilter
from .header import Header, MediaType, canonical_key, parse_media_type, read_header
from .logging import setup_logging
from .message import ZERO_TIME, Message, Part, parse_address, parse_time
from .models import MessageSummary, PartSummary
from .multipart import read_body
from .reader import MboxReader, read_envelope, read_message
from .stream import LineReader

__all__ = [
    "FIELD_GROUPS",
    "ZERO_TIME",
    "AddressMatcher",
    "FieldDumper",
    "FramingError",
    "Header",
    "HeaderSyntaxError",
    "LineReader",
    "MatchMode",
    "MboxError",
    "MboxReader",
    "MediaType",
    "MediaTypeError",
    "Message",
    "MessageFilter",
    "MessageParseError",
    "MessageSummary",
    "MultipartError",
    "Part",
    "PartSummary",
    "ReaderConfig",
    "canonical_key",
    "decode_body",
    "parse_address",
    "parse_media_type",
    "parse_time",
    "read_body",
    "read_envelope",
    "read_header",
    "read_message",
    "resolve_fields",
    "setup_logging",
    "strip_comments",
]
