"""Content-Transfer-Encoding decoders.

Decoding is best-effort: malformed input degrades to an empty result and
is never raised to the caller.  No charset conversion takes place.
"""

from __future__ import annotations

import base64
import binascii
import quopri

import structlog

logger = structlog.get_logger()

ENCODING_BASE64 = "base64"
ENCODING_QUOTED = "quoted-printable"


def decode_base64(body: bytes) -> bytes:
    """Decode a base64 body whose lines may be wrapped at any width."""
    token = b"".join(body.split())
    try:
        return base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.debug("mbox_body_decode_failed", encoding=ENCODING_BASE64, error=str(exc))
        return b""


def decode_quoted_printable(body: bytes) -> bytes:
    try:
        return quopri.decodestring(body)
    except (binascii.Error, ValueError) as exc:
        logger.debug("mbox_body_decode_failed", encoding=ENCODING_QUOTED, error=str(exc))
        return b""


_DECODERS = {
    ENCODING_BASE64: decode_base64,
    ENCODING_QUOTED: decode_quoted_printable,
}


def decode_body(encoding: str, body: bytes) -> bytes:
    """Decode *body* according to a Content-Transfer-Encoding value.

    Unknown encodings, ``7bit``, ``8bit`` and an empty value return the body
    unchanged.
    """
    decoder = _DECODERS.get(encoding.strip().lower())
    if decoder is None:
        return body
    return decoder(body)
