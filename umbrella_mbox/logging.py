"""Log routing for the umbrella-mbox command: structlog over one stdlib handler."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(
    *,
    json: bool = False,
    level: str = "WARNING",
    stream: TextIO | None = None,
) -> None:
    """Route structlog events and stdlib records through one stderr handler.

    The ``umbrella-mbox`` command calls this once with the ``MBOX_LOG_JSON``
    and ``MBOX_LOG_LEVEL`` settings.  Parse failures are reported at warning
    level and per-message progress at debug level, so the default level
    keeps a clean run silent.

    *json* switches from plain ``key=value`` console lines to one JSON
    object per record, for piping into a log collector.  *stream* replaces
    ``sys.stderr``; stdout is left to the listing and dump output.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
