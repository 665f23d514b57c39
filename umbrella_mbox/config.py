"""Reader configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden with an ``MBOX_``
prefixed variable, e.g. ``MBOX_MAX_DEPTH=4``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .multipart import DEFAULT_MAX_DEPTH


class ReaderConfig(BaseSettings):
    """Parser limits and logging settings for an mbox reader."""

    model_config = {"env_prefix": "MBOX_"}

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Maximum nesting of multipart bodies inside one message",
    )
    log_level: str = Field(default="WARNING", description="Root log level name")
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of the console renderer",
    )
