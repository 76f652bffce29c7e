"""
Logging settings.

All values can be overridden via environment variables prefixed with
``CTXLOG_`` or a ``.env`` file:

- CTXLOG_FORMAT: text | json (default: text)
- CTXLOG_STREAM: stderr | stdout (default: stderr)
- CTXLOG_TIMESTAMPS: add an ISO-8601 UTC timestamp to json lines
- CTXLOG_SERVICE / CTXLOG_ENVIRONMENT: seeded into the global context
"""

from __future__ import annotations

import sys
from typing import Any, Literal, TextIO

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ctxlog.core.errors import ConfigError


class LoggingSettings(BaseSettings):
    """Settings for the log emitter.

    Order of precedence (highest → lowest):
        1. Explicit keyword arguments
        2. Environment variables (``CTXLOG_FORMAT``, etc.)
        3. ``.env`` file
        4. Defaults below
    """

    model_config = SettingsConfigDict(
        env_prefix="CTXLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    format: Literal["text", "json"] = Field(default="text", description="Line format")
    stream: Literal["stderr", "stdout"] = Field(default="stderr", description="Output stream")
    timestamps: bool = Field(default=False, description="Add timestamps to json lines")

    # ── Global seed ──────────────────────────────────────────────────────
    service: str | None = Field(default=None, description="Service name added to every line")
    environment: str | None = Field(default=None, description="Environment name added to every line")

    def resolve_stream(self) -> TextIO:
        """Return the stream object named by ``stream``."""
        return sys.stdout if self.stream == "stdout" else sys.stderr

    def seed_attributes(self) -> dict[str, str]:
        """Attributes to upsert into the global store at startup."""
        seed: dict[str, str] = {}
        if self.service:
            seed["service"] = self.service
        if self.environment:
            seed["environment"] = self.environment
        return seed


def load_settings(**overrides: Any) -> LoggingSettings:
    """Build validated settings, raising ``ConfigError`` on bad input."""
    try:
        return LoggingSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(
            "invalid logging settings",
            context={"fields": sorted(str(err["loc"][0]) for err in exc.errors() if err["loc"])},
            cause=exc,
        ) from exc
