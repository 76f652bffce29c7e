"""
Demo API settings.

All values can be overridden via environment variables prefixed with
``CTXLOG_DEMO_``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DemoSettings(BaseSettings):
    """Settings for the demo HTTP service."""

    model_config = SettingsConfigDict(
        env_prefix="CTXLOG_DEMO_",
        env_file=".env",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=3000, description="Bind port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # ── Workload ─────────────────────────────────────────────────────────
    timeout_scalar: int = Field(
        default=1000,
        ge=1,
        description="Upper bound (ms) for the workload's random delays",
    )
