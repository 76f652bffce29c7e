"""
Error types for ctxlog.

The core never raises from a logging call and never wraps failures raised by
a scoped workload. These types cover the remaining cases:

- ``ConfigError``: settings that fail validation
- ``WorkloadError``: failures raised by the demo workload

Usage:
    from ctxlog.core.errors import ConfigError

    try:
        settings = load_settings(format="xml")
    except ConfigError as e:
        log.error("bad settings", e.to_dict())
"""

from __future__ import annotations

from typing import Any


class ContextLogError(Exception):
    """Base class for ctxlog errors.

    Carries a free-form context dict and an optional chained cause.
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ContextLogError:
        """Add context fields and return self for chaining."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging or API responses."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ConfigError(ContextLogError):
    """Invalid or unloadable configuration."""


class WorkloadError(ContextLogError):
    """A unit of work failed."""
