"""
ctxlog - Structured logging with ambient, scope-bound context.

Usage:
    import ctxlog

    ctxlog.upsert_global({"service": "orders"})

    async def handle(order_id):
        ctxlog.upsert_scoped({"orderId": order_id})
        ctxlog.info("handling order")

    await ctxlog.run_scoped(lambda: handle(42), {"traceId": "abc"})

The module-level functions delegate to the singleton returned by
:func:`get_facility`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ctxlog.core import (
    TRACE_ID,
    AttributeMap,
    ConfigError,
    ContextLogError,
    Facility,
    LoggingSettings,
    LogLevel,
    Scope,
    ScopeState,
    WorkloadError,
    get_facility,
    reset_facility,
)

__version__ = "0.1.0"

T = TypeVar("T")


def run_scoped(workload: Callable[[], T], initial: Mapping[str, Any] | None = None) -> T:
    return get_facility().run_scoped(workload, initial)


def upsert_global(attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().upsert_global(attributes, **kwargs)


def upsert_scoped(attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().upsert_scoped(attributes, **kwargs)


def current_context() -> AttributeMap:
    return get_facility().current_context()


def debug(message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().debug(message, attributes, **kwargs)


def info(message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().info(message, attributes, **kwargs)


def warn(message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().warn(message, attributes, **kwargs)


def error(message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
    get_facility().error(message, attributes, **kwargs)


__all__ = [
    "__version__",
    "AttributeMap",
    "ConfigError",
    "ContextLogError",
    "Facility",
    "LogLevel",
    "LoggingSettings",
    "Scope",
    "ScopeState",
    "TRACE_ID",
    "WorkloadError",
    "current_context",
    "debug",
    "error",
    "get_facility",
    "info",
    "reset_facility",
    "run_scoped",
    "upsert_global",
    "upsert_scoped",
    "warn",
]
