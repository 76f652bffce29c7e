"""
The logging facility — one process-wide entry point for context-aware logging.

Manifesto:
    Every log line of a unit of work should carry that unit's identifiers
    (trace id, counters, computed values) without any function in between
    having to pass a context object along. The facility keeps two layers of
    attributes and merges them into every line:

    - **Global:** one map for the whole process (service, counters)
    - **Scoped:** one map per unit of work, bound with ``run_scoped``
    - **Call-site:** attributes given to a single log call

    Precedence is call-site > scoped > global.

Architecture:
    ::

        get_facility() ──► Facility
                             ├── GlobalContextStore   upsert_global()
                             ├── ScopeBinder          run_scoped() / scope() / upsert_scoped()
                             ├── current_context()    global ⊕ scope
                             └── structlog pipeline   debug() / info() / warn() / error()

Examples:
    >>> from ctxlog import get_facility
    >>> log = get_facility()
    >>> log.upsert_global({"service": "orders"})
    >>> def handle():
    ...     log.upsert_scoped({"user": "alice"})
    ...     log.info("order placed", {"items": 3})
    >>> log.run_scoped(handle, {"traceId": "abc"})
    INFO: "order placed" {"service":"orders","traceId":"abc","user":"alice","items":3}

Guardrails:
    - Logging calls never raise into the caller.
    - ``upsert_scoped`` outside a scope changes nothing and logs one warning.
    - Concurrent siblings of one scope share its map; last write wins.

Tags:
    logging, structlog, contextvars, asyncio, context-propagation
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable, Mapping
from typing import Any, TextIO, TypeVar

import structlog

from ctxlog.core.attributes import AttributeMap, collect_attributes, merge_attributes
from ctxlog.core.render import CALL_SITE_KEY, build_processors
from ctxlog.core.scope import Scope, ScopeBinder, ScopeBinding
from ctxlog.core.settings import LoggingSettings, load_settings
from ctxlog.core.store import GlobalContextStore

T = TypeVar("T")

UNSCOPED_WARNING = (
    "This logger is not attached to a scope; the attributes were not applied. "
    'Make sure you run your function within "run_scoped(fn, {})".'
)


class Facility:
    """Context-aware structured logger with global and scoped attributes."""

    def __init__(
        self,
        settings: LoggingSettings | None = None,
        *,
        output: TextIO | None = None,
    ):
        self._settings = settings or load_settings()
        self._store = GlobalContextStore()
        self._binder = ScopeBinder()
        self._stream: TextIO = output or self._settings.resolve_stream()
        self._logger = self._build_logger()

        seed = self._settings.seed_attributes()
        if seed:
            self._store.upsert(seed)

    # ── Configuration ────────────────────────────────────────────────────

    @property
    def settings(self) -> LoggingSettings:
        return self._settings

    def configure(self, *, output: TextIO | None = None, **overrides: Any) -> None:
        """Re-target the emitter.

        ``overrides`` are validated as :class:`LoggingSettings` fields, so
        ``stream="stdout"`` switches to the named stream. ``output`` writes to
        an explicit file object instead and wins over ``stream``. The global
        store and any bound scopes are left untouched.
        """
        if overrides:
            self._settings = load_settings(**{**self._settings.model_dump(), **overrides})
            if "stream" in overrides:
                self._stream = self._settings.resolve_stream()
        if output is not None:
            self._stream = output
        self._logger = self._build_logger()

    def _build_logger(self) -> Any:
        return structlog.wrap_logger(
            structlog.PrintLogger(file=self._stream),
            processors=build_processors(
                self.current_context,
                format=self._settings.format,
                timestamps=self._settings.timestamps,
            ),
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    # ── Context ──────────────────────────────────────────────────────────

    def upsert_global(self, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        """Add or update attributes attached to every future line."""
        self._store.upsert(collect_attributes(attributes, **kwargs))

    def upsert_scoped(self, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        """Add or update attributes of the current scope.

        Outside a scope nothing changes and a warning is logged instead.
        """
        scope = self._binder.current()
        if scope is None:
            self.warn(UNSCOPED_WARNING)
            return
        scope.upsert(collect_attributes(attributes, **kwargs))

    def current_scope(self) -> Scope | None:
        return self._binder.current()

    def current_context(self) -> AttributeMap:
        """Return global attributes overlaid by the current scope's."""
        scope = self._binder.current()
        return merge_attributes(self._store.snapshot(), scope.attributes if scope else None)

    @property
    def context(self) -> AttributeMap:
        return self.current_context()

    # ── Scopes ───────────────────────────────────────────────────────────

    def run_scoped(self, workload: Callable[[], T], initial: Mapping[str, Any] | None = None) -> T:
        """Run ``workload`` within a new scope seeded with ``initial``.

        Async workloads return an awaitable; see :meth:`ScopeBinder.run`.
        """
        return self._binder.run(workload, initial)

    def scope(self, initial: Mapping[str, Any] | None = None) -> ScopeBinding:
        """Bind a new scope for a ``with`` / ``async with`` block."""
        return self._binder.binding(initial)

    def carry(self, fn: Callable[..., T]) -> Callable[..., T]:
        """Wrap ``fn`` to run with the caller's scope on another thread."""
        return self._binder.carry(fn)

    # ── Logging ──────────────────────────────────────────────────────────

    def debug(self, message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        self._emit("debug", message, attributes, kwargs)

    def info(self, message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        self._emit("info", message, attributes, kwargs)

    def warn(self, message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        self._emit("warning", message, attributes, kwargs)

    warning = warn

    def error(self, message: str, attributes: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        self._emit("error", message, attributes, kwargs)

    def _emit(
        self,
        method: str,
        message: str,
        attributes: Mapping[str, Any] | None,
        kwargs: dict[str, Any],
    ) -> None:
        call_site = collect_attributes(attributes, **kwargs)
        try:
            getattr(self._logger, method)(message, **{CALL_SITE_KEY: call_site})
        except Exception as exc:
            _report_emit_failure(method, message, exc)


def _report_emit_failure(method: str, message: str, exc: BaseException) -> None:
    """Last-resort notice when a line cannot be rendered or written."""
    fallback = sys.__stderr__
    if fallback is None:
        return
    try:
        fallback.write(f"--- ctxlog: could not emit {method} line {message!r}: {exc!r}\n")
    except Exception:
        return


# ── Singleton ────────────────────────────────────────────────────────────

_instance: Facility | None = None
_instance_lock = threading.Lock()


def get_facility() -> Facility:
    """Return the process-wide facility, creating it on first access."""
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = Facility()
    return _instance


def reset_facility() -> None:
    """Drop the process-wide facility (for test isolation)."""
    global _instance
    with _instance_lock:
        _instance = None
