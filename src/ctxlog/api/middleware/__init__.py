"""Demo API middleware."""

from ctxlog.api.middleware.annotate import AnnotateMiddleware
from ctxlog.api.middleware.errors import ErrorCatcherMiddleware
from ctxlog.api.middleware.scope import TRACE_HEADER, ScopeMiddleware

__all__ = ["AnnotateMiddleware", "ErrorCatcherMiddleware", "ScopeMiddleware", "TRACE_HEADER"]
