"""
ctxlog core — context propagation and merging engine.

Components:
- attributes: attribute maps and merge helpers
- store: the process-wide attribute store
- scope: scope binding across sync and async continuations
- render: structlog processors for the emitter
- facility: the singleton facility composing all of the above
"""

from ctxlog.core.attributes import TRACE_ID, AttributeMap, collect_attributes, merge_attributes
from ctxlog.core.errors import ConfigError, ContextLogError, WorkloadError
from ctxlog.core.facility import Facility, get_facility, reset_facility
from ctxlog.core.render import LogLevel
from ctxlog.core.scope import Scope, ScopeBinder, ScopeState
from ctxlog.core.settings import LoggingSettings, load_settings
from ctxlog.core.store import GlobalContextStore

__all__ = [
    # Attributes
    "AttributeMap",
    "TRACE_ID",
    "collect_attributes",
    "merge_attributes",
    # Errors
    "ContextLogError",
    "ConfigError",
    "WorkloadError",
    # Facility
    "Facility",
    "get_facility",
    "reset_facility",
    "LogLevel",
    # Scopes
    "Scope",
    "ScopeBinder",
    "ScopeState",
    "GlobalContextStore",
    # Settings
    "LoggingSettings",
    "load_settings",
]
