"""
Structlog processors for the log emitter.

Processor chain built by :func:`build_processors`:

    1. ContextMerger      effective context + call-site attributes
    2. TimeStamper        json format only, when enabled
    3. render_text_line / render_json_line

Text output:

    INFO: "Executing some_function" {"traceId":"abc","requestNumber":3}

Json output:

    {"level":"INFO","message":"Executing some_function","context":{"traceId":"abc"}}
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, datetime
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ctxlog.core.attributes import AttributeMap, merge_attributes

# Keys used inside the structlog event dict
CALL_SITE_KEY = "_call_site"
CONTEXT_KEY = "context"


class LogLevel(str, Enum):
    """Level tags written at the start of each line."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


# structlog method name -> level tag
METHOD_LEVELS: dict[str, LogLevel] = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warning": LogLevel.WARN,
    "warn": LogLevel.WARN,
    "error": LogLevel.ERROR,
}


def _placeholder(value: Any) -> str:
    return f"<unserializable {type(value).__name__}>"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return _placeholder(value)


def _encode_fallback(value: Any) -> Any:
    """``json.dumps`` default hook for values json cannot encode natively."""
    if isinstance(value, BaseException):
        return {"type": type(value).__name__, "message": _safe_str(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    try:
        return repr(value)
    except Exception:
        return _placeholder(value)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=_encode_fallback, separators=(",", ":"), ensure_ascii=False)


def dumps_best_effort(attributes: AttributeMap) -> str:
    """Encode ``attributes`` as compact JSON without ever raising.

    Values that cannot be encoded even through the fallback hook (circular
    structures, objects whose ``repr`` fails) are replaced individually, and
    keys that are not strings are converted with ``str`` or a placeholder.
    """
    try:
        return _dumps(attributes)
    except Exception:
        pass

    safe: AttributeMap = {}
    for key, value in attributes.items():
        try:
            _dumps(value)
        except Exception:
            value = _placeholder(value)
        safe[key if isinstance(key, str) else _safe_str(key)] = value
    return _dumps(safe)


class ContextMerger:
    """Replace the call-site attributes with the fully merged context.

    Precedence: effective context < call-site attributes.
    """

    def __init__(self, accessor: Callable[[], AttributeMap]):
        self._accessor = accessor

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        call_site = event_dict.pop(CALL_SITE_KEY, None)
        event_dict[CONTEXT_KEY] = merge_attributes(self._accessor(), call_site)
        return event_dict


def render_text_line(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render ``LEVEL: "message" {json}``."""
    level = METHOD_LEVELS.get(method_name, LogLevel.INFO).value
    message = event_dict.get("event", "")
    return f'{level}: "{message}" {dumps_best_effort(event_dict.get(CONTEXT_KEY, {}))}'


def render_json_line(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render one JSON object per line."""
    payload: AttributeMap = {
        "level": METHOD_LEVELS.get(method_name, LogLevel.INFO).value,
        "message": str(event_dict.get("event", "")),
    }
    if "timestamp" in event_dict:
        payload["timestamp"] = event_dict["timestamp"]
    payload[CONTEXT_KEY] = event_dict.get(CONTEXT_KEY, {})
    return dumps_best_effort(payload)


def build_processors(
    accessor: Callable[[], AttributeMap],
    format: str = "text",
    timestamps: bool = False,
) -> list[Processor]:
    """Assemble the processor chain for the given output format."""
    processors: list[Processor] = [ContextMerger(accessor)]
    if format == "json":
        if timestamps:
            processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
        processors.append(render_json_line)
    else:
        processors.append(render_text_line)
    return processors
