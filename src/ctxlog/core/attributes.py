"""
Attribute maps — the unit of context exchanged by every ctxlog component.

An attribute map is a plain ``dict`` with string keys. Insertion order is
preserved, keys are unique and the last write wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

AttributeMap = dict[str, Any]

# Reserved by convention for the per-unit correlation identifier
TRACE_ID = "traceId"


def collect_attributes(
    attributes: Mapping[str, Any] | None = None,
    /,
    **kwargs: Any,
) -> AttributeMap:
    """Combine a mapping and keyword attributes into a new map.

    Keyword values win over mapping values with the same key.
    """
    collected: AttributeMap = dict(attributes) if attributes else {}
    collected.update(kwargs)
    return collected


def merge_attributes(*layers: Mapping[str, Any] | None) -> AttributeMap:
    """Overlay ``layers`` left to right into a new map.

    Later layers take precedence. A key overridden by a later layer keeps the
    slot of its first appearance.
    """
    merged: AttributeMap = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged
