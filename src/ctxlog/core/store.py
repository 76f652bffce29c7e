"""Process-wide attribute store shared by every execution branch."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ctxlog.core.attributes import AttributeMap


class GlobalContextStore:
    """
    One attribute map visible to all branches, scoped or not.

    The map is only ever updated in place. Upserts are per-key
    last-write-wins; no multi-key atomicity is offered.
    """

    def __init__(self) -> None:
        self._attributes: AttributeMap = {}

    def upsert(self, attributes: Mapping[str, Any]) -> None:
        """Set or overwrite each key of ``attributes``."""
        for key, value in attributes.items():
            self._attributes[key] = value

    def snapshot(self) -> AttributeMap:
        """Return a shallow copy of the store."""
        return dict(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, key: object) -> bool:
        return key in self._attributes
