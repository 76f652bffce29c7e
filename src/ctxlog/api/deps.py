"""FastAPI dependencies — cached settings and the logging facility."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ctxlog.api.settings import DemoSettings
from ctxlog.core.facility import Facility, get_facility


@lru_cache(maxsize=1)
def get_settings() -> DemoSettings:
    """Cached settings — loaded once per process."""
    return DemoSettings()


def get_log() -> Facility:
    return get_facility()


Settings = Annotated[DemoSettings, Depends(get_settings)]
Log = Annotated[Facility, Depends(get_log)]
