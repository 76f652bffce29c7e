"""Demo endpoints — run the workload and expose the effective context."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter

from ctxlog.api.deps import Log, Settings
from ctxlog.core.render import dumps_best_effort
from ctxlog.demo.workload import some_function

router = APIRouter()


@router.get("/")
async def run_workload(settings: Settings, log: Log) -> dict[str, Any]:
    """Run the deep workload; its failure is handled by the error catcher."""
    await some_function(settings.timeout_scalar)
    log.info("Workload completed")
    return {"status": "ok"}


@router.get("/context")
async def read_context(log: Log) -> dict[str, Any]:
    """Return the effective context of the current request."""
    return json.loads(dumps_best_effort(log.current_context()))


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
