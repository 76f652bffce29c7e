"""Annotate middleware — adds a value to the request scope."""

from __future__ import annotations

import random

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ctxlog.core.facility import get_facility


class AnnotateMiddleware(BaseHTTPMiddleware):
    """Upsert ``assignedFromAnotherMiddleware`` into the current scope."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        log = get_facility()
        log.upsert_scoped({"assignedFromAnotherMiddleware": random.randrange(1000)})
        log.debug("Assigned a field from another middleware")
        return await call_next(request)
