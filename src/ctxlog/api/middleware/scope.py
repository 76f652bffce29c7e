"""Scope middleware — binds one logging scope per request.

Everything downstream of this middleware (other middleware, the endpoint and
any task it spawns) logs with the request's ``traceId``, ``entryPoint`` and
``requestNumber`` attached.
"""

from __future__ import annotations

import itertools
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ctxlog.core.attributes import TRACE_ID
from ctxlog.core.facility import get_facility

TRACE_HEADER = "X-Trace-Id"


class ScopeMiddleware(BaseHTTPMiddleware):
    """Run each request inside its own scope."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self._counter = itertools.count(1)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        log = get_facility()
        request_number = next(self._counter)
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())

        log.upsert_global({"requestsServed": request_number})
        initial = {
            TRACE_ID: trace_id,
            "entryPoint": f"{request.method}: {request.url.path}",
            "requestNumber": request_number,
        }
        response = await log.run_scoped(lambda: call_next(request), initial)
        response.headers[TRACE_HEADER] = trace_id
        return response
