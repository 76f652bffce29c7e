"""
Error-catcher middleware — logs uncaught failures inside the request scope
and answers with a 500 JSON body.
"""

from __future__ import annotations

import traceback

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ctxlog.core.facility import get_facility


def error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": str(exc)},
    )


class ErrorCatcherMiddleware(BaseHTTPMiddleware):
    """Translate uncaught exceptions into error responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            get_facility().error(
                f"Uncaught Error at error catcher: {exc}",
                {"error": exc, "stack": traceback.format_exc()},
            )
            return error_response(exc)
