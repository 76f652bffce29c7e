"""
FastAPI application factory for the demo service.

Middleware, outermost → innermost:

    ScopeMiddleware         binds the request scope
    AnnotateMiddleware      adds a value to the scope
    ErrorCatcherMiddleware  logs failures inside the scope, answers 500
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ctxlog import __version__
from ctxlog.api.deps import get_settings
from ctxlog.api.middleware import AnnotateMiddleware, ErrorCatcherMiddleware, ScopeMiddleware
from ctxlog.api.routers.demo import router as demo_router
from ctxlog.api.settings import DemoSettings
from ctxlog.core.facility import get_facility


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    log = get_facility()
    log.info("ctxlog demo starting", {"version": app.version})
    yield
    log.info("ctxlog demo shutting down")


def create_app(*, settings: DemoSettings | None = None) -> FastAPI:
    """Build and return the demo application.

    Parameters
    ----------
    settings : DemoSettings | None
        Override settings (useful for testing). When ``None`` the cached
        settings from :func:`get_settings` are used.
    """
    settings = settings or get_settings()

    app = FastAPI(title="ctxlog demo", version=__version__, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # add_middleware prepends, so the last one added is the outermost
    app.add_middleware(ErrorCatcherMiddleware)
    app.add_middleware(AnnotateMiddleware)
    app.add_middleware(ScopeMiddleware)

    app.include_router(demo_router)
    return app
