"""
CLI: ``ctxlog serve`` — run the demo service under uvicorn.

Bind address and port default to ``CTXLOG_DEMO_HOST`` / ``CTXLOG_DEMO_PORT``
(see :class:`~ctxlog.api.settings.DemoSettings`); flags override them.
"""

from __future__ import annotations

import typer
import uvicorn

from ctxlog.api.settings import DemoSettings
from ctxlog.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", help="Bind address [default: CTXLOG_DEMO_HOST]"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port [default: CTXLOG_DEMO_PORT]"),
    reload: bool = typer.Option(False, "--reload", help="Restart the worker when sources change"),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn's own access/error log level"),
) -> None:
    """Serve the demo app; every request runs in its own logging scope."""
    settings = DemoSettings()
    bind_host = host or settings.host
    bind_port = port if port is not None else settings.port

    console.print(
        f"[bold green]ctxlog demo[/bold green] on http://{bind_host}:{bind_port} "
        f"(timeout scalar {settings.timeout_scalar} ms)"
    )
    uvicorn.run(
        "ctxlog.api:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=log_level,
    )
