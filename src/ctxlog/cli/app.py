"""
Root Typer application for the ctxlog CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from ctxlog import __version__

app = Typer(
    name="ctxlog",
    help="ctxlog — structured logging with ambient, scope-bound context.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ctxlog {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ctxlog CLI — serve the demo API or run the workload locally."""


from ctxlog.cli.demo import app as demo_app  # noqa: E402
from ctxlog.cli.serve import app as serve_app  # noqa: E402

app.add_typer(serve_app, name="serve", help="Demo API server.")
app.add_typer(demo_app, name="demo", help="Run the demo workload locally.")
