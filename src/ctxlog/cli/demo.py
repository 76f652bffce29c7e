"""
CLI: ``ctxlog demo`` — run the workload locally, one scope per simulated request.
"""

from __future__ import annotations

import asyncio
import uuid

import typer
from rich.table import Table

from ctxlog.cli.utils import console
from ctxlog.core.attributes import TRACE_ID
from ctxlog.core.errors import ContextLogError
from ctxlog.core.facility import get_facility
from ctxlog.demo.workload import some_function

app = typer.Typer(no_args_is_help=True)


async def _run_one(request_number: int, timeout_scalar: int) -> tuple[str, str, str]:
    log = get_facility()
    trace_id = str(uuid.uuid4())
    initial = {TRACE_ID: trace_id, "entryPoint": "cli: demo", "requestNumber": request_number}

    async def workload() -> tuple[str, str, str]:
        try:
            await some_function(timeout_scalar)
        except ContextLogError as exc:
            log.error(f"Unit of work failed: {exc}", {"error": exc})
            return trace_id, "failed", exc.message
        return trace_id, "ok", ""

    return await log.run_scoped(workload, initial)


async def _run_all(requests: int, timeout_scalar: int) -> list[tuple[str, str, str]]:
    return await asyncio.gather(*(_run_one(n, timeout_scalar) for n in range(1, requests + 1)))


@app.command("run")
def run(
    requests: int = typer.Option(3, "--requests", "-n", min=1, help="Concurrent units of work"),
    timeout_scalar: int = typer.Option(100, "--timeout-scalar", "-t", min=1, help="Max delay (ms)"),
) -> None:
    """Run concurrent scoped workloads and summarize their outcome."""
    get_facility().upsert_global({"mode": "cli"})
    results = asyncio.run(_run_all(requests, timeout_scalar))

    table = Table(title="Demo runs")
    table.add_column("Trace", style="cyan", no_wrap=True)
    table.add_column("Outcome")
    table.add_column("Error")
    for trace_id, outcome, message in results:
        table.add_row(trace_id[:8], outcome, message)
    console.print(table)

    failed = sum(1 for _, outcome, _ in results if outcome == "failed")
    console.print(f"{len(results)} runs, {failed} failed")
