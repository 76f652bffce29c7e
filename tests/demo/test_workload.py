"""Tests for ``ctxlog.demo.workload`` — the deep parallel workload."""

from __future__ import annotations

import asyncio

import pytest

from ctxlog.core.errors import WorkloadError
from ctxlog.demo.workload import _later, _then, deep_await_function, deep_callback_function, some_function

TIMEOUT_SCALAR = 5  # small for fast tests


async def _settle() -> None:
    """Let the sibling branch that outlives the failure finish."""
    await asyncio.sleep(0.1)


class TestSomeFunction:
    @pytest.mark.asyncio
    async def test_raises_from_callback_branch(self, singleton):
        with pytest.raises(WorkloadError, match="callback layer 5"):
            await singleton.run_scoped(lambda: some_function(TIMEOUT_SCALAR), {"traceId": "w-1"})
        await _settle()

    @pytest.mark.asyncio
    async def test_logs_carry_scope(self, singleton, lines):
        with pytest.raises(WorkloadError):
            await singleton.run_scoped(lambda: some_function(TIMEOUT_SCALAR), {"traceId": "w-2"})
        await _settle()

        emitted = lines()
        messages = [message for _, message, _ in emitted]
        assert "Executing some_function" in messages
        assert "Assigned a random integer after delay." in messages
        assert "Logging from 5 await layers deep!" in messages
        assert "Raising error from 5 callback layers deep!" in messages
        assert "This callback log should never be reached." not in messages
        assert all(context["traceId"] == "w-2" for _, _, context in emitted)

    @pytest.mark.asyncio
    async def test_error_logged_with_accumulated_context(self, singleton, lines):
        with pytest.raises(WorkloadError):
            await singleton.run_scoped(lambda: some_function(TIMEOUT_SCALAR), {"traceId": "w-3"})
        await _settle()

        errors = {message: context for level, message, context in lines() if level == "ERROR"}
        context = errors["Caught error in some_function, re-raising"]
        assert isinstance(context["assignedAfterDelay"], int)
        assert isinstance(context["assignedFromCallbackLayer5"], int)
        assert context["error"]["type"] == "WorkloadError"
        assert "Caught error in deep_callback_function, re-raising" in errors

    @pytest.mark.asyncio
    async def test_unscoped_run_only_warns(self, singleton, lines):
        with pytest.raises(WorkloadError):
            await some_function(TIMEOUT_SCALAR)
        await _settle()

        warnings = [message for level, message, _ in lines() if level == "WARN"]
        assert warnings
        assert all("not attached to a scope" in w for w in warnings)


class TestBranches:
    @pytest.mark.asyncio
    async def test_deep_await_reaches_layer_two(self, singleton, lines):
        await singleton.run_scoped(lambda: deep_await_function(TIMEOUT_SCALAR), {"traceId": "a"})

        (_, deep_msg, deep_ctx), (_, up_msg, up_ctx) = lines()
        assert deep_msg == "Logging from 5 await layers deep!"
        assert "assignedAwaitFromLayer5" in deep_ctx
        assert up_msg == "Logging from await layer 2, on the way back up!"
        assert "assignedFromAwaitLayer2" in up_ctx

    @pytest.mark.asyncio
    async def test_deep_callback_raises(self, singleton, lines):
        with pytest.raises(WorkloadError):
            await singleton.run_scoped(lambda: deep_callback_function(TIMEOUT_SCALAR), {"traceId": "c"})

        levels = [level for level, _, _ in lines()]
        assert levels == ["INFO", "ERROR"]


class TestFutureChaining:
    @pytest.mark.asyncio
    async def test_later_cancelled_before_firing(self):
        loop = asyncio.get_running_loop()
        failures: list[dict] = []
        loop.set_exception_handler(lambda _, context: failures.append(context))
        calls: list[int] = []
        try:
            future = _later(1, lambda: calls.append(1))
            future.cancel()
            await asyncio.sleep(0.02)
        finally:
            loop.set_exception_handler(None)

        assert future.cancelled()
        assert calls == []
        assert failures == []

    @pytest.mark.asyncio
    async def test_then_cancelled_while_source_pending(self):
        loop = asyncio.get_running_loop()
        failures: list[dict] = []
        loop.set_exception_handler(lambda _, context: failures.append(context))
        source = loop.create_future()
        try:
            chained = _then(source, lambda value: value + 1)
            chained.cancel()
            source.set_exception(WorkloadError("late failure"))
            await asyncio.sleep(0)
        finally:
            loop.set_exception_handler(None)

        assert chained.cancelled()
        assert failures == []

    @pytest.mark.asyncio
    async def test_then_flattens_returned_future(self):
        source = _later(1, lambda: 2)
        chained = _then(source, lambda value: _later(1, lambda: value * 10))
        assert await chained == 20
