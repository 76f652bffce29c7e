"""
Synthetic workload that exercises context propagation.

``some_function`` fans out into two branches that run in parallel:

- ``deep_await_function``: five nested ``async def`` layers, each awaiting
  the next, with random delays on the way down and back up
- ``deep_callback_function``: five layers of future/callback chaining built
  on ``loop.call_later`` and ``Future.add_done_callback``; the innermost
  callback raises ``WorkloadError``

Both branches upsert scoped values as they go, so every log line shows how
far the scope has travelled. The fan-out failure is logged and re-raised.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Callable
from typing import Any

from ctxlog.core.errors import WorkloadError
from ctxlog.core.facility import get_facility


def _random_delay(timeout_scalar: int) -> int:
    """Random delay in milliseconds, in ``[0, timeout_scalar)``."""
    return random.randrange(max(timeout_scalar, 1))


def _later(delay_ms: int, callback: Callable[[], Any]) -> asyncio.Future:
    """Resolve a future with ``callback()`` after ``delay_ms``.

    A future cancelled before the timer fires stays cancelled and ``callback``
    is not run.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def fire() -> None:
        if future.done():
            return
        try:
            future.set_result(callback())
        except Exception as exc:
            future.set_exception(exc)

    loop.call_later(delay_ms / 1000, fire)
    return future


def _discard(done: asyncio.Future) -> None:
    # Marks an unwanted failure as retrieved so asyncio does not report it.
    if not done.cancelled():
        done.exception()


def _then(source: asyncio.Future, callback: Callable[[Any], Any]) -> asyncio.Future:
    """Chain ``callback`` onto ``source``; futures returned by it are flattened.

    Cancelling the returned future leaves ``source`` running; its outcome is
    dropped.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def settle(inner: asyncio.Future) -> None:
        if future.done():
            _discard(inner)
            return
        if inner.cancelled():
            future.cancel()
        elif inner.exception() is not None:
            future.set_exception(inner.exception())
        else:
            future.set_result(inner.result())

    def on_done(done: asyncio.Future) -> None:
        if future.done():
            _discard(done)
            return
        if done.cancelled() or done.exception() is not None:
            settle(done)
            return
        try:
            result = callback(done.result())
        except Exception as exc:
            future.set_exception(exc)
            return
        if isinstance(result, asyncio.Future):
            result.add_done_callback(settle)
        else:
            future.set_result(result)

    source.add_done_callback(on_done)
    return future


async def some_function(timeout_scalar: int) -> None:
    log = get_facility()
    log.info("Executing some_function")

    assigned_after_delay = _random_delay(timeout_scalar)
    await asyncio.sleep(assigned_after_delay / 1000)
    log.upsert_global({"globalAssignedToBeOverwritten": assigned_after_delay})
    log.upsert_scoped(
        {
            "assignedAfterDelay": assigned_after_delay,
            "assignedToBeOverwritten": assigned_after_delay,
        }
    )
    log.debug("Assigned a random integer after delay.")

    log.debug("Starting deep parallel execution, which will raise in one of the branches.")
    try:
        await asyncio.gather(
            deep_await_function(timeout_scalar),
            deep_callback_function(timeout_scalar),
        )
    except WorkloadError as err:
        log.error("Caught error in some_function, re-raising", {"error": err})
        raise


async def deep_await_function(timeout_scalar: int) -> None:
    log = get_facility()

    async def layer1() -> None:
        async def layer2() -> None:
            async def layer3() -> None:
                async def layer4() -> None:
                    async def layer5() -> None:
                        delay = _random_delay(timeout_scalar)
                        await asyncio.sleep(delay / 1000)
                        log.upsert_global({"globalAssignedToBeOverwritten": delay})
                        log.upsert_scoped(
                            {
                                "assignedAwaitFromLayer5": delay,
                                "assignedToBeOverwritten": delay,
                            }
                        )
                        log.info("Logging from 5 await layers deep!")

                    await layer5()

                await layer4()

            await layer3()
            delay = _random_delay(timeout_scalar)
            log.upsert_scoped({"assignedFromAwaitLayer2": delay})
            await asyncio.sleep(delay / 1000)
            log.debug("Logging from await layer 2, on the way back up!")

        await layer2()

    await layer1()


async def deep_callback_function(timeout_scalar: int) -> None:
    log = get_facility()

    def layer5() -> asyncio.Future:
        delay = _random_delay(timeout_scalar)

        def fail() -> None:
            log.upsert_global({"globalAssignedToBeOverwritten": delay})
            log.upsert_scoped(
                {
                    "assignedFromCallbackLayer5": delay,
                    "assignedToBeOverwritten": delay,
                }
            )
            log.info("Raising error from 5 callback layers deep!")
            raise WorkloadError("Random error from callback layer 5!", context={"delay": delay})

        return _later(delay, fail)

    def layer4() -> asyncio.Future:
        return layer5()

    def layer3() -> asyncio.Future:
        return layer4()

    def layer2() -> asyncio.Future:
        delay = _random_delay(timeout_scalar)

        def resume(_: Any) -> asyncio.Future:
            log.upsert_scoped({"assignedFromCallbackLayer2": delay})
            return _later(delay, lambda: None)

        def unreachable(_: Any) -> None:
            log.debug("This callback log should never be reached.")

        return _then(_then(layer3(), resume), unreachable)

    def layer1() -> asyncio.Future:
        return layer2()

    try:
        await layer1()
    except WorkloadError as err:
        log.error("Caught error in deep_callback_function, re-raising", {"error": err})
        raise
