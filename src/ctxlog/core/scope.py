"""
Scope binding using contextvars.

A scope ties one attribute map to a logical execution branch. The binding is
held in a ``ContextVar``, so it follows the branch without any parameter
passing:

- nested synchronous calls run in the same context
- ``await`` resumes in the same task, hence the same context
- ``asyncio.create_task``/``gather`` copy the context into each child task
- ``loop.call_soon``/``call_later`` and ``Future.add_done_callback`` capture
  the context current at registration time

Every copy of the context refers to the same ``Scope`` object, so mutations
made by one sub-branch are visible to its siblings (last write wins).

Threads do not inherit context on their own; use :meth:`ScopeBinder.carry`
when handing work to an executor.

Usage:
    binder = ScopeBinder()

    def handle():
        binder.current().attributes["user"] = "alice"

    binder.run(handle, {"traceId": "abc"})
"""

from __future__ import annotations

import contextvars
import functools
import inspect
import itertools
from collections.abc import Awaitable, Callable, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from ctxlog.core.attributes import AttributeMap

T = TypeVar("T")

_binder_ids = itertools.count(1)


class ScopeState(str, Enum):
    """Lifecycle of a scope.

    A scope that is no longer referenced by any continuation is retired by
    garbage collection and can never be observed again, so there is no member
    for that state.
    """

    UNBOUND = "unbound"
    BOUND = "bound"
    DRAINING = "draining"


@dataclass
class Scope:
    """An attribute map bound to one execution branch."""

    attributes: AttributeMap = field(default_factory=dict)
    state: ScopeState = ScopeState.UNBOUND

    def upsert(self, attributes: Mapping[str, Any]) -> None:
        """Set or overwrite keys in place."""
        for key, value in attributes.items():
            self.attributes[key] = value


class ScopeBinder:
    """Binds scopes to execution branches and looks up the current one."""

    def __init__(self) -> None:
        self._current: ContextVar[Scope | None] = ContextVar(
            f"ctxlog_scope_{next(_binder_ids)}", default=None
        )

    def current(self) -> Scope | None:
        """Return the scope bound to the calling branch, if any."""
        return self._current.get()

    def run(
        self,
        workload: Callable[[], T],
        initial: Mapping[str, Any] | None = None,
    ) -> T:
        """
        Run ``workload`` with a new scope current for its whole extent.

        If ``workload`` returns an awaitable, an awaitable is returned in its
        place; awaiting it drives the returned one with the scope bound again.
        Tasks, callbacks and futures created while the workload runs keep the
        scope after this call returns.

        Failures raised by the workload propagate unchanged.
        """
        scope = Scope(attributes=dict(initial) if initial else {})
        token = self._bind(scope)
        try:
            result = workload()
        except BaseException:
            scope.state = ScopeState.DRAINING
            raise
        finally:
            self._current.reset(token)

        if inspect.isawaitable(result):
            return self._drive(scope, result)  # type: ignore[return-value]

        scope.state = ScopeState.DRAINING
        return result

    async def _drive(self, scope: Scope, awaitable: Awaitable[T]) -> T:
        token = self._current.set(scope)
        try:
            return await awaitable
        finally:
            self._current.reset(token)
            scope.state = ScopeState.DRAINING

    def _bind(self, scope: Scope) -> contextvars.Token:
        scope.state = ScopeState.BOUND
        return self._current.set(scope)

    def binding(self, initial: Mapping[str, Any] | None = None) -> ScopeBinding:
        """Return a context manager binding a new scope for a block."""
        return ScopeBinding(self, initial)

    @staticmethod
    def carry(fn: Callable[..., T]) -> Callable[..., T]:
        """Wrap ``fn`` so it runs in a copy of the caller's context.

        The copy shares the current ``Scope`` object, so mutations made by
        ``fn`` on another thread are visible to the calling branch. A wrapped
        callable cannot run on two threads at the same time; wrap once per
        submission.
        """
        return functools.partial(contextvars.copy_context().run, fn)


class ScopeBinding:
    """
    Context manager form of :meth:`ScopeBinder.run`.

    Usage:
        with binder.binding({"traceId": "abc"}) as scope:
            ...

        async with binder.binding({"traceId": "abc"}):
            await handle()
    """

    def __init__(self, binder: ScopeBinder, initial: Mapping[str, Any] | None = None):
        self._binder = binder
        self._scope = Scope(attributes=dict(initial) if initial else {})
        self._token: contextvars.Token | None = None

    def __enter__(self) -> Scope:
        self._token = self._binder._bind(self._scope)
        return self._scope

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            self._binder._current.reset(self._token)
            self._token = None
        self._scope.state = ScopeState.DRAINING

    async def __aenter__(self) -> Scope:
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)
