"""Demo workload used by the API and CLI collaborators."""

from ctxlog.demo.workload import deep_await_function, deep_callback_function, some_function

__all__ = ["some_function", "deep_await_function", "deep_callback_function"]
