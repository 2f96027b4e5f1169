"""Tracing helpers for instrumenting application code with OpenTelemetry."""

import asyncio
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, overload

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, Tracer

P = ParamSpec("P")
R = TypeVar("R")


def get_tracer(name: str) -> Tracer:
    """Get a tracer for the given module name.

    Args:
        name: Module name, typically __name__.

    Returns:
        A Tracer instance for creating spans.
    """
    return trace.get_tracer(name)


@overload
def traced(  # noqa: UP047
    func: Callable[P, R],
) -> Callable[P, R]: ...


@overload
def traced(
    func: None = None,
    *,
    span_name: str | None = None,
    attributes: dict[str, str | int | float | bool] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def traced(  # noqa: UP047
    func: Callable[P, R] | None = None,
    *,
    span_name: str | None = None,
    attributes: dict[str, str | int | float | bool] | None = None,
) -> Callable[P, R] | Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator that runs a function inside its own span.

    Works with sync and async functions, with or without parentheses.
    Exceptions are recorded on the span and re-raised unchanged.

    Args:
        func: The function to trace (when used without parentheses).
        span_name: Name for the span (defaults to the qualified name).
        attributes: Static attributes to add to the span.

    Examples:
        @traced
        def issue(): ...

        @traced(span_name="auth.signin")
        async def signin(): ...
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        tracer = get_tracer(fn.__module__)
        name = span_name or fn.__qualname__

        def start(span: trace.Span) -> None:
            for key, value in (attributes or {}).items():
                span.set_attribute(key, value)

        def fail(span: trace.Span, error: Exception) -> None:
            span.record_exception(error)
            span.set_status(Status(StatusCode.ERROR, type(error).__name__))

        if asyncio.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                with tracer.start_as_current_span(
                    name, record_exception=False, set_status_on_exception=False
                ) as span:
                    start(span)
                    try:
                        return await fn(*args, **kwargs)  # type: ignore[misc]
                    except Exception as e:
                        fail(span, e)
                        raise

            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                start(span)
                try:
                    return fn(*args, **kwargs)
                except Exception as e:
                    fail(span, e)
                    raise

        return sync_wrapper

    if func is not None:
        return decorator(func)
    return decorator
