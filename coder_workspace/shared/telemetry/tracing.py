"""OpenTelemetry spans around Coder calls and workspace resolution.

Only opentelemetry-api is required. Without an SDK configured by the
deployment every span is a no-op.
"""

import asyncio
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("coder_workspace")

# Recorded as arg.<name> when a traced function receives them. The API key,
# request bodies and config objects are never recorded.
_RECORDED_ARGS = frozenset({
    "name", "names", "workspace_name", "repo", "branch", "change", "patchset",
    "status", "outcome", "source", "strict", "timeout_ms", "interval_ms", "session_id",
})


def _recorded_arguments(func: Callable, args: tuple, kwargs: dict) -> dict[str, str]:
    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs).arguments
    except TypeError:
        bound = kwargs
    recorded = {}
    for key, value in bound.items():
        if key.lower() not in _RECORDED_ARGS:
            continue
        if isinstance(value, (list, tuple)):
            value = ",".join(map(str, value))
        recorded[f"arg.{key}"] = str(value)
    return recorded


@contextmanager
def _span(name: str, attributes: dict[str, Any]) -> Iterator[trace.Span]:
    with _tracer.start_as_current_span(name, attributes=attributes) as span:
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
        span.set_status(Status(StatusCode.OK))


def traced(operation_name: str | None = None, attributes: dict | None = None) -> Callable:
    """Run the decorated function (sync or async) inside a span.

    The span is named `operation_name` (default module.function) and carries
    `attributes` plus the allowlisted call arguments.
    """

    def decorator(func: Callable) -> Callable:
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        def span_attributes(args: tuple, kwargs: dict) -> dict[str, Any]:
            return {**(attributes or {}), **_recorded_arguments(func, args, kwargs)}

        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _span(span_name, span_attributes(args, kwargs)):
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _span(span_name, span_attributes(args, kwargs)):
                return func(*args, **kwargs)

        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set attributes on the active span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)
