"""Span decorator for async use-case methods."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

tracer = trace.get_tracer("portal.use_cases")

# Identifiers only; emails, names, briefs and passwords never reach a span.
SPAN_ARG_NAMES = frozenset({
    "project_id", "file_id", "profile_id", "identity_id", "client_id",
    "status", "type", "requirement", "role", "limit", "search",
})


def traced(
    name: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap a coroutine in a span called ``name``.

    Keyword arguments listed in SPAN_ARG_NAMES become ``arg.<name>``
    attributes. An exception marks the span as failed and propagates.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                for key, value in kwargs.items():
                    if key in SPAN_ARG_NAMES and value is not None:
                        span.set_attribute(f"arg.{key}", str(value))
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
                    raise

        return wrapper

    return decorator
