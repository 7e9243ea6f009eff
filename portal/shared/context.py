"""Request context management using contextvars.

Async-safe storage for request-scoped data: the request/correlation IDs set
by middleware and the identity admitted by the route guard. Read by the
logging filter.

Usage:
    set_request_ids(request_id="abc", correlation_id="abc")
    set_current_identity("user123")
    ctx = get_request_context()
"""

from contextvars import ContextVar
from dataclasses import dataclass

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_current_identity_id: ContextVar[str | None] = ContextVar(
    "current_identity_id", default=None
)


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    request_id: str | None
    correlation_id: str | None
    identity_id: str | None


def set_request_ids(request_id: str | None, correlation_id: str | None) -> None:
    """Set request and correlation IDs for the current task."""
    _request_id.set(request_id)
    _correlation_id.set(correlation_id)


def set_current_identity(identity_id: str | None) -> None:
    """Record the identity admitted for this request (None to clear)."""
    _current_identity_id.set(identity_id)


def get_request_context() -> RequestContext:
    """Return a snapshot of the current request context."""
    return RequestContext(
        request_id=_request_id.get(),
        correlation_id=_correlation_id.get(),
        identity_id=_current_identity_id.get(),
    )
