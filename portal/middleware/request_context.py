"""Request and correlation ID middleware.

Forwards or generates X-Request-ID and X-Correlation-ID, echoes both on the
response and stores them in context variables so log lines carry them.
Raw ASGI (no BaseHTTPMiddleware) so streaming downloads are not buffered.
"""

import re
import uuid
from collections.abc import Callable
from typing import Any

from portal.middleware._headers import get_header
from portal.shared.context import set_current_identity, set_request_ids

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if it is a safe token; otherwise a new UUID (prevents log injection)."""
    if not raw or not REQUEST_ID_ALLOWED_PATTERN.match(raw.strip()):
        return str(uuid.uuid4())
    return raw.strip()


def RequestContextMiddleware(
    app: Callable,
    request_id_header: str = "X-Request-ID",
    correlation_id_header: str = "X-Correlation-ID",
) -> Callable:
    """Attach request/correlation IDs to scope state, context vars and the response."""

    async def asgi_app(scope: dict[str, Any], receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(get_header(scope, request_id_header))
        forwarded = get_header(scope, correlation_id_header)
        correlation_id = sanitize_request_id(forwarded) if forwarded else request_id
        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        state["correlation_id"] = correlation_id
        set_request_ids(request_id, correlation_id)
        set_current_identity(None)

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((request_id_header.encode(), request_id.encode()))
                headers.append((correlation_id_header.encode(), correlation_id.encode()))
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
