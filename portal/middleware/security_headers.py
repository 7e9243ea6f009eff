"""Security headers middleware.

Adds the usual hardening headers to every response, and Cache-Control:
no-store to responses that carry tokens or session state.
Raw ASGI (no BaseHTTPMiddleware).
"""

from collections.abc import Callable, Iterable
from typing import Any

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

NO_STORE_PREFIXES = ("/api/v1/auth", "/api/v1/session", "/api/v1/profiles/me")


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    no_store_prefixes: Iterable[str] = NO_STORE_PREFIXES,
) -> Callable:
    """Set security headers on all responses; no-store on session-bearing paths."""
    resolved = headers if headers is not None else DEFAULT_HEADERS.copy()
    header_list = [(k.encode(), v.encode()) for k, v in resolved.items()]
    prefixes = tuple(no_store_prefixes)

    async def asgi_app(scope: dict[str, Any], receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        no_store = scope.get("path", "").startswith(prefixes)

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                out = list(message.get("headers", []))
                seen = {h[0].lower() for h in out}
                extra = list(header_list)
                if no_store:
                    extra.append((b"Cache-Control", b"no-store"))
                for name_b, value_b in extra:
                    if name_b.lower() not in seen:
                        out.append((name_b, value_b))
                        seen.add(name_b.lower())
                message["headers"] = out
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
