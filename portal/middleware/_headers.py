"""Header helpers shared by the raw ASGI middleware."""

from typing import Any


def get_header(scope: dict[str, Any], name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None
