"""Request body size limit middleware.

Rejects bodies larger than max_bytes with 413. Content-Length is checked up
front; bodies without one (chunked) are collected up to the limit and then
replayed to the app. Raw ASGI.
"""

import json
from collections.abc import Callable
from typing import Any

from portal.middleware._headers import get_header


async def _send_413(send: Callable, max_bytes: int) -> None:
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": {"max_bytes": max_bytes},
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def _replay(chunks: list[bytes], receive: Callable) -> Callable:
    pending = list(chunks)

    async def replay_receive() -> dict[str, Any]:
        if pending:
            body = pending.pop(0)
            return {"type": "http.request", "body": body, "more_body": bool(pending)}
        return await receive()

    return replay_receive


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes."""

    async def asgi_app(scope: dict[str, Any], receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None:
            if declared.strip().isdigit() and int(declared) > max_bytes:
                await _send_413(send, max_bytes)
                return
            await app(scope, receive, send)
            return

        if scope.get("method") in ("GET", "HEAD", "OPTIONS", "DELETE"):
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _send_413(send, max_bytes)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break
        await app(scope, _replay(chunks, receive), send)

    return asgi_app
