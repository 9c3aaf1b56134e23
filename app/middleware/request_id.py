"""Correlation id for each HTTP request.

A well-formed X-Request-ID from the caller is reused; anything else is
replaced with a fresh UUID4. The id is echoed on the response, kept in
scope["state"] for error bodies and exposed to log records via contextvars.
"""

import re
import uuid
from typing import Callable

from app.shared.context import reset_request_id, set_request_id

_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def get_header(scope: dict, name: str) -> str | None:
    """First value of an ASGI header, matched case-insensitively."""
    wanted = name.lower().encode("latin-1")
    for key, value in scope.get("headers", ()):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(candidate: str | None) -> str:
    if candidate is not None:
        candidate = candidate.strip()
        if _SAFE_REQUEST_ID.fullmatch(candidate):
            return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Raw ASGI wrapper; non-HTTP scopes pass through untouched."""
    header_bytes = header_name.encode("latin-1")

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request_id = resolve_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", ()),
                    (header_bytes, request_id.encode("latin-1")),
                ]
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_with_id)
        finally:
            reset_request_id(token)

    return asgi_app
