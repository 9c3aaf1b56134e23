"""Actor context middleware.

Reads the acting user (id, display name, role keys) from headers set by the
upstream identity provider and stores it in contextvars for the request.
Role keys are comma-separated; entries that are not safe identifiers are dropped.
Uses raw ASGI so the context is visible to route handlers.
"""

from typing import Callable

from app.middleware.request_id import get_header
from app.shared.context import clear_current_actor, set_current_actor
from app.shared.utils.sanitization import InputSanitizer, sanitize_text, split_identifiers

ACTOR_NAME_MAX_LENGTH = 128


def ActorContextMiddleware(
    app: Callable,
    id_header: str = "X-Actor-ID",
    name_header: str = "X-Actor-Name",
    roles_header: str = "X-Actor-Roles",
) -> Callable:
    """Set actor context from identity headers before the route runs. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        raw_id = (get_header(scope, id_header) or "").strip()
        actor_id = raw_id if InputSanitizer.is_identifier(raw_id) else None
        actor_name = sanitize_text(get_header(scope, name_header))
        if actor_name:
            actor_name = actor_name[:ACTOR_NAME_MAX_LENGTH]
        role_keys = split_identifiers(get_header(scope, roles_header))
        set_current_actor(actor_id, actor_name, role_keys)
        try:
            await app(scope, receive, send)
        finally:
            clear_current_actor()

    return asgi_app
