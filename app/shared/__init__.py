"""Shared utilities: actor context, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    ActorContext,
    clear_current_actor,
    get_actor_context,
    get_current_actor_id,
    set_current_actor,
)
from app.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "ActorContext",
    "clear_current_actor",
    "get_actor_context",
    "get_current_actor_id",
    "set_current_actor",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
