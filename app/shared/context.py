"""Request-scoped context using contextvars.

Middleware stores who is acting (id, display name, raw role keys) and the
request correlation id; the actor role source and log filter read them back.

Usage:
    set_current_actor(actor_id="u1", actor_name="Ada", role_keys={"Editor"})
    actor = get_actor_context()
"""

from collections.abc import Iterable
from contextvars import ContextVar, Token
from dataclasses import dataclass, field

_current_actor_id: ContextVar[str | None] = ContextVar("current_actor_id", default=None)
_current_actor_name: ContextVar[str | None] = ContextVar(
    "current_actor_name", default=None
)
_current_role_keys: ContextVar[frozenset[str]] = ContextVar(
    "current_role_keys", default=frozenset()
)
_current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


@dataclass(frozen=True)
class ActorContext:
    """Immutable snapshot of the acting user: id, display name and raw role keys."""

    actor_id: str | None = None
    actor_name: str | None = None
    role_keys: frozenset[str] = field(default_factory=frozenset)

    @property
    def display_name(self) -> str:
        """Name used in notifications; falls back to the id, then 'system'."""
        return self.actor_name or self.actor_id or "system"


def set_current_actor(
    actor_id: str | None,
    actor_name: str | None = None,
    role_keys: Iterable[str] | None = None,
) -> None:
    """Set the acting user for this request (scoped to the current async task)."""
    _current_actor_id.set(actor_id)
    _current_actor_name.set(actor_name)
    _current_role_keys.set(frozenset(role_keys or ()))


def clear_current_actor() -> None:
    """Clear the actor context."""
    _current_actor_id.set(None)
    _current_actor_name.set(None)
    _current_role_keys.set(frozenset())


def get_current_actor_id() -> str | None:
    """Return the current actor id, or None when anonymous."""
    return _current_actor_id.get()


def get_actor_context() -> ActorContext:
    """Return a snapshot of the current actor context."""
    return ActorContext(
        actor_id=_current_actor_id.get(),
        actor_name=_current_actor_name.get(),
        role_keys=_current_role_keys.get(),
    )


def set_request_id(request_id: str) -> Token[str | None]:
    return _current_request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _current_request_id.reset(token)


def get_request_id() -> str | None:
    """Correlation id of the request being served, if any."""
    return _current_request_id.get()
