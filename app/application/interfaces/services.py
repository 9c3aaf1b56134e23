"""Service interfaces (ports) for the application layer.

Protocols define contracts for external collaborators (DIP): identity role
lookup, the current actor's roles, and notification dispatch.
"""

from __future__ import annotations

from typing import Any, Protocol


class IRoleResolver(Protocol):
    """Protocol for resolving identity role names to the role keys actors carry."""

    async def resolve_role_id(self, role_name: str) -> str | None:
        """Return the role identifier for role_name, or None if it does not exist.

        None means "no restriction achievable"; callers never treat it as fatal.
        """


class IActorRoleSource(Protocol):
    """Protocol for the acting user's raw role keys (from the identity provider)."""

    def current_actor_roles(self) -> frozenset[str]:
        """Return the current actor's role keys (empty when anonymous)."""


class INotificationDispatcher(Protocol):
    """Protocol for post-commit workflow notifications (fire-and-forget)."""

    async def notify(self, template_key: str, context: dict[str, Any]) -> None:
        """Send a notification rendered from template_key with context fields.

        Implementations may raise; the transition executor logs and ignores failures.
        """
