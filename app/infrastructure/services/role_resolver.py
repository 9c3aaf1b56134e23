"""Identity role lookup (implements IRoleResolver and IActorRoleSource)."""

from __future__ import annotations

from collections.abc import Iterable

from app.shared.context import get_actor_context


class ConfiguredRoleResolver:
    """Resolves role names against the configured identity roles.

    Matching is case-insensitive; the configured spelling is returned as the
    role key, so "editor" resolves to "Editor" when "Editor" is configured.
    """

    def __init__(self, role_names: Iterable[str]) -> None:
        self._roles = {name.casefold(): name for name in role_names}

    async def resolve_role_id(self, role_name: str) -> str | None:
        return self._roles.get(role_name.strip().casefold())


class ContextActorRoleSource:
    """Reads the current actor's raw role keys from the request context."""

    def current_actor_roles(self) -> frozenset[str]:
        return get_actor_context().role_keys
