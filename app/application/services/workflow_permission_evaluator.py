"""Workflow permission evaluation: transition legality, effective roles, visibility.

Pure functions over an already-loaded definition; no I/O.

Priority inheritance only widens what an actor can see. Execute rights come
from explicit grants (or the required-role shorthand when a transition has
none), matched against the actor's raw role keys.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowTransitionEntity,
)


class WorkflowPermissionEvaluator:
    """Decides transition executability and content visibility for an actor's role keys."""

    def effective_roles(
        self,
        roles: Iterable[WorkflowRoleEntity],
        raw_role_keys: Iterable[str],
    ) -> list[WorkflowRoleEntity]:
        """Return direct role matches plus every role at or below the highest matched priority.

        Empty when none of the actor's keys match a role. Ordered by priority
        descending, then sort_order.
        """
        roles = list(roles)
        keys = set(raw_role_keys)
        direct = [r for r in roles if r.role_key in keys]
        if not direct:
            return []
        max_priority = max(r.priority for r in direct)
        effective = [r for r in roles if r.role_key in keys or r.priority <= max_priority]
        return sorted(effective, key=lambda r: (-r.priority, r.sort_order))

    def can_execute(
        self,
        transition: WorkflowTransitionEntity,
        raw_role_keys: Iterable[str],
    ) -> bool:
        """Return True if an actor holding raw_role_keys may execute transition.

        Grants are authoritative when present: some grant with can_execute must
        name one of the actor's keys. Without grants, required_role_key must be
        one of the actor's keys; a null requirement is open to everyone.
        """
        keys = set(raw_role_keys)
        if transition.role_permissions:
            return any(
                grant.can_execute and grant.role_key in keys
                for grant in transition.role_permissions
            )
        if transition.required_role_key is None:
            return True
        return transition.required_role_key in keys

    def can_view(
        self,
        roles: Iterable[WorkflowRoleEntity],
        content_owner_id: str | None,
        actor_id: str | None,
        raw_role_keys: Iterable[str],
    ) -> bool:
        """Owner always sees their content; otherwise an effective role must have can_view_all."""
        if actor_id is not None and actor_id == content_owner_id:
            return True
        return any(r.can_view_all for r in self.effective_roles(roles, raw_role_keys))

    def executable_transitions(
        self,
        definition: WorkflowDefinitionEntity,
        current_state_key: str,
        raw_role_keys: Iterable[str],
    ) -> list[WorkflowTransitionEntity]:
        """Transitions leaving current_state_key that the actor may execute, by sort_order."""
        keys = frozenset(raw_role_keys)
        return [
            t
            for t in definition.transitions_from(current_state_key)
            if self.can_execute(t, keys)
        ]
