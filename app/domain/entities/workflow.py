"""Workflow definition aggregate.

A workflow definition is a named approval pipeline for one or more content
types: ordered states, directed transitions between them, and workflow-scoped
roles. Transitions carry their role grants (WorkflowRolePermissionEntity).
Children are owned exclusively by their definition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.value_objects.core import parse_state_list
from app.shared.utils.generators import generate_cuid


@dataclass
class WorkflowStateEntity:
    """One stage in the pipeline. Key is unique within the definition."""

    key: str
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: int = 0
    is_published: bool = False
    is_initial: bool = False
    is_final: bool = False
    id: str = field(default_factory=generate_cuid)


@dataclass
class WorkflowRolePermissionEntity:
    """Grant: whether the role with role_key may execute the owning transition.

    requires_approval and conditions are stored for callers; the evaluator
    only reads can_execute. from_required_role marks the grant generated from
    the transition's required_role_key; it is rebuilt whenever that key changes.
    """

    role_key: str
    can_execute: bool = True
    requires_approval: bool = False
    conditions: str | None = None
    from_required_role: bool = False
    id: str = field(default_factory=generate_cuid)


@dataclass
class WorkflowTransitionEntity:
    """Directed edge between two states, optionally role- and comment-gated."""

    from_state_key: str
    to_state_key: str
    name: str
    description: str | None = None
    required_role_key: str | None = None
    css_class: str | None = None
    icon: str | None = None
    sort_order: int = 0
    requires_comment: bool = False
    send_notification: bool = False
    notification_template: str | None = None
    role_permissions: list[WorkflowRolePermissionEntity] = field(default_factory=list)
    id: str = field(default_factory=generate_cuid)

    @property
    def is_unrestricted(self) -> bool:
        """True when neither a grant list nor a required role restricts this transition."""
        return not self.role_permissions and not self.required_role_key

    def grant_for(self, role_key: str) -> WorkflowRolePermissionEntity | None:
        """Return the grant for role_key, if any."""
        for grant in self.role_permissions:
            if grant.role_key == role_key:
                return grant
        return None


@dataclass
class WorkflowRoleEntity:
    """Workflow-scoped role mapped to an external identity role by role_key."""

    role_key: str
    name: str
    description: str | None = None
    priority: int = 1
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_view_all: bool = False
    allowed_from_states: str = ""
    allowed_to_states: str = ""
    sort_order: int = 0
    id: str = field(default_factory=generate_cuid)

    def get_allowed_from_states(self) -> list[str]:
        """Allowed source states; [] means unrestricted."""
        return parse_state_list(self.allowed_from_states)

    def get_allowed_to_states(self) -> list[str]:
        """Allowed target states; [] means unrestricted."""
        return parse_state_list(self.allowed_to_states)


@dataclass
class WorkflowDefinitionEntity:
    """Domain entity for a workflow definition (aggregate root)."""

    name: str
    content_types: list[str]
    initial_state_key: str
    description: str | None = None
    is_default: bool = False
    is_active: bool = True
    states: list[WorkflowStateEntity] = field(default_factory=list)
    transitions: list[WorkflowTransitionEntity] = field(default_factory=list)
    roles: list[WorkflowRoleEntity] = field(default_factory=list)
    id: str = field(default_factory=generate_cuid)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def governs(self, content_type: str) -> bool:
        """Return whether this definition lists content_type."""
        return content_type in self.content_types

    def state_keys(self) -> set[str]:
        return {s.key for s in self.states}

    def get_state(self, key: str) -> WorkflowStateEntity | None:
        """Return the state with the given key, or None."""
        for state in self.states:
            if state.key == key:
                return state
        return None

    def get_transition(self, transition_id: str) -> WorkflowTransitionEntity | None:
        """Return the transition with the given id, or None."""
        for transition in self.transitions:
            if transition.id == transition_id:
                return transition
        return None

    def get_role(self, role_key: str) -> WorkflowRoleEntity | None:
        """Return the role with the given role_key, or None."""
        for role in self.roles:
            if role.role_key == role_key:
                return role
        return None

    def transitions_from(self, state_key: str) -> list[WorkflowTransitionEntity]:
        """Transitions leaving state_key, ordered by sort_order."""
        return sorted(
            (t for t in self.transitions if t.from_state_key == state_key),
            key=lambda t: t.sort_order,
        )
