"""Canonical editorial workflow: five states, six transitions, four-tier roles.

draft -> in_review -> approved | rejected; approved -> published;
rejected -> draft; published -> draft.

Role keys come from the injected role resolver at build time. A role the
identity store does not know is left out, and transitions that needed it
become unrestricted.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.application.interfaces.services import IRoleResolver
from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WORKFLOW_DESCRIPTION = "Default workflow with basic editorial states"

WRITER = "Writer"
EDITOR = "Editor"
APPROVER = "Approver"
SYS_ADMIN = "SysAdmin"


def _default_states() -> list[WorkflowStateEntity]:
    return [
        WorkflowStateEntity(
            key="draft",
            name="Draft",
            description="Content is being written",
            color="#6c757d",
            icon="fas fa-edit",
            sort_order=1,
            is_initial=True,
        ),
        WorkflowStateEntity(
            key="in_review",
            name="In Review",
            description="Content is waiting for editorial review",
            color="#ffc107",
            icon="fas fa-eye",
            sort_order=2,
        ),
        WorkflowStateEntity(
            key="approved",
            name="Approved",
            description="Content is approved and ready to publish",
            color="#28a745",
            icon="fas fa-check",
            sort_order=3,
        ),
        WorkflowStateEntity(
            key="published",
            name="Published",
            description="Content is live",
            color="#007bff",
            icon="fas fa-globe",
            sort_order=4,
            is_published=True,
            is_final=True,
        ),
        WorkflowStateEntity(
            key="rejected",
            name="Rejected",
            description="Content was sent back by a reviewer",
            color="#dc3545",
            icon="fas fa-times",
            sort_order=5,
        ),
    ]


@dataclass(frozen=True)
class _TransitionSpec:
    from_state: str
    to_state: str
    name: str
    description: str
    role_name: str | None
    css_class: str
    icon: str
    sort_order: int
    requires_comment: bool
    notification_template: str | None


_TRANSITIONS: tuple[_TransitionSpec, ...] = (
    _TransitionSpec(
        "draft", "in_review", "Submit for Review", "Send content to editors for review",
        None, "btn-primary", "fas fa-paper-plane", 1, False,
        "Content has been submitted for review",
    ),
    _TransitionSpec(
        "in_review", "approved", "Approve", "Approve content for publication",
        EDITOR, "btn-success", "fas fa-check", 1, False,
        "Content has been approved",
    ),
    _TransitionSpec(
        "in_review", "rejected", "Reject", "Send content back with feedback",
        EDITOR, "btn-danger", "fas fa-times", 2, True,
        "Content has been rejected",
    ),
    _TransitionSpec(
        "approved", "published", "Publish", "Make content publicly visible",
        APPROVER, "btn-success", "fas fa-globe", 1, False,
        "Content has been published",
    ),
    _TransitionSpec(
        "rejected", "draft", "Back to Draft", "Return rejected content to draft",
        None, "btn-secondary", "fas fa-undo", 1, False,
        None,
    ),
    _TransitionSpec(
        "published", "draft", "Unpublish", "Take content offline for changes",
        APPROVER, "btn-warning", "fas fa-eye-slash", 1, False,
        "Content has been unpublished",
    ),
)


def _role_template(role_name: str, role_key: str) -> WorkflowRoleEntity:
    if role_name == WRITER:
        return WorkflowRoleEntity(
            role_key=role_key,
            name="Content Writer",
            description="Creates and edits drafts",
            priority=1,
            can_create=True,
            can_edit=True,
            allowed_from_states="draft",
            allowed_to_states="in_review",
            sort_order=1,
        )
    if role_name == EDITOR:
        return WorkflowRoleEntity(
            role_key=role_key,
            name="Content Editor",
            description="Reviews submitted content",
            priority=2,
            can_create=True,
            can_edit=True,
            can_view_all=True,
            allowed_from_states="in_review,draft",
            allowed_to_states="approved,rejected,draft",
            sort_order=2,
        )
    if role_name == APPROVER:
        return WorkflowRoleEntity(
            role_key=role_key,
            name="Content Approver",
            description="Publishes and unpublishes approved content",
            priority=3,
            can_create=True,
            can_edit=True,
            can_delete=True,
            can_view_all=True,
            allowed_from_states="approved,published",
            allowed_to_states="published,rejected",
            sort_order=3,
        )
    return WorkflowRoleEntity(
        role_key=role_key,
        name="System Administrator",
        description="Full access to all workflow operations",
        priority=10,
        can_create=True,
        can_edit=True,
        can_delete=True,
        can_view_all=True,
        sort_order=4,
    )


async def build_default_workflow(
    name: str,
    content_types: list[str],
    role_resolver: IRoleResolver,
) -> WorkflowDefinitionEntity:
    """Build (but do not save) the canonical editorial workflow for content_types."""
    resolved: dict[str, str] = {}
    for role_name in (WRITER, EDITOR, APPROVER, SYS_ADMIN):
        role_key = await role_resolver.resolve_role_id(role_name)
        if role_key is None:
            logger.warning(
                "Default workflow %r: identity role %r not found; transitions needing it are unrestricted",
                name,
                role_name,
            )
            continue
        resolved[role_name] = role_key

    transitions = [
        WorkflowTransitionEntity(
            from_state_key=spec.from_state,
            to_state_key=spec.to_state,
            name=spec.name,
            description=spec.description,
            required_role_key=resolved.get(spec.role_name) if spec.role_name else None,
            css_class=spec.css_class,
            icon=spec.icon,
            sort_order=spec.sort_order,
            requires_comment=spec.requires_comment,
            send_notification=spec.notification_template is not None,
            notification_template=spec.notification_template,
        )
        for spec in _TRANSITIONS
    ]

    return WorkflowDefinitionEntity(
        name=name,
        description=DEFAULT_WORKFLOW_DESCRIPTION,
        content_types=list(content_types),
        initial_state_key="draft",
        is_default=True,
        is_active=True,
        states=_default_states(),
        transitions=transitions,
        roles=[_role_template(n, key) for n, key in resolved.items()],
    )
