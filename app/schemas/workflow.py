"""Workflow definition API schemas.

Request bodies are permissive on purpose: the definition validator reports
every problem at once (400 with details.errors) instead of failing on the first
field. Child ids are optional on input; a known id updates that child.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.workflow import DefinitionValidationResult, WorkflowAnalyticsResult
from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)
from app.shared.utils.generators import generate_cuid


class WorkflowStateSchema(BaseModel):
    """One workflow state."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    key: str
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: int = 0
    is_published: bool = False
    is_initial: bool = False
    is_final: bool = False

    def to_entity(self) -> WorkflowStateEntity:
        data = self.model_dump(exclude={"id"})
        return WorkflowStateEntity(id=self.id or generate_cuid(), **data)


class WorkflowRolePermissionSchema(BaseModel):
    """Grant of the owning transition to a workflow role (by role_key)."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    role_key: str
    can_execute: bool = True
    requires_approval: bool = False
    conditions: str | None = None
    from_required_role: bool = False

    def to_entity(self) -> WorkflowRolePermissionEntity:
        data = self.model_dump(exclude={"id"})
        return WorkflowRolePermissionEntity(id=self.id or generate_cuid(), **data)


class WorkflowTransitionSchema(BaseModel):
    """Directed transition; required_role_key null and no grants = anyone may execute."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
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
    role_permissions: list[WorkflowRolePermissionSchema] = Field(default_factory=list)

    def to_entity(self) -> WorkflowTransitionEntity:
        data = self.model_dump(exclude={"id", "role_permissions"})
        return WorkflowTransitionEntity(
            id=self.id or generate_cuid(),
            role_permissions=[g.to_entity() for g in self.role_permissions],
            **data,
        )


class WorkflowRoleSchema(BaseModel):
    """Workflow-scoped role. allowed_*_states are comma-separated; empty = unrestricted."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
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

    def to_entity(self) -> WorkflowRoleEntity:
        data = self.model_dump(exclude={"id"})
        return WorkflowRoleEntity(id=self.id or generate_cuid(), **data)


class WorkflowDefinitionRequest(BaseModel):
    """Request body for creating or replacing a workflow definition."""

    name: str = ""
    description: str | None = None
    content_types: list[str] = Field(default_factory=list)
    initial_state_key: str = ""
    is_default: bool = False
    is_active: bool = True
    states: list[WorkflowStateSchema] = Field(default_factory=list)
    transitions: list[WorkflowTransitionSchema] = Field(default_factory=list)
    roles: list[WorkflowRoleSchema] = Field(default_factory=list)

    def to_entity(self, definition_id: str | None = None) -> WorkflowDefinitionEntity:
        return WorkflowDefinitionEntity(
            id=definition_id or generate_cuid(),
            name=self.name.strip(),
            description=self.description,
            content_types=[c.strip() for c in self.content_types if c.strip()],
            initial_state_key=self.initial_state_key.strip(),
            is_default=self.is_default,
            is_active=self.is_active,
            states=[s.to_entity() for s in self.states],
            transitions=[t.to_entity() for t in self.transitions],
            roles=[r.to_entity() for r in self.roles],
        )


class WorkflowDefinitionResponse(BaseModel):
    """Workflow definition with its states, transitions (with grants) and roles."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    content_types: list[str]
    initial_state_key: str
    is_default: bool
    is_active: bool
    states: list[WorkflowStateSchema]
    transitions: list[WorkflowTransitionSchema]
    roles: list[WorkflowRoleSchema]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkflowDefinitionListItem(BaseModel):
    """Definition summary for list views."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    content_types: list[str]
    is_default: bool
    is_active: bool
    updated_at: datetime | None = None


class CreateDefaultWorkflowRequest(BaseModel):
    """Request body for POST /workflow-definitions/default."""

    name: str = Field(default="Default Workflow", min_length=1, max_length=128)
    content_types: list[str] = Field(..., min_length=1)


class DefinitionValidationResponse(BaseModel):
    """Validation outcome; errors block save, warnings do not."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def from_result(cls, result: DefinitionValidationResult) -> DefinitionValidationResponse:
        return cls(is_valid=result.is_valid, errors=result.errors, warnings=result.warnings)


class WorkflowBottleneckResponse(BaseModel):
    state_key: str
    average_wait_seconds: float
    content_count: int
    description: str


class WorkflowAnalyticsResponse(BaseModel):
    """Analytics for one definition; durations are in seconds."""

    definition_id: str
    from_date: datetime
    to_date: datetime
    state_distribution: dict[str, int]
    average_state_seconds: dict[str, float]
    transition_counts: dict[str, int]
    bottlenecks: list[WorkflowBottleneckResponse]

    @classmethod
    def from_result(cls, result: WorkflowAnalyticsResult) -> WorkflowAnalyticsResponse:
        return cls(
            definition_id=result.definition_id,
            from_date=result.from_date,
            to_date=result.to_date,
            state_distribution=result.state_distribution,
            average_state_seconds={
                k: v.total_seconds() for k, v in result.average_state_time.items()
            },
            transition_counts=result.transition_counts,
            bottlenecks=[
                WorkflowBottleneckResponse(
                    state_key=b.state_key,
                    average_wait_seconds=b.average_wait_time.total_seconds(),
                    content_count=b.content_count,
                    description=b.description,
                )
                for b in result.bottlenecks
            ],
        )
