"""Workflow definition API: thin routes delegating to WorkflowDefinitionService."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_actor_role_source,
    get_analytics_service,
    get_definition_service,
    get_definition_service_for_write,
)
from app.application.interfaces.services import IActorRoleSource
from app.application.services.workflow_analytics_service import WorkflowAnalyticsService
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.core.limiter import limit_writes
from app.schemas.workflow import (
    CreateDefaultWorkflowRequest,
    DefinitionValidationResponse,
    WorkflowAnalyticsResponse,
    WorkflowDefinitionListItem,
    WorkflowDefinitionRequest,
    WorkflowDefinitionResponse,
    WorkflowRoleSchema,
    WorkflowStateSchema,
    WorkflowTransitionSchema,
)

router = APIRouter()


@router.get("", response_model=list[WorkflowDefinitionListItem])
async def list_workflow_definitions(
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
    include_inactive: bool = True,
    content_type: str | None = Query(default=None, max_length=128),
):
    """List definitions; with content_type, only active definitions governing it."""
    if content_type:
        definitions = await service.list_by_content_type(content_type)
    else:
        definitions = await service.list(include_inactive=include_inactive)
    return [WorkflowDefinitionListItem.model_validate(d) for d in definitions]


@router.post("", response_model=WorkflowDefinitionResponse, status_code=201)
@limit_writes
async def create_workflow_definition(
    request: Request,
    body: WorkflowDefinitionRequest,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service_for_write)],
):
    """Create a definition. 400 with every validation error when it is invalid."""
    saved = await service.save(body.to_entity())
    return WorkflowDefinitionResponse.model_validate(saved)


@router.post("/default", response_model=WorkflowDefinitionResponse, status_code=201)
@limit_writes
async def create_default_workflow(
    request: Request,
    body: CreateDefaultWorkflowRequest,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service_for_write)],
):
    """Create the canonical editorial workflow as default for the given content types."""
    saved = await service.create_default_workflow(body.name, body.content_types)
    return WorkflowDefinitionResponse.model_validate(saved)


@router.post("/validate", response_model=DefinitionValidationResponse)
async def validate_workflow_definition(
    body: WorkflowDefinitionRequest,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
):
    """Validate without saving; always 200 with errors and warnings."""
    return DefinitionValidationResponse.from_result(service.validate(body.to_entity()))


@router.get("/states/{state_id}", response_model=WorkflowStateSchema)
async def get_workflow_state(
    state_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
):
    return WorkflowStateSchema.model_validate(await service.get_state(state_id))


@router.get("/transitions/{transition_id}", response_model=WorkflowTransitionSchema)
async def get_workflow_transition(
    transition_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
):
    return WorkflowTransitionSchema.model_validate(await service.get_transition(transition_id))


@router.get("/roles/{role_id}", response_model=WorkflowRoleSchema)
async def get_workflow_role(
    role_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
):
    return WorkflowRoleSchema.model_validate(await service.get_role(role_id))


@router.get("/{definition_id}", response_model=WorkflowDefinitionResponse)
async def get_workflow_definition(
    definition_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
):
    return WorkflowDefinitionResponse.model_validate(await service.get(definition_id))


@router.put("/{definition_id}", response_model=WorkflowDefinitionResponse)
@limit_writes
async def update_workflow_definition(
    request: Request,
    definition_id: str,
    body: WorkflowDefinitionRequest,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service_for_write)],
):
    """Replace a definition. Children are matched by id: omitted ones are deleted."""
    await service.get(definition_id)
    saved = await service.save(body.to_entity(definition_id))
    return WorkflowDefinitionResponse.model_validate(saved)


@router.delete("/{definition_id}", status_code=204)
@limit_writes
async def delete_workflow_definition(
    request: Request,
    definition_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service_for_write)],
):
    """Delete a definition with its states, transitions, roles and grants."""
    await service.delete(definition_id)


@router.get("/{definition_id}/effective-roles", response_model=list[WorkflowRoleSchema])
async def get_effective_roles(
    definition_id: str,
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
    role_source: Annotated[IActorRoleSource, Depends(get_actor_role_source)],
):
    """Roles the acting user holds in this workflow, including inherited lower tiers."""
    roles = await service.get_effective_roles(
        definition_id, role_source.current_actor_roles()
    )
    return [WorkflowRoleSchema.model_validate(r) for r in roles]


@router.get("/{definition_id}/analytics", response_model=WorkflowAnalyticsResponse)
async def get_workflow_analytics(
    definition_id: str,
    analytics: Annotated[WorkflowAnalyticsService, Depends(get_analytics_service)],
    from_date: datetime | None = None,
    to_date: datetime | None = None,
):
    """State distribution, transition counts, dwell time and bottlenecks (default: last 30 days)."""
    result = await analytics.get_workflow_analytics(definition_id, from_date, to_date)
    return WorkflowAnalyticsResponse.from_result(result)
