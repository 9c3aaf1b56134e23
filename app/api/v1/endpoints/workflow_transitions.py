"""Workflow transition lookup API: what the acting user may do next."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_actor_role_source, get_definition_service
from app.application.interfaces.services import IActorRoleSource
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.schemas.workflow import WorkflowTransitionSchema

router = APIRouter()


@router.get("/available", response_model=list[WorkflowTransitionSchema])
async def get_available_transitions(
    service: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
    role_source: Annotated[IActorRoleSource, Depends(get_actor_role_source)],
    content_type: str = Query(..., min_length=1, max_length=128),
    current_state: str = Query(..., min_length=1, max_length=64),
):
    """Transitions from current_state under the content type's default workflow.

    Empty when no default workflow exists or the actor may execute none.
    """
    transitions = await service.get_available_transitions(
        content_type, current_state, role_source.current_actor_roles()
    )
    return [WorkflowTransitionSchema.model_validate(t) for t in transitions]
