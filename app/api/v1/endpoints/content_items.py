"""Content item API: create, read, execute transitions, history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_content_item_service,
    get_content_item_service_for_write,
    get_current_actor,
    get_transition_executor,
)
from app.application.use_cases.workflows import ContentItemService, TransitionExecutor
from app.core.limiter import limit_transitions, limit_writes
from app.schemas.content import (
    ContentItemCreateRequest,
    ContentItemResponse,
    TransitionExecuteRequest,
    TransitionResultResponse,
    WorkflowHistoryResponse,
)
from app.shared.context import ActorContext

router = APIRouter()


@router.post("", response_model=ContentItemResponse, status_code=201)
@limit_writes
async def create_content_item(
    request: Request,
    body: ContentItemCreateRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    service: Annotated[ContentItemService, Depends(get_content_item_service_for_write)],
):
    """Create an item owned by the acting user, in its default workflow's initial state."""
    item = await service.create(body.content_type, body.title, actor.actor_id)
    return ContentItemResponse.model_validate(item)


@router.get("/{content_id}", response_model=ContentItemResponse)
async def get_content_item(
    content_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    service: Annotated[ContentItemService, Depends(get_content_item_service)],
):
    """Return the item if the actor owns it or holds a role that can view all content."""
    item = await service.get_visible(content_id, actor)
    return ContentItemResponse.model_validate(item)


@router.post("/{content_id}/transitions", response_model=TransitionResultResponse)
@limit_transitions
async def execute_transition(
    request: Request,
    content_id: str,
    body: TransitionExecuteRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    executor: Annotated[TransitionExecutor, Depends(get_transition_executor)],
):
    """Execute a transition. 409 when the item moved since expected_state was read."""
    result = await executor.execute(
        content_id,
        body.transition_id,
        actor,
        comment=body.comment,
        expected_state=body.expected_state,
    )
    return TransitionResultResponse.model_validate(result)


@router.get("/{content_id}/history", response_model=list[WorkflowHistoryResponse])
async def get_content_history(
    content_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    service: Annotated[ContentItemService, Depends(get_content_item_service)],
):
    history = await service.list_history(content_id, actor)
    return [WorkflowHistoryResponse.model_validate(h) for h in history]
