"""Content item API schemas: create, read, transition, history."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ContentItemCreateRequest(BaseModel):
    """Request body for creating a content item under its type's default workflow."""

    content_type: str = Field(..., min_length=1, max_length=128)
    title: str = Field(..., min_length=1, max_length=512)


class ContentItemResponse(BaseModel):
    """Content item with its current workflow state."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    content_type: str
    title: str
    owner_id: str | None
    workflow_definition_id: str | None
    workflow_state: str
    last_reviewer_id: str | None
    last_reviewed_at: datetime | None
    review_comment: str | None
    published_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TransitionExecuteRequest(BaseModel):
    """Request body for POST /content-items/{id}/transitions."""

    transition_id: str = Field(..., min_length=1)
    comment: str | None = Field(default=None, max_length=4000)
    expected_state: str | None = Field(
        default=None, description="State the caller last saw; mismatch returns 409"
    )


class TransitionResultResponse(BaseModel):
    """Outcome of an executed transition."""

    model_config = ConfigDict(from_attributes=True)

    content_id: str
    transition_id: str
    transition_name: str
    from_state: str
    to_state: str
    executed_at: datetime
    notified: bool


class WorkflowHistoryResponse(BaseModel):
    """One executed transition."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    content_item_id: str
    workflow_definition_id: str | None
    transition_id: str | None
    transition_name: str
    from_state_key: str
    to_state_key: str
    actor_id: str | None
    comment: str | None
    created_at: datetime
