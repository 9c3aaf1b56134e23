"""Content item use cases: create in the initial state, read with visibility, history."""

from __future__ import annotations

from app.application.interfaces.repositories import IContentItemRepository
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.domain.entities import ContentWorkflowItemEntity, WorkflowHistoryEntry
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
    WorkflowNotFoundException,
)
from app.shared.context import ActorContext
from app.shared.telemetry.logging import get_logger
from app.shared.utils import sanitize_text

logger = get_logger(__name__)

TITLE_MAX_LENGTH = 255


class ContentItemService:
    """Creates content items under workflow control and reads them back."""

    def __init__(
        self,
        definition_service: WorkflowDefinitionService,
        content_repo: IContentItemRepository,
    ) -> None:
        self._definitions = definition_service
        self._content_repo = content_repo

    async def create(
        self,
        content_type: str,
        title: str,
        owner_id: str | None,
    ) -> ContentWorkflowItemEntity:
        """Create an item in the initial state of its content type's default workflow.

        Raises:
            ValidationException: Blank or over-long title.
            WorkflowNotFoundException: No default workflow for content_type.
        """
        clean_title = sanitize_text(title)
        if not clean_title:
            raise ValidationException("Title is required", field="title")
        if len(clean_title) > TITLE_MAX_LENGTH:
            raise ValidationException(
                f"Title must be at most {TITLE_MAX_LENGTH} characters", field="title"
            )
        definition = await self._definitions.get_default(content_type)
        item = await self._content_repo.create(
            content_type=content_type,
            title=clean_title,
            owner_id=owner_id,
            workflow_definition_id=definition.id,
            workflow_state=definition.initial_state_key,
        )
        logger.info(
            "Created content %s (%s) in %r under workflow %s",
            item.id,
            content_type,
            item.workflow_state,
            definition.id,
        )
        return item

    async def get(self, content_id: str) -> ContentWorkflowItemEntity:
        item = await self._content_repo.get_by_id(content_id)
        if item is None:
            raise ResourceNotFoundException("content_item", content_id)
        return item

    async def can_view(self, item: ContentWorkflowItemEntity, actor: ActorContext) -> bool:
        """Owner, or an effective role with can_view_all in the governing workflow."""
        if item.is_owned_by(actor.actor_id):
            return True
        try:
            definition = await self._definitions.get_governing_definition(
                item.content_type, item.workflow_definition_id
            )
        except WorkflowNotFoundException:
            return False
        return self._definitions.evaluator.can_view(
            definition.roles, item.owner_id, actor.actor_id, actor.role_keys
        )

    async def get_visible(
        self, content_id: str, actor: ActorContext
    ) -> ContentWorkflowItemEntity:
        """Return the item if actor may see it.

        Raises:
            ResourceNotFoundException: Unknown content id.
            AuthorizationException: Actor is neither owner nor a can_view_all role.
        """
        item = await self.get(content_id)
        if not await self.can_view(item, actor):
            raise AuthorizationException(resource="content_item", action="view")
        return item

    async def list_history(
        self, content_id: str, actor: ActorContext
    ) -> list[WorkflowHistoryEntry]:
        """Executed transitions of a visible item, oldest first."""
        await self.get_visible(content_id, actor)
        return await self._content_repo.list_history(content_id)
