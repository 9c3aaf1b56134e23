"""Execute transition use case: move one content item along its workflow.

Read, checks, compare-and-set and history append share one transaction.
Notification runs after commit and never undoes or fails the transition.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.workflow import TransitionResult
from app.application.interfaces.repositories import IContentItemRepository
from app.application.interfaces.services import INotificationDispatcher
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.domain.entities import (
    ContentWorkflowItemEntity,
    WorkflowDefinitionEntity,
    WorkflowTransitionEntity,
)
from app.domain.exceptions import (
    AuthorizationException,
    CommentRequiredException,
    ConcurrencyConflictException,
    ResourceNotFoundException,
)
from app.shared.context import ActorContext
from app.shared.telemetry.logging import get_logger
from app.shared.utils import sanitize_text, utc_now

logger = get_logger(__name__)

DEFAULT_NOTIFICATION_TEMPLATE = "workflow_transition"


class TransitionExecutor:
    """Executes a workflow transition on a content item (atomic, optimistic)."""

    def __init__(
        self,
        db: AsyncSession,
        definition_service: WorkflowDefinitionService,
        content_repo: IContentItemRepository,
        notifier: INotificationDispatcher | None = None,
    ) -> None:
        self.db = db
        self._definitions = definition_service
        self._content_repo = content_repo
        self._notifier = notifier

    async def execute(
        self,
        content_id: str,
        transition_id: str,
        actor: ActorContext,
        comment: str | None = None,
        expected_state: str | None = None,
    ) -> TransitionResult:
        """Apply transition_id to content_id on behalf of actor.

        Args:
            content_id: Content item id.
            transition_id: Transition to execute (must belong to the governing workflow).
            actor: Acting user; role_keys decide legality.
            comment: Review comment (markup stripped); required by some transitions.
            expected_state: State the caller last saw; a mismatch is a conflict.

        Returns:
            TransitionResult with the new state and whether a notification went out.

        Raises:
            ResourceNotFoundException: Unknown content item or transition.
            WorkflowNotFoundException: No workflow governs the content item.
            ConcurrencyConflictException: The item is not in the state the transition leaves from.
            AuthorizationException: The actor may not execute the transition.
            CommentRequiredException: The transition needs a comment and none was given.
        """
        clean_comment = sanitize_text(comment)

        async with self.db.begin():
            content = await self._content_repo.get_by_id(content_id)
            if content is None:
                raise ResourceNotFoundException("content_item", content_id)
            definition = await self._definitions.get_governing_definition(
                content.content_type, content.workflow_definition_id
            )
            transition = definition.get_transition(transition_id)
            if transition is None:
                raise ResourceNotFoundException("workflow_transition", transition_id)

            current = content.workflow_state
            if expected_state is not None and expected_state != current:
                logger.info(
                    "Conflict on %s: caller expected %r, item is in %r",
                    content_id,
                    expected_state,
                    current,
                )
                raise ConcurrencyConflictException(content_id, expected_state, current)
            if transition.from_state_key != current:
                logger.info(
                    "Conflict on %s: transition %r leaves %r, item is in %r",
                    content_id,
                    transition.name,
                    transition.from_state_key,
                    current,
                )
                raise ConcurrencyConflictException(
                    content_id, transition.from_state_key, current
                )

            available = self._definitions.available_transitions_in(
                definition, current, actor.role_keys
            )
            if all(t.id != transition.id for t in available):
                raise AuthorizationException(
                    resource="workflow_transition", action="execute"
                )
            if transition.requires_comment and not clean_comment:
                raise CommentRequiredException(transition.name)

            executed_at = utc_now()
            target = definition.get_state(transition.to_state_key)
            if target is not None and target.is_published:
                published_at = content.published_at or executed_at
            else:
                published_at = None

            updated = await self._content_repo.compare_and_set_state(
                content_id,
                expected_state=current,
                new_state=transition.to_state_key,
                reviewer_id=actor.actor_id,
                reviewed_at=executed_at,
                comment=clean_comment,
                published_at=published_at,
            )
            if not updated:
                logger.info("Conflict on %s: state changed during %r", content_id, transition.name)
                raise ConcurrencyConflictException(content_id, current)

            await self._content_repo.add_history(
                content_item_id=content_id,
                workflow_definition_id=definition.id,
                transition_id=transition.id,
                transition_name=transition.name,
                from_state_key=current,
                to_state_key=transition.to_state_key,
                actor_id=actor.actor_id,
                comment=clean_comment,
                created_at=executed_at,
            )

        logger.info(
            "Content %s: %s -> %s via %r by %s",
            content_id,
            current,
            transition.to_state_key,
            transition.name,
            actor.actor_id or "anonymous",
        )

        notified = False
        if transition.send_notification and self._notifier is not None:
            notified = await self._notify(
                content, definition, transition, actor, clean_comment
            )

        return TransitionResult(
            content_id=content_id,
            transition_id=transition.id,
            transition_name=transition.name,
            from_state=current,
            to_state=transition.to_state_key,
            executed_at=executed_at,
            notified=notified,
        )

    async def _notify(
        self,
        content: ContentWorkflowItemEntity,
        definition: WorkflowDefinitionEntity,
        transition: WorkflowTransitionEntity,
        actor: ActorContext,
        comment: str | None,
    ) -> bool:
        """Dispatch the transition notification. Failures are logged, never raised."""
        from_state = definition.get_state(transition.from_state_key)
        to_state = definition.get_state(transition.to_state_key)
        context: dict[str, Any] = {
            "content_id": content.id,
            "content_title": content.title,
            "content_type": content.content_type,
            "actor_name": actor.display_name,
            "from_state": transition.from_state_key,
            "from_state_name": from_state.name if from_state else transition.from_state_key,
            "to_state": transition.to_state_key,
            "to_state_name": to_state.name if to_state else transition.to_state_key,
            "transition_name": transition.name,
            "comment": comment,
        }
        template_key = transition.notification_template or DEFAULT_NOTIFICATION_TEMPLATE
        try:
            await self._notifier.notify(template_key, context)
        except Exception:
            logger.exception(
                "Notification for %r on content %s failed; transition stays committed",
                transition.name,
                content.id,
            )
            return False
        return True
