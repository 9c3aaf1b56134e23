"""Workflow definition service: validation, default selection, available transitions.

Orchestrates the definition store, the permission evaluator and the role
resolver. Writes run inside the caller's transaction (get_db_transactional);
the service itself never commits.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable

from app.application.dtos.workflow import DefinitionValidationResult
from app.application.interfaces.repositories import IWorkflowDefinitionRepository
from app.application.interfaces.services import IRoleResolver
from app.application.services.default_workflow import build_default_workflow
from app.application.services.workflow_definition_validator import validate_definition
from app.application.services.workflow_permission_evaluator import (
    WorkflowPermissionEvaluator,
)
from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)
from app.domain.exceptions import (
    ResourceNotFoundException,
    WorkflowNotFoundException,
    WorkflowValidationException,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def normalize_role_grants(definition: WorkflowDefinitionEntity) -> None:
    """Keep the required-role shorthand and its grant row in step (in place).

    A grant generated from required_role_key is dropped when the key changes
    or is cleared, then regenerated for the current key. Explicit grants win:
    no shorthand grant is added next to them. When the required role has no
    workflow role, required_role_key stays as the fallback check.
    """
    for transition in definition.transitions:
        key = transition.required_role_key or None
        if key and definition.get_role(key) is None:
            key = None
        grants = [
            g
            for g in transition.role_permissions
            if not g.from_required_role or g.role_key == key
        ]
        explicit = [g for g in grants if not g.from_required_role]
        if explicit:
            grants = explicit
        elif key and not grants:
            grants = [
                WorkflowRolePermissionEntity(
                    role_key=key, can_execute=True, from_required_role=True
                )
            ]
        transition.role_permissions = grants


class WorkflowDefinitionService:
    """Definition CRUD, validation, default workflow construction, transition lookup."""

    def __init__(
        self,
        definition_repo: IWorkflowDefinitionRepository,
        role_resolver: IRoleResolver,
        evaluator: WorkflowPermissionEvaluator | None = None,
    ) -> None:
        self._repo = definition_repo
        self._role_resolver = role_resolver
        self._evaluator = evaluator or WorkflowPermissionEvaluator()

    @property
    def evaluator(self) -> WorkflowPermissionEvaluator:
        return self._evaluator

    # ---- Queries ----

    async def get(self, definition_id: str) -> WorkflowDefinitionEntity:
        """Return the definition or raise WorkflowNotFoundException."""
        definition = await self._repo.get_by_id(definition_id)
        if definition is None:
            raise WorkflowNotFoundException(definition_id=definition_id)
        return definition

    async def list(self, include_inactive: bool = True) -> list[WorkflowDefinitionEntity]:
        return await self._repo.get_all(include_inactive=include_inactive)

    async def list_by_content_type(
        self, content_type: str
    ) -> list[WorkflowDefinitionEntity]:
        """Active definitions governing content_type."""
        return await self._repo.get_by_content_type(content_type)

    async def get_default(self, content_type: str) -> WorkflowDefinitionEntity:
        """Return the active default for content_type or raise WorkflowNotFoundException."""
        definition = await self._repo.get_default_by_content_type(content_type)
        if definition is None:
            raise WorkflowNotFoundException(content_type=content_type)
        return definition

    async def get_governing_definition(
        self,
        content_type: str,
        definition_id: str | None = None,
    ) -> WorkflowDefinitionEntity:
        """Definition assigned to a content item, else the content type's default."""
        if definition_id:
            definition = await self._repo.get_by_id(definition_id)
            if definition is not None:
                return definition
        return await self.get_default(content_type)

    async def get_state(self, state_id: str) -> WorkflowStateEntity:
        state = await self._repo.get_state_by_id(state_id)
        if state is None:
            raise ResourceNotFoundException("workflow_state", state_id)
        return state

    async def get_transition(self, transition_id: str) -> WorkflowTransitionEntity:
        transition = await self._repo.get_transition_by_id(transition_id)
        if transition is None:
            raise ResourceNotFoundException("workflow_transition", transition_id)
        return transition

    async def get_role(self, role_id: str) -> WorkflowRoleEntity:
        role = await self._repo.get_role_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("workflow_role", role_id)
        return role

    # ---- Validation and writes ----

    def validate(self, definition: WorkflowDefinitionEntity) -> DefinitionValidationResult:
        """Return errors and warnings without saving (grants normalized on a copy)."""
        candidate = copy.deepcopy(definition)
        normalize_role_grants(candidate)
        return validate_definition(candidate)

    async def save(self, definition: WorkflowDefinitionEntity) -> WorkflowDefinitionEntity:
        """Normalize grants, validate and upsert the definition.

        When the definition is an active default, other active definitions
        sharing any of its content types are demoted in the same transaction.

        Raises:
            WorkflowValidationException: With every error; nothing is written.
        """
        normalize_role_grants(definition)
        result = validate_definition(definition)
        if not result.is_valid:
            raise WorkflowValidationException(result.errors, result.warnings)
        for warning in result.warnings:
            logger.warning("Workflow %s (%r): %s", definition.id, definition.name, warning)

        claims_default = definition.is_default and definition.is_active
        if claims_default:
            await self._repo.lock_content_types(definition.content_types)
        saved = await self._repo.save(definition)
        if claims_default:
            demoted = await self._repo.clear_other_defaults(
                saved.id, saved.content_types
            )
            if demoted:
                logger.info(
                    "Workflow %s is now default for %s; demoted %s",
                    saved.id,
                    ", ".join(saved.content_types),
                    ", ".join(demoted),
                )
        logger.info(
            "Saved workflow %s (%r): %d states, %d transitions, %d roles",
            saved.id,
            saved.name,
            len(saved.states),
            len(saved.transitions),
            len(saved.roles),
        )
        return saved

    async def delete(self, definition_id: str) -> None:
        """Delete a definition and everything it owns."""
        deleted = await self._repo.delete(definition_id)
        if not deleted:
            raise WorkflowNotFoundException(definition_id=definition_id)
        logger.info("Deleted workflow %s", definition_id)

    async def create_default_workflow(
        self,
        name: str,
        content_types: list[str],
    ) -> WorkflowDefinitionEntity:
        """Build the canonical editorial workflow and save it as default for content_types."""
        definition = await build_default_workflow(name, content_types, self._role_resolver)
        return await self.save(definition)

    # ---- Transition lookup ----

    async def get_available_transitions(
        self,
        content_type: str,
        current_state_key: str,
        actor_role_keys: Iterable[str],
    ) -> list[WorkflowTransitionEntity]:
        """Transitions from current_state_key the actor may execute under the default workflow.

        Empty (not an error) when no default workflow governs content_type.
        """
        definition = await self._repo.get_default_by_content_type(content_type)
        if definition is None:
            return []
        return self._evaluator.executable_transitions(
            definition, current_state_key, actor_role_keys
        )

    def available_transitions_in(
        self,
        definition: WorkflowDefinitionEntity,
        current_state_key: str,
        actor_role_keys: Iterable[str],
    ) -> list[WorkflowTransitionEntity]:
        """Same filter as get_available_transitions against an already-loaded definition."""
        return self._evaluator.executable_transitions(
            definition, current_state_key, actor_role_keys
        )

    async def validate_transition(
        self,
        content_type: str,
        from_state_key: str,
        to_state_key: str,
        actor_role_keys: Iterable[str],
    ) -> bool:
        """True iff an available transition goes from from_state_key to to_state_key."""
        available = await self.get_available_transitions(
            content_type, from_state_key, actor_role_keys
        )
        return any(t.to_state_key == to_state_key for t in available)

    # ---- Roles and visibility ----

    async def get_effective_roles(
        self,
        definition_id: str,
        actor_role_keys: Iterable[str],
    ) -> list[WorkflowRoleEntity]:
        definition = await self.get(definition_id)
        return self._evaluator.effective_roles(definition.roles, actor_role_keys)

    async def can_view_content(
        self,
        definition_id: str,
        content_owner_id: str | None,
        actor_id: str | None,
        actor_role_keys: Iterable[str],
    ) -> bool:
        """Owner, or an effective role with can_view_all."""
        definition = await self.get(definition_id)
        return self._evaluator.can_view(
            definition.roles, content_owner_id, actor_id, actor_role_keys
        )
