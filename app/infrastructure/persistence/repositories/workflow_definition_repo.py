"""Workflow definition repository (implements IWorkflowDefinitionRepository).

Maps the definition aggregate to its five tables. Save reconciles child
collections by id in two flushes: removals first, then updates and inserts,
so a key freed by a removed child can be reused in the same save.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)
from app.infrastructure.persistence.models.workflow import (
    WorkflowDefinition,
    WorkflowRole,
    WorkflowRolePermission,
    WorkflowState,
    WorkflowTransition,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid

_DEFINITION_FIELDS = (
    "name",
    "description",
    "is_default",
    "is_active",
    "initial_state_key",
)
_STATE_FIELDS = (
    "key",
    "name",
    "description",
    "color",
    "icon",
    "sort_order",
    "is_published",
    "is_initial",
    "is_final",
)
_TRANSITION_FIELDS = (
    "from_state_key",
    "to_state_key",
    "name",
    "description",
    "required_role_key",
    "css_class",
    "icon",
    "sort_order",
    "requires_comment",
    "send_notification",
    "notification_template",
)
_ROLE_FIELDS = (
    "role_key",
    "name",
    "description",
    "priority",
    "can_create",
    "can_edit",
    "can_delete",
    "can_view_all",
    "allowed_from_states",
    "allowed_to_states",
    "sort_order",
)
_GRANT_FIELDS = ("can_execute", "requires_approval", "conditions", "from_required_role")


def _advisory_lock_key(content_type: str) -> int:
    """Stable 63-bit key for pg_advisory_xact_lock (default selection per content type)."""
    raw = hashlib.sha256(f"workflow-default:{content_type}".encode()).digest()[:8]
    return int.from_bytes(raw, "big") % (2**63)


def _copy(target: Any, source: Any, fields: tuple[str, ...]) -> None:
    for name in fields:
        setattr(target, name, getattr(source, name))


def _values(source: Any, fields: tuple[str, ...]) -> dict[str, Any]:
    return {name: getattr(source, name) for name in fields}


def _state_to_entity(s: WorkflowState) -> WorkflowStateEntity:
    return WorkflowStateEntity(id=s.id, **_values(s, _STATE_FIELDS))


def _role_to_entity(r: WorkflowRole) -> WorkflowRoleEntity:
    return WorkflowRoleEntity(id=r.id, **_values(r, _ROLE_FIELDS))


def _transition_to_entity(
    t: WorkflowTransition, role_keys: dict[str, str]
) -> WorkflowTransitionEntity:
    """Map a transition; role_keys maps grant role_id to the role's key."""
    grants = [
        WorkflowRolePermissionEntity(
            id=g.id,
            role_key=role_keys.get(g.role_id, g.role_id),
            **_values(g, _GRANT_FIELDS),
        )
        for g in t.role_permissions
    ]
    return WorkflowTransitionEntity(
        id=t.id, role_permissions=grants, **_values(t, _TRANSITION_FIELDS)
    )


def _definition_to_entity(d: WorkflowDefinition) -> WorkflowDefinitionEntity:
    """Map ORM WorkflowDefinition (children loaded) to the domain aggregate."""
    role_keys = {r.id: r.role_key for r in d.roles}
    return WorkflowDefinitionEntity(
        id=d.id,
        content_types=list(d.content_types or []),
        states=[_state_to_entity(s) for s in d.states],
        transitions=[_transition_to_entity(t, role_keys) for t in d.transitions],
        roles=[_role_to_entity(r) for r in d.roles],
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
        **_values(d, _DEFINITION_FIELDS),
    )


def _remove_missing(collection: list[Any], keep_ids: set[str]) -> None:
    """Drop rows whose id is not in keep_ids (delete-orphan deletes them on flush)."""
    for row in [r for r in collection if r.id not in keep_ids]:
        collection.remove(row)


def _upsert_children(
    collection: list[Any],
    entities: Iterable[Any],
    model: type,
    fields: tuple[str, ...],
    **new_row_kwargs: Any,
) -> dict[str, Any]:
    """Update rows matched by id, append new ones; return rows by id."""
    existing = {r.id: r for r in collection}
    rows: dict[str, Any] = {}
    for entity in entities:
        row = existing.get(entity.id)
        if row is None:
            row = model(id=entity.id, **new_row_kwargs)
            collection.append(row)
        _copy(row, entity, fields)
        rows[entity.id] = row
    return rows


class WorkflowDefinitionRepository(BaseRepository[WorkflowDefinition]):
    """Workflow definition store. Children load eagerly (selectin) with the definition."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowDefinition)

    async def get_by_id(self, definition_id: str) -> WorkflowDefinitionEntity | None:
        row = await self._get_row(definition_id)
        return _definition_to_entity(row) if row else None

    async def get_all(self, include_inactive: bool = True) -> list[WorkflowDefinitionEntity]:
        q = select(WorkflowDefinition)
        if not include_inactive:
            q = q.where(WorkflowDefinition.is_active.is_(True))
        result = await self.db.execute(q.order_by(WorkflowDefinition.name.asc()))
        return [_definition_to_entity(d) for d in result.scalars().all()]

    async def get_by_content_type(
        self, content_type: str
    ) -> list[WorkflowDefinitionEntity]:
        """Active definitions listing content_type (JSON membership checked in Python)."""
        result = await self.db.execute(
            select(WorkflowDefinition)
            .where(WorkflowDefinition.is_active.is_(True))
            .order_by(WorkflowDefinition.name.asc())
        )
        return [
            _definition_to_entity(d)
            for d in result.scalars().all()
            if content_type in (d.content_types or [])
        ]

    async def get_default_by_content_type(
        self, content_type: str
    ) -> WorkflowDefinitionEntity | None:
        result = await self.db.execute(
            select(WorkflowDefinition)
            .where(
                WorkflowDefinition.is_active.is_(True),
                WorkflowDefinition.is_default.is_(True),
            )
            .order_by(WorkflowDefinition.updated_at.desc())
        )
        for d in result.scalars().all():
            if content_type in (d.content_types or []):
                return _definition_to_entity(d)
        return None

    async def save(self, definition: WorkflowDefinitionEntity) -> WorkflowDefinitionEntity:
        """Upsert the definition and reconcile states, roles, transitions and grants by id."""
        row = await self._get_row(definition.id)
        await self._reassign_foreign_ids(row, definition)
        if row is None:
            # Empty collections up front: nothing to lazy-load after the first flush.
            row = WorkflowDefinition(id=definition.id, states=[], transitions=[], roles=[])
            self.db.add(row)
        else:
            row.updated_at = utc_now()
        _copy(row, definition, _DEFINITION_FIELDS)
        row.content_types = list(definition.content_types)

        # Phase 1: removals. A grant whose role changes is removed and re-inserted.
        role_ids_by_key = {r.role_key: r.id for r in definition.roles}
        existing_transitions = {t.id: t for t in row.transitions}
        for t_entity in definition.transitions:
            t_row = existing_transitions.get(t_entity.id)
            if t_row is None:
                continue
            wanted = {g.id: role_ids_by_key.get(g.role_key) for g in t_entity.role_permissions}
            for g_row in list(t_row.role_permissions):
                if wanted.get(g_row.id) != g_row.role_id:
                    t_row.role_permissions.remove(g_row)
        _remove_missing(row.transitions, {t.id for t in definition.transitions})
        _remove_missing(row.states, {s.id for s in definition.states})
        _remove_missing(row.roles, {r.id for r in definition.roles})
        await self.db.flush()

        # Phase 2: updates and inserts.
        _upsert_children(row.states, definition.states, WorkflowState, _STATE_FIELDS)
        role_rows = _upsert_children(row.roles, definition.roles, WorkflowRole, _ROLE_FIELDS)
        role_rows_by_key = {r.role_key: r for r in role_rows.values()}
        transition_rows = _upsert_children(
            row.transitions,
            definition.transitions,
            WorkflowTransition,
            _TRANSITION_FIELDS,
            role_permissions=[],
        )
        for t_entity in definition.transitions:
            t_row = transition_rows[t_entity.id]
            existing_grants = {g.id: g for g in t_row.role_permissions}
            for grant in t_entity.role_permissions:
                g_row = existing_grants.get(grant.id)
                if g_row is None:
                    g_row = WorkflowRolePermission(
                        id=grant.id, role=role_rows_by_key[grant.role_key]
                    )
                    t_row.role_permissions.append(g_row)
                _copy(g_row, grant, _GRANT_FIELDS)
        await self.db.flush()

        saved = await self._get_row(definition.id, refresh=True)
        return _definition_to_entity(saved)

    async def _reassign_foreign_ids(
        self, row: WorkflowDefinition | None, definition: WorkflowDefinitionEntity
    ) -> None:
        """Give fresh ids to incoming children whose id belongs to another definition.

        Ids this definition already owns are kept, as are unused ids, so a
        body copied from another definition saves as new children.
        """
        states = row.states if row is not None else []
        roles = row.roles if row is not None else []
        transitions = row.transitions if row is not None else []
        owned_grants = {g.id for t in transitions for g in t.role_permissions}
        grants = [g for t in definition.transitions for g in t.role_permissions]
        groups: list[tuple[type, set[str], list[Any]]] = [
            (WorkflowState, {s.id for s in states}, list(definition.states)),
            (WorkflowRole, {r.id for r in roles}, list(definition.roles)),
            (WorkflowTransition, {t.id for t in transitions}, list(definition.transitions)),
            (WorkflowRolePermission, owned_grants, grants),
        ]
        for model, owned, entities in groups:
            candidates = {e.id for e in entities if e.id not in owned}
            if not candidates:
                continue
            result = await self.db.execute(select(model.id).where(model.id.in_(candidates)))
            taken = set(result.scalars().all())
            for entity in entities:
                if entity.id in taken:
                    entity.id = generate_cuid()

    async def delete(self, definition_id: str) -> bool:
        row = await self._get_row(definition_id)
        if row is None:
            return False
        await self._delete(row)
        return True

    async def lock_content_types(self, content_types: Iterable[str]) -> None:
        """Take a transaction-scoped advisory lock per content type (PostgreSQL only).

        Keys are taken in sorted order so two savers never deadlock.
        """
        if self._dialect_name() != "postgresql":
            return
        for content_type in sorted(set(content_types)):
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": _advisory_lock_key(content_type)},
            )

    async def clear_other_defaults(
        self, definition_id: str, content_types: Iterable[str]
    ) -> list[str]:
        wanted = set(content_types)
        result = await self.db.execute(
            select(WorkflowDefinition.id, WorkflowDefinition.content_types).where(
                WorkflowDefinition.id != definition_id,
                WorkflowDefinition.is_active.is_(True),
                WorkflowDefinition.is_default.is_(True),
            )
        )
        demoted = [
            other_id
            for other_id, other_types in result.all()
            if wanted.intersection(other_types or [])
        ]
        if demoted:
            await self.db.execute(
                update(WorkflowDefinition)
                .where(WorkflowDefinition.id.in_(demoted))
                .values(is_default=False, updated_at=utc_now())
                .execution_options(synchronize_session="fetch")
            )
        return demoted

    async def get_state_by_id(self, state_id: str) -> WorkflowStateEntity | None:
        result = await self.db.execute(
            select(WorkflowState).where(WorkflowState.id == state_id)
        )
        row = result.scalar_one_or_none()
        return _state_to_entity(row) if row else None

    async def get_transition_by_id(
        self, transition_id: str
    ) -> WorkflowTransitionEntity | None:
        result = await self.db.execute(
            select(WorkflowTransition).where(WorkflowTransition.id == transition_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        keys = await self.db.execute(
            select(WorkflowRole.id, WorkflowRole.role_key).where(
                WorkflowRole.workflow_definition_id == row.workflow_definition_id
            )
        )
        return _transition_to_entity(row, dict(keys.tuples().all()))

    async def get_role_by_id(self, role_id: str) -> WorkflowRoleEntity | None:
        result = await self.db.execute(
            select(WorkflowRole).where(WorkflowRole.id == role_id)
        )
        row = result.scalar_one_or_none()
        return _role_to_entity(row) if row else None
