"""Unit test fixtures: in-memory repositories and small definition builders.

Fakes implement the repository protocols with plain dicts so services and
the transition executor can be tested without a database.
"""

import copy
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.services.default_workflow import build_default_workflow
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.domain.entities import (
    ContentWorkflowItemEntity,
    WorkflowDefinitionEntity,
    WorkflowHistoryEntry,
)
from app.infrastructure.services.role_resolver import ConfiguredRoleResolver
from app.shared.utils import generate_cuid, utc_now

IDENTITY_ROLES = ["Writer", "Editor", "Approver", "SysAdmin"]


class FakeDefinitionRepository:
    """In-memory IWorkflowDefinitionRepository. Returns copies, like a real store."""

    def __init__(self) -> None:
        self.definitions: dict[str, WorkflowDefinitionEntity] = {}
        self.locked: list[list[str]] = []

    async def get_by_id(self, definition_id):
        d = self.definitions.get(definition_id)
        return copy.deepcopy(d) if d else None

    async def get_all(self, include_inactive=True):
        rows = [d for d in self.definitions.values() if include_inactive or d.is_active]
        return [copy.deepcopy(d) for d in sorted(rows, key=lambda d: d.name)]

    async def get_by_content_type(self, content_type):
        return [
            copy.deepcopy(d)
            for d in self.definitions.values()
            if d.is_active and content_type in d.content_types
        ]

    async def get_default_by_content_type(self, content_type):
        for d in self.definitions.values():
            if d.is_active and d.is_default and content_type in d.content_types:
                return copy.deepcopy(d)
        return None

    async def save(self, definition):
        stored = copy.deepcopy(definition)
        stored.updated_at = utc_now()
        self.definitions[stored.id] = stored
        return copy.deepcopy(stored)

    async def delete(self, definition_id):
        return self.definitions.pop(definition_id, None) is not None

    async def lock_content_types(self, content_types):
        self.locked.append(sorted(set(content_types)))

    async def clear_other_defaults(self, definition_id, content_types):
        wanted = set(content_types)
        demoted = []
        for d in self.definitions.values():
            if (
                d.id != definition_id
                and d.is_active
                and d.is_default
                and wanted.intersection(d.content_types)
            ):
                d.is_default = False
                demoted.append(d.id)
        return demoted

    async def get_state_by_id(self, state_id):
        for d in self.definitions.values():
            for s in d.states:
                if s.id == state_id:
                    return copy.deepcopy(s)
        return None

    async def get_transition_by_id(self, transition_id):
        for d in self.definitions.values():
            t = d.get_transition(transition_id)
            if t is not None:
                return copy.deepcopy(t)
        return None

    async def get_role_by_id(self, role_id):
        for d in self.definitions.values():
            for r in d.roles:
                if r.id == role_id:
                    return copy.deepcopy(r)
        return None


class FakeContentRepository:
    """In-memory IContentItemRepository with a real compare-and-set."""

    def __init__(self) -> None:
        self.items: dict[str, ContentWorkflowItemEntity] = {}
        self.history: dict[str, list[WorkflowHistoryEntry]] = defaultdict(list)

    async def get_by_id(self, content_id):
        item = self.items.get(content_id)
        return copy.deepcopy(item) if item else None

    async def create(
        self, *, content_type, title, owner_id, workflow_definition_id, workflow_state
    ):
        item = ContentWorkflowItemEntity(
            id=generate_cuid(),
            content_type=content_type,
            title=title,
            owner_id=owner_id,
            workflow_definition_id=workflow_definition_id,
            workflow_state=workflow_state,
            created_at=utc_now(),
            updated_at=utc_now(),
        )
        self.items[item.id] = item
        return copy.deepcopy(item)

    async def compare_and_set_state(
        self,
        content_id,
        *,
        expected_state,
        new_state,
        reviewer_id,
        reviewed_at,
        comment,
        published_at,
    ):
        item = self.items.get(content_id)
        if item is None or item.workflow_state != expected_state:
            return False
        item.workflow_state = new_state
        item.last_reviewer_id = reviewer_id
        item.last_reviewed_at = reviewed_at
        item.review_comment = comment
        item.published_at = published_at
        item.updated_at = reviewed_at
        return True

    async def add_history(self, *, content_item_id, created_at, **fields):
        entry = WorkflowHistoryEntry(
            id=generate_cuid(),
            content_item_id=content_item_id,
            created_at=created_at,
            **fields,
        )
        self.history[content_item_id].append(entry)
        return entry

    async def list_history(self, content_id):
        return list(self.history[content_id])

    async def count_by_state(self, definition_id):
        counts: dict[str, int] = defaultdict(int)
        for item in self.items.values():
            if item.workflow_definition_id == definition_id:
                counts[item.workflow_state] += 1
        return dict(counts)

    async def list_history_for_definition(
        self, definition_id, from_date: datetime, to_date: datetime
    ):
        rows = [
            e
            for entries in self.history.values()
            for e in entries
            if e.workflow_definition_id == definition_id
            and from_date <= e.created_at <= to_date
        ]
        return sorted(rows, key=lambda e: e.created_at)


def mock_db() -> MagicMock:
    """AsyncSession stand-in whose begin() is an async context manager."""

    @asynccontextmanager
    async def _begin():
        yield

    db = MagicMock()
    db.begin = MagicMock(side_effect=_begin)
    return db


@pytest.fixture
def db() -> MagicMock:
    return mock_db()

@pytest.fixture
def role_resolver() -> ConfiguredRoleResolver:
    return ConfiguredRoleResolver(IDENTITY_ROLES)


@pytest.fixture
def definition_repo() -> FakeDefinitionRepository:
    return FakeDefinitionRepository()


@pytest.fixture
def content_repo() -> FakeContentRepository:
    return FakeContentRepository()


@pytest.fixture
def definition_service(definition_repo, role_resolver) -> WorkflowDefinitionService:
    return WorkflowDefinitionService(definition_repo, role_resolver)


@pytest.fixture
async def default_workflow(role_resolver) -> WorkflowDefinitionEntity:
    """Canonical editorial workflow for 'article' (not saved)."""
    return await build_default_workflow("Default Workflow", ["article"], role_resolver)


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()
