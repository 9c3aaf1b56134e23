"""DTOs for workflow use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class DefinitionValidationResult:
    """Outcome of validating a workflow definition. Errors block save; warnings do not."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class TransitionResult:
    """Result of a committed transition (execute_transition)."""

    content_id: str
    transition_id: str
    transition_name: str
    from_state: str
    to_state: str
    executed_at: datetime
    notified: bool


@dataclass(frozen=True)
class WorkflowBottleneck:
    """A state where content waits longer than the configured threshold."""

    state_key: str
    average_wait_time: timedelta
    content_count: int
    description: str


@dataclass(frozen=True)
class WorkflowAnalyticsResult:
    """Per-definition analytics over a date window."""

    definition_id: str
    from_date: datetime
    to_date: datetime
    state_distribution: dict[str, int]
    average_state_time: dict[str, timedelta]
    transition_counts: dict[str, int]
    bottlenecks: list[WorkflowBottleneck]
