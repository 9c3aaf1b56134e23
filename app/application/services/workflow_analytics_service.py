"""Workflow analytics: state distribution, transition counts, dwell time, bottlenecks."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta

from app.application.dtos.workflow import WorkflowAnalyticsResult, WorkflowBottleneck
from app.application.interfaces.repositories import (
    IContentItemRepository,
    IWorkflowDefinitionRepository,
)
from app.domain.entities import WorkflowHistoryEntry
from app.domain.exceptions import ValidationException, WorkflowNotFoundException
from app.shared.utils import ensure_utc, utc_now

DEFAULT_WINDOW = timedelta(days=30)


def _dwell_samples(
    history: list[WorkflowHistoryEntry],
) -> dict[str, list[tuple[str, timedelta]]]:
    """Per state, (content_id, time spent) for each state entered and later left."""
    by_item: dict[str, list[WorkflowHistoryEntry]] = defaultdict(list)
    for entry in history:
        by_item[entry.content_item_id].append(entry)

    samples: dict[str, list[tuple[str, timedelta]]] = defaultdict(list)
    for content_id, entries in by_item.items():
        entries.sort(key=lambda e: e.created_at)
        for entered, left in zip(entries, entries[1:]):
            samples[entered.to_state_key].append(
                (content_id, left.created_at - entered.created_at)
            )
    return samples


class WorkflowAnalyticsService:
    """Aggregates content items and history for one workflow definition."""

    def __init__(
        self,
        definition_repo: IWorkflowDefinitionRepository,
        content_repo: IContentItemRepository,
        bottleneck_threshold: timedelta,
    ) -> None:
        self._definition_repo = definition_repo
        self._content_repo = content_repo
        self._bottleneck_threshold = bottleneck_threshold

    async def get_workflow_analytics(
        self,
        definition_id: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> WorkflowAnalyticsResult:
        """Analytics for definition_id over [from_date, to_date] (default: last 30 days).

        State distribution counts current items regardless of the window.
        Dwell time is measured between consecutive history rows of one item.
        """
        definition = await self._definition_repo.get_by_id(definition_id)
        if definition is None:
            raise WorkflowNotFoundException(definition_id=definition_id)

        to_date = ensure_utc(to_date) if to_date else utc_now()
        from_date = ensure_utc(from_date) if from_date else to_date - DEFAULT_WINDOW
        if from_date > to_date:
            raise ValidationException("from_date must not be after to_date", field="from_date")

        distribution = await self._content_repo.count_by_state(definition_id)
        history = await self._content_repo.list_history_for_definition(
            definition_id, from_date, to_date
        )
        transition_counts = dict(Counter(e.transition_name for e in history))

        average_state_time: dict[str, timedelta] = {}
        bottlenecks: list[WorkflowBottleneck] = []
        for state_key, samples in _dwell_samples(history).items():
            total = sum((d for _, d in samples), timedelta())
            average = total / len(samples)
            average_state_time[state_key] = average
            if average > self._bottleneck_threshold:
                state = definition.get_state(state_key)
                label = state.name if state else state_key
                hours = average.total_seconds() / 3600
                bottlenecks.append(
                    WorkflowBottleneck(
                        state_key=state_key,
                        average_wait_time=average,
                        content_count=len({cid for cid, _ in samples}),
                        description=f"Content waits {hours:.1f}h on average in {label}",
                    )
                )
        bottlenecks.sort(key=lambda b: b.average_wait_time, reverse=True)

        return WorkflowAnalyticsResult(
            definition_id=definition_id,
            from_date=from_date,
            to_date=to_date,
            state_distribution=distribution,
            average_state_time=average_state_time,
            transition_counts=transition_counts,
            bottlenecks=bottlenecks,
        )
