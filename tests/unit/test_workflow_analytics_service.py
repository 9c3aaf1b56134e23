"""WorkflowAnalyticsService unit tests: distribution, counts, dwell time, bottlenecks."""

from datetime import UTC, datetime, timedelta

import pytest

from app.application.services.workflow_analytics_service import WorkflowAnalyticsService
from app.domain.exceptions import ValidationException, WorkflowNotFoundException

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


@pytest.fixture
async def workflow(definition_service):
    return await definition_service.create_default_workflow("Editorial", ["article"])


@pytest.fixture
def analytics(definition_repo, content_repo) -> WorkflowAnalyticsService:
    return WorkflowAnalyticsService(definition_repo, content_repo, timedelta(hours=48))


async def _history(content_repo, workflow, content_id, steps) -> None:
    """steps: (from_state, to_state, transition_name, at) tuples."""
    for from_state, to_state, name, at in steps:
        await content_repo.add_history(
            content_item_id=content_id,
            workflow_definition_id=workflow.id,
            transition_id=None,
            transition_name=name,
            from_state_key=from_state,
            to_state_key=to_state,
            actor_id="u1",
            comment=None,
            created_at=at,
        )


async def test_analytics_for_unknown_definition(analytics) -> None:
    with pytest.raises(WorkflowNotFoundException):
        await analytics.get_workflow_analytics("missing")


async def test_inverted_window_is_rejected(analytics, workflow) -> None:
    with pytest.raises(ValidationException):
        await analytics.get_workflow_analytics(workflow.id, T0, T0 - timedelta(days=1))


async def test_default_window_is_thirty_days(analytics, workflow) -> None:
    result = await analytics.get_workflow_analytics(workflow.id)
    assert result.to_date - result.from_date == timedelta(days=30)
    assert result.bottlenecks == []


async def test_distribution_counts_and_dwell_time(analytics, workflow, content_repo) -> None:
    a = await content_repo.create(
        content_type="article",
        title="A",
        owner_id="u1",
        workflow_definition_id=workflow.id,
        workflow_state="approved",
    )
    b = await content_repo.create(
        content_type="article",
        title="B",
        owner_id="u1",
        workflow_definition_id=workflow.id,
        workflow_state="in_review",
    )
    await _history(
        content_repo,
        workflow,
        a.id,
        [
            ("draft", "in_review", "Submit for Review", T0),
            ("in_review", "approved", "Approve", T0 + timedelta(hours=72)),
        ],
    )
    await _history(
        content_repo,
        workflow,
        b.id,
        [
            ("draft", "in_review", "Submit for Review", T0 + timedelta(hours=1)),
            ("in_review", "rejected", "Reject", T0 + timedelta(hours=97)),
            ("rejected", "draft", "Back to Draft", T0 + timedelta(hours=98)),
            ("draft", "in_review", "Submit for Review", T0 + timedelta(hours=99)),
        ],
    )

    result = await analytics.get_workflow_analytics(
        workflow.id, T0 - timedelta(days=1), T0 + timedelta(days=10)
    )

    assert result.state_distribution == {"approved": 1, "in_review": 1}
    assert result.transition_counts == {
        "Submit for Review": 3,
        "Approve": 1,
        "Reject": 1,
        "Back to Draft": 1,
    }
    # in_review: 72h (a) and 96h (b) -> 84h average
    assert result.average_state_time["in_review"] == timedelta(hours=84)
    assert result.average_state_time["rejected"] == timedelta(hours=1)
    assert result.average_state_time["draft"] == timedelta(hours=1)

    [bottleneck] = result.bottlenecks
    assert bottleneck.state_key == "in_review"
    assert bottleneck.content_count == 2
    assert bottleneck.description == "Content waits 84.0h on average in In Review"


async def test_history_outside_window_is_ignored(analytics, workflow, content_repo) -> None:
    await _history(
        content_repo,
        workflow,
        "c1",
        [("draft", "in_review", "Submit for Review", T0 - timedelta(days=60))],
    )
    result = await analytics.get_workflow_analytics(workflow.id, T0, T0 + timedelta(days=1))
    assert result.transition_counts == {}
    assert result.average_state_time == {}
