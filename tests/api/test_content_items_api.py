"""Content item and transition endpoints: the editorial flow end to end."""

import pytest
from httpx import AsyncClient

WRITER = {"X-Actor-ID": "w1", "X-Actor-Name": "Wendy", "X-Actor-Roles": "Writer"}
OTHER_WRITER = {"X-Actor-ID": "w2", "X-Actor-Roles": "Writer"}
EDITOR = {"X-Actor-ID": "e1", "X-Actor-Roles": "Editor"}
APPROVER = {"X-Actor-ID": "a1", "X-Actor-Roles": "Approver"}


@pytest.fixture
async def workflow(db_client: AsyncClient) -> dict:
    response = await db_client.post(
        "/api/v1/workflow-definitions/default", json={"content_types": ["article"]}
    )
    assert response.status_code == 201, response.text
    return response.json()


def _tid(workflow: dict, name: str) -> str:
    return next(t["id"] for t in workflow["transitions"] if t["name"] == name)


async def _create_item(db_client: AsyncClient) -> dict:
    response = await db_client.post(
        "/api/v1/content-items",
        json={"content_type": "article", "title": "Spring issue"},
        headers=WRITER,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _transition(db_client, item_id, transition_id, headers, **extra):
    return await db_client.post(
        f"/api/v1/content-items/{item_id}/transitions",
        json={"transition_id": transition_id, **extra},
        headers=headers,
    )


@pytest.mark.requires_db
async def test_editorial_flow(db_client: AsyncClient, workflow: dict) -> None:
    item = await _create_item(db_client)
    assert item["workflow_state"] == "draft"
    assert item["owner_id"] == "w1"

    submitted = await _transition(
        db_client, item["id"], _tid(workflow, "Submit for Review"), WRITER,
        expected_state="draft",
    )
    assert submitted.status_code == 200, submitted.text
    assert submitted.json()["to_state"] == "in_review"
    assert submitted.json()["notified"] is True

    approved = await _transition(db_client, item["id"], _tid(workflow, "Approve"), EDITOR)
    assert approved.status_code == 200
    published = await _transition(db_client, item["id"], _tid(workflow, "Publish"), APPROVER)
    assert published.status_code == 200

    current = (await db_client.get(f"/api/v1/content-items/{item['id']}", headers=WRITER)).json()
    assert current["workflow_state"] == "published"
    assert current["published_at"] is not None
    assert current["last_reviewer_id"] == "a1"

    history = await db_client.get(f"/api/v1/content-items/{item['id']}/history", headers=WRITER)
    assert [h["to_state_key"] for h in history.json()] == ["in_review", "approved", "published"]


@pytest.mark.requires_db
async def test_wrong_role_is_forbidden(db_client: AsyncClient, workflow: dict) -> None:
    item = await _create_item(db_client)
    await _transition(db_client, item["id"], _tid(workflow, "Submit for Review"), WRITER)

    response = await _transition(db_client, item["id"], _tid(workflow, "Approve"), WRITER)
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


@pytest.mark.requires_db
async def test_reject_needs_comment(db_client: AsyncClient, workflow: dict) -> None:
    item = await _create_item(db_client)
    await _transition(db_client, item["id"], _tid(workflow, "Submit for Review"), WRITER)

    missing = await _transition(db_client, item["id"], _tid(workflow, "Reject"), EDITOR)
    assert missing.status_code == 400
    assert missing.json()["error"] == "COMMENT_REQUIRED"

    rejected = await _transition(
        db_client, item["id"], _tid(workflow, "Reject"), EDITOR, comment="Tighten the intro"
    )
    assert rejected.status_code == 200
    current = (await db_client.get(f"/api/v1/content-items/{item['id']}", headers=EDITOR)).json()
    assert current["review_comment"] == "Tighten the intro"


@pytest.mark.requires_db
async def test_stale_expected_state_is_conflict(db_client: AsyncClient, workflow: dict) -> None:
    item = await _create_item(db_client)
    submit = _tid(workflow, "Submit for Review")
    await _transition(db_client, item["id"], submit, WRITER)

    response = await _transition(db_client, item["id"], submit, WRITER, expected_state="draft")
    assert response.status_code == 409
    assert response.json()["error"] == "CONCURRENCY_CONFLICT"


@pytest.mark.requires_db
async def test_visibility(db_client: AsyncClient, workflow: dict) -> None:
    item = await _create_item(db_client)
    url = f"/api/v1/content-items/{item['id']}"
    assert (await db_client.get(url, headers=WRITER)).status_code == 200
    assert (await db_client.get(url, headers=EDITOR)).status_code == 200
    assert (await db_client.get(url, headers=OTHER_WRITER)).status_code == 403
    assert (await db_client.get(f"{url}/history", headers=OTHER_WRITER)).status_code == 403
    assert (await db_client.get("/api/v1/content-items/nope", headers=WRITER)).status_code == 404


@pytest.mark.requires_db
async def test_create_without_default_workflow(db_client: AsyncClient) -> None:
    response = await db_client.post(
        "/api/v1/content-items",
        json={"content_type": "video", "title": "Clip"},
        headers=WRITER,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "WORKFLOW_NOT_FOUND"


@pytest.mark.requires_db
async def test_available_transitions(db_client: AsyncClient, workflow: dict) -> None:
    url = "/api/v1/workflow-transitions/available"
    writer = await db_client.get(
        url, params={"content_type": "article", "current_state": "draft"}, headers=WRITER
    )
    assert [t["name"] for t in writer.json()] == ["Submit for Review"]

    editor = await db_client.get(
        url, params={"content_type": "article", "current_state": "in_review"}, headers=EDITOR
    )
    assert [t["name"] for t in editor.json()] == ["Approve", "Reject"]

    none = await db_client.get(
        url, params={"content_type": "video", "current_state": "draft"}, headers=EDITOR
    )
    assert none.status_code == 200
    assert none.json() == []
