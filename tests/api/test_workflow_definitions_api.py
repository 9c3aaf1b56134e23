"""Workflow definition endpoints over a real (SQLite) database."""

import pytest
from httpx import AsyncClient

EDITOR = {"X-Actor-ID": "e1", "X-Actor-Roles": "Editor"}


def _definition_body(**overrides) -> dict:
    body = {
        "name": "Two step",
        "content_types": ["article"],
        "initial_state_key": "draft",
        "is_default": True,
        "states": [
            {"key": "draft", "name": "Draft", "is_initial": True, "sort_order": 1},
            {"key": "live", "name": "Live", "is_published": True, "sort_order": 2},
        ],
        "transitions": [
            {
                "from_state_key": "draft",
                "to_state_key": "live",
                "name": "Go live",
                "required_role_key": "Editor",
            }
        ],
        "roles": [{"role_key": "Editor", "name": "Editor", "priority": 2, "can_view_all": True}],
    }
    body.update(overrides)
    return body


@pytest.mark.requires_db
async def test_create_get_update_delete(db_client: AsyncClient) -> None:
    created = await db_client.post("/api/v1/workflow-definitions", json=_definition_body())
    assert created.status_code == 201, created.text
    data = created.json()
    definition_id = data["id"]
    [go_live] = data["transitions"]
    assert go_live["role_permissions"][0]["role_key"] == "Editor"

    fetched = await db_client.get(f"/api/v1/workflow-definitions/{definition_id}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Two step"

    body = _definition_body(name="Two step (renamed)")
    body["states"] = data["states"]
    body["roles"] = data["roles"]
    body["transitions"] = data["transitions"]
    updated = await db_client.put(f"/api/v1/workflow-definitions/{definition_id}", json=body)
    assert updated.status_code == 200, updated.text
    assert updated.json()["name"] == "Two step (renamed)"
    assert {s["id"] for s in updated.json()["states"]} == {s["id"] for s in data["states"]}

    deleted = await db_client.delete(f"/api/v1/workflow-definitions/{definition_id}")
    assert deleted.status_code == 204
    missing = await db_client.get(f"/api/v1/workflow-definitions/{definition_id}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "WORKFLOW_NOT_FOUND"


@pytest.mark.requires_db
async def test_invalid_definition_returns_every_error(db_client: AsyncClient) -> None:
    response = await db_client.post("/api/v1/workflow-definitions", json={})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "VALIDATION_ERROR"
    errors = data["details"]["errors"]
    assert "Workflow name is required" in errors
    assert "At least one state must be defined" in errors

    listed = await db_client.get("/api/v1/workflow-definitions")
    assert listed.json() == []


@pytest.mark.requires_db
async def test_validate_endpoint_does_not_save(db_client: AsyncClient) -> None:
    body = _definition_body(initial_state_key="missing")
    response = await db_client.post("/api/v1/workflow-definitions/validate", json=body)
    assert response.status_code == 200
    data = response.json()
    assert data["is_valid"] is False
    assert "Initial state must be one of the defined states" in data["errors"]
    assert (await db_client.get("/api/v1/workflow-definitions")).json() == []


@pytest.mark.requires_db
async def test_update_unknown_definition_is_404(db_client: AsyncClient) -> None:
    response = await db_client.put(
        "/api/v1/workflow-definitions/does-not-exist", json=_definition_body()
    )
    assert response.status_code == 404


@pytest.mark.requires_db
async def test_default_workflow_and_child_lookups(db_client: AsyncClient) -> None:
    response = await db_client.post(
        "/api/v1/workflow-definitions/default", json={"content_types": ["article"]}
    )
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["name"] == "Default Workflow"
    assert data["is_default"] is True

    state_id = data["states"][0]["id"]
    state = await db_client.get(f"/api/v1/workflow-definitions/states/{state_id}")
    assert state.json()["key"] == "draft"

    approve = next(t for t in data["transitions"] if t["name"] == "Approve")
    transition = await db_client.get(f"/api/v1/workflow-definitions/transitions/{approve['id']}")
    assert transition.json()["to_state_key"] == "approved"

    role = await db_client.get(f"/api/v1/workflow-definitions/roles/{data['roles'][0]['id']}")
    assert role.status_code == 200

    missing = await db_client.get("/api/v1/workflow-definitions/roles/nope")
    assert missing.status_code == 404
    assert missing.json()["error"] == "RESOURCE_NOT_FOUND"


@pytest.mark.requires_db
async def test_second_default_demotes_first(db_client: AsyncClient) -> None:
    first = (await db_client.post("/api/v1/workflow-definitions", json=_definition_body())).json()
    second = (
        await db_client.post(
            "/api/v1/workflow-definitions", json=_definition_body(name="Replacement")
        )
    ).json()
    listed = {
        d["id"]: d["is_default"]
        for d in (await db_client.get("/api/v1/workflow-definitions")).json()
    }
    assert listed == {first["id"]: False, second["id"]: True}


@pytest.mark.requires_db
async def test_list_filtered_by_content_type(db_client: AsyncClient) -> None:
    await db_client.post("/api/v1/workflow-definitions", json=_definition_body())
    await db_client.post(
        "/api/v1/workflow-definitions",
        json=_definition_body(name="Pages", content_types=["page"], is_default=False),
    )
    response = await db_client.get(
        "/api/v1/workflow-definitions", params={"content_type": "page"}
    )
    assert [d["name"] for d in response.json()] == ["Pages"]


@pytest.mark.requires_db
async def test_effective_roles_for_actor(db_client: AsyncClient) -> None:
    data = (
        await db_client.post(
            "/api/v1/workflow-definitions/default", json={"content_types": ["article"]}
        )
    ).json()
    response = await db_client.get(
        f"/api/v1/workflow-definitions/{data['id']}/effective-roles", headers=EDITOR
    )
    assert [r["role_key"] for r in response.json()] == ["Editor", "Writer"]

    anonymous = await db_client.get(f"/api/v1/workflow-definitions/{data['id']}/effective-roles")
    assert anonymous.json() == []


@pytest.mark.requires_db
async def test_analytics_endpoint(db_client: AsyncClient) -> None:
    data = (
        await db_client.post(
            "/api/v1/workflow-definitions/default", json={"content_types": ["article"]}
        )
    ).json()
    response = await db_client.get(f"/api/v1/workflow-definitions/{data['id']}/analytics")
    assert response.status_code == 200
    body = response.json()
    assert body["definition_id"] == data["id"]
    assert body["bottlenecks"] == []

    inverted = await db_client.get(
        f"/api/v1/workflow-definitions/{data['id']}/analytics",
        params={"from_date": "2026-02-01T00:00:00Z", "to_date": "2026-01-01T00:00:00Z"},
    )
    assert inverted.status_code == 400


async def _go_live_names(db_client: AsyncClient, roles: str | None) -> list[str]:
    headers = {"X-Actor-ID": "u1", "X-Actor-Roles": roles} if roles else {}
    response = await db_client.get(
        "/api/v1/workflow-transitions/available",
        params={"content_type": "article", "current_state": "draft"},
        headers=headers,
    )
    return [t["name"] for t in response.json()]


@pytest.mark.requires_db
async def test_editing_required_role_moves_the_permission(db_client: AsyncClient) -> None:
    roles = [
        {"role_key": "Editor", "name": "Editor", "priority": 2},
        {"role_key": "Approver", "name": "Approver", "priority": 3},
    ]
    data = (
        await db_client.post(
            "/api/v1/workflow-definitions", json=_definition_body(roles=roles)
        )
    ).json()

    body = {**data}
    body["transitions"][0]["required_role_key"] = "Approver"
    updated = await db_client.put(f"/api/v1/workflow-definitions/{data['id']}", json=body)
    assert updated.status_code == 200, updated.text
    [go_live] = updated.json()["transitions"]
    assert go_live["required_role_key"] == "Approver"
    assert [g["role_key"] for g in go_live["role_permissions"]] == ["Approver"]

    assert await _go_live_names(db_client, "Approver") == ["Go live"]
    assert await _go_live_names(db_client, "Editor") == []


@pytest.mark.requires_db
async def test_clearing_required_role_opens_the_transition(db_client: AsyncClient) -> None:
    data = (await db_client.post("/api/v1/workflow-definitions", json=_definition_body())).json()
    assert await _go_live_names(db_client, None) == []

    body = {**data}
    body["transitions"][0]["required_role_key"] = None
    updated = await db_client.put(f"/api/v1/workflow-definitions/{data['id']}", json=body)
    assert updated.status_code == 200, updated.text
    assert updated.json()["transitions"][0]["role_permissions"] == []

    assert await _go_live_names(db_client, None) == ["Go live"]


@pytest.mark.requires_db
async def test_posting_a_fetched_definition_creates_a_copy(db_client: AsyncClient) -> None:
    first = (await db_client.post("/api/v1/workflow-definitions", json=_definition_body())).json()

    copy_body = {**first, "name": "Two step (copy)", "is_default": False}
    copied = await db_client.post("/api/v1/workflow-definitions", json=copy_body)
    assert copied.status_code == 201, copied.text
    data = copied.json()
    assert data["id"] != first["id"]
    assert {s["key"] for s in data["states"]} == {"draft", "live"}
    assert not {s["id"] for s in data["states"]} & {s["id"] for s in first["states"]}
    assert data["roles"][0]["id"] != first["roles"][0]["id"]

    original = await db_client.get(f"/api/v1/workflow-definitions/{first['id']}")
    assert [s["id"] for s in original.json()["states"]] == [s["id"] for s in first["states"]]
