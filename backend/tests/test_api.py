"""
HTTP-level tests: authentication gate, status codes and error bodies.
"""

import uuid

import pytest

from app.config import get_settings


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_routes_require_token(client):
    resp = await client.get("/api/projects/")
    assert resp.status_code == 401
    assert resp.json()["error"] == "unauthorized"

    resp = await client.get("/api/tasks/", headers={"Authorization": "Bearer forged.token.value"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_sets_auth_header(client, api_user):
    resp = await client.post(
        "/api/auth/login",
        json={"email": "api@example.com", "password": "wrong"},
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Wrong credentials"

    resp = await client.post(
        "/api/auth/login",
        json={"email": "api@example.com", "password": "correct horse battery staple"},
    )
    assert resp.headers["x-auth"] == resp.json()["access_token"]


@pytest.mark.asyncio
async def test_project_and_task_flow(client, api_user):
    headers = api_user["headers"]

    resp = await client.post("/api/projects/", json={"name": "Alpha", "users": []}, headers=headers)
    assert resp.status_code == 201
    project_id = resp.json()["id"]
    assert resp.json()["tasks"] == []

    resp = await client.put(f"/api/projects/{project_id}/users/{api_user['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["users"] == [api_user["id"]]

    resp = await client.put(f"/api/projects/{project_id}/users/{api_user['id']}", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"

    resp = await client.post(
        "/api/tasks/",
        json={
            "name": "T1",
            "project_id": project_id,
            "assigned_to": [api_user["id"]],
            "end_date": "2024-01-01",
        },
        headers=headers,
    )
    assert resp.status_code == 201
    task = resp.json()
    assert task["status"] == "pending"
    assert task["end_date"] == "2024-01-01"

    resp = await client.get(f"/api/projects/{project_id}", headers=headers)
    assert resp.json()["tasks"] == [task["id"]]

    resp = await client.put(
        f"/api/tasks/{task['id']}/status", json={"status": "in progress"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "in progress"

    resp = await client.get(
        "/api/tasks/", params={"assigned_user": api_user["id"], "end_date": "2024-01-01"}, headers=headers
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_documents"] == 1
    assert body["items"][0]["id"] == task["id"]

    resp = await client.get("/api/projects/", headers=headers)
    listed = resp.json()["items"][0]
    assert listed["tasks"][0]["name"] == "T1"
    assert listed["users"][0]["email"] == "api@example.com"

    resp = await client.delete(f"/api/projects/{project_id}", headers=headers)
    assert resp.status_code == 204

    resp = await client.get(f"/api/tasks/{task['id']}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_move_task_between_projects(client, api_user):
    headers = api_user["headers"]
    alpha = (await client.post("/api/projects/", json={"name": "Alpha"}, headers=headers)).json()
    beta = (await client.post("/api/projects/", json={"name": "Beta"}, headers=headers)).json()
    task = (await client.post(
        "/api/tasks/", json={"name": "Mover", "project_id": alpha["id"]}, headers=headers
    )).json()

    resp = await client.patch(f"/api/tasks/{task['id']}", json={"project_id": beta["id"]}, headers=headers)
    assert resp.status_code == 200

    assert (await client.get(f"/api/projects/{alpha['id']}", headers=headers)).json()["tasks"] == []
    assert (await client.get(f"/api/projects/{beta['id']}", headers=headers)).json()["tasks"] == [task["id"]]


@pytest.mark.asyncio
async def test_non_member_assignment_is_conflict(client, api_user):
    headers = api_user["headers"]
    project = (await client.post("/api/projects/", json={"name": "Solo"}, headers=headers)).json()

    resp = await client.post(
        "/api/tasks/",
        json={"name": "Nope", "project_id": project["id"], "assigned_to": [api_user["id"]]},
        headers=headers,
    )
    assert resp.status_code == 409

    resp = await client.get("/api/tasks/name/Nope", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_malformed_input_is_bad_request(client, api_user):
    headers = api_user["headers"]

    resp = await client.post("/api/tasks/", json={"name": "No project"}, headers=headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "bad_request"
    assert any(detail["loc"][-1] == "project_id" for detail in body["details"])

    resp = await client.get("/api/projects/not-a-uuid", headers=headers)
    assert resp.status_code == 400

    resp = await client.get("/api/projects/", params={"limit": 0}, headers=headers)
    assert resp.status_code == 400

    project = (await client.post("/api/projects/", json={"name": "Alpha"}, headers=headers)).json()
    resp = await client.patch(f"/api/projects/{project['id']}", json={"name": None}, headers=headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_unknown_ids_are_not_found(client, api_user):
    headers = api_user["headers"]
    missing = uuid.uuid4()

    for method, path in [
        ("GET", f"/api/projects/{missing}"),
        ("DELETE", f"/api/projects/{missing}"),
        ("GET", f"/api/tasks/{missing}"),
        ("DELETE", f"/api/tasks/{missing}"),
    ]:
        resp = await client.request(method, path, headers=headers)
        assert resp.status_code == 404, path
        assert str(missing) in resp.json()["message"]


@pytest.mark.asyncio
async def test_delete_user_endpoint(client, api_user):
    resp = await client.delete(f"/api/auth/users/{api_user['id']}")
    assert resp.status_code == 204

    # The token now points at nobody
    resp = await client.get("/api/projects/", headers=api_user["headers"])
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_listing_without_limit_uses_configured_page_size(client, api_user):
    headers = api_user["headers"]
    page_size = get_settings().default_page_limit

    for i in range(page_size + 1):
        resp = await client.post("/api/projects/", json={"name": f"Project {i}"}, headers=headers)
        assert resp.status_code == 201

    resp = await client.get("/api/projects/", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["items"]) == page_size
    assert body["total_pages"] == 2
    assert body["next"].endswith(f"skip={page_size}&limit={page_size}")


@pytest.mark.asyncio
async def test_token_signing_failure_is_internal_error(client, api_user, monkeypatch):
    monkeypatch.setattr(get_settings(), "jwt_algorithm", "XX999")

    resp = await client.post(
        "/api/auth/login",
        json={"email": "api@example.com", "password": "correct horse battery staple"},
    )

    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_error", "message": "JWT error", "details": None}
