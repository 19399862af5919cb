from datetime import timedelta, timezone

from fastapi.testclient import TestClient

from app.core.time_utils import utc_now

from .utils import add_member, create_project, create_task, register_and_login


def _alpha(client: TestClient):
    owner_id, owner_headers = register_and_login(client, "owner")
    member_id, member_headers = register_and_login(client, "member")
    project_id = create_project(client, owner_headers, "Alpha")
    add_member(client, owner_headers, project_id, member_id)
    return project_id, (owner_id, owner_headers), (member_id, member_headers)


def test_create_task_accepts_either_assignee_name(client: TestClient):
    project_id, (owner_id, owner_headers), (member_id, _) = _alpha(client)

    by_id = create_task(client, owner_headers, project_id, title="By id", assigned_to_id=member_id)
    assert by_id["assigned_to_id"] == member_id
    assert by_id["assigned_to"]["username"] == "member"
    assert by_id["status"] == "to_do"
    assert by_id["created_by_id"] == owner_id

    by_alias = create_task(client, owner_headers, project_id, title="By alias", assigned_to=member_id)
    assert by_alias["assigned_to_id"] == member_id


def test_alpha_assignment_over_http(client: TestClient):
    project_id, (_, owner_headers), (member_id, _) = _alpha(client)
    first = create_task(client, owner_headers, project_id, title="Write spec", assigned_to_id=member_id)

    removed = client.delete(f"/api/projects/{project_id}/members/{member_id}", headers=owner_headers)
    assert removed.status_code == 204

    rejected = client.post(
        "/api/tasks",
        json={"project_id": project_id, "title": "Review spec", "assigned_to_id": member_id},
        headers=owner_headers,
    )
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Cannot assign task to user who is not a project member"

    still = client.get(f"/api/tasks/{first['id']}", headers=owner_headers)
    assert still.status_code == 200
    assert still.json()["assigned_to_id"] == member_id


def test_member_can_update_but_not_delete(client: TestClient):
    project_id, (_, owner_headers), (_, member_headers) = _alpha(client)
    task = create_task(client, owner_headers, project_id, title="Draft")

    updated = client.put(f"/api/tasks/{task['id']}", json={"title": "Draft 2", "priority": 2}, headers=member_headers)
    assert updated.status_code == 200
    assert updated.json()["title"] == "Draft 2"
    assert updated.json()["priority"] == 2

    forbidden = client.delete(f"/api/tasks/{task['id']}", headers=member_headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "forbidden"

    assert client.delete(f"/api/tasks/{task['id']}", headers=owner_headers).status_code == 204
    assert client.get(f"/api/tasks/{task['id']}", headers=owner_headers).status_code == 404


def test_update_can_clear_assignee_but_not_title(client: TestClient):
    project_id, (_, owner_headers), (member_id, _) = _alpha(client)
    task = create_task(client, owner_headers, project_id, title="Keep me", assigned_to_id=member_id)

    resp = client.put(f"/api/tasks/{task['id']}", json={"assigned_to": None, "title": None}, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["assigned_to_id"] is None
    assert resp.json()["title"] == "Keep me"


def test_status_patch_stamps_completion(client: TestClient):
    project_id, (_, owner_headers), (_, member_headers) = _alpha(client)
    task = create_task(client, owner_headers, project_id)

    done = client.patch(f"/api/tasks/{task['id']}/status", json={"status": "done"}, headers=member_headers)
    assert done.status_code == 200
    assert done.json()["status"] == "done"
    assert done.json()["completed_at"] is not None

    invalid = client.patch(f"/api/tasks/{task['id']}/status", json={"status": "archived"}, headers=member_headers)
    assert invalid.status_code == 422


def test_outsider_gets_not_found_for_tasks(client: TestClient):
    project_id, (_, owner_headers), _ = _alpha(client)
    _, stranger_headers = register_and_login(client, "stranger")
    task = create_task(client, owner_headers, project_id)

    assert client.get(f"/api/tasks/{task['id']}", headers=stranger_headers).status_code == 404
    assert client.put(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=stranger_headers).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=stranger_headers).status_code == 404
    assert (
        client.post("/api/tasks", json={"project_id": project_id, "title": "x"}, headers=stranger_headers).status_code
        == 404
    )
    assert client.get(f"/api/tasks?project_id={project_id}", headers=stranger_headers).status_code == 404
    assert client.get("/api/tasks", headers=stranger_headers).json()["total"] == 0


def test_list_filters(client: TestClient):
    project_id, (_, owner_headers), (member_id, member_headers) = _alpha(client)
    create_task(client, owner_headers, project_id, title="Fix login", priority=3, assigned_to_id=member_id)
    second = create_task(client, owner_headers, project_id, title="Write docs", priority=1)
    client.patch(f"/api/tasks/{second['id']}/status", json={"status": "in_progress"}, headers=owner_headers)

    by_status = client.get("/api/tasks?status=in_progress", headers=member_headers).json()
    assert [t["title"] for t in by_status["items"]] == ["Write docs"]

    mine = client.get(f"/api/tasks?assigned_to_id={member_id}", headers=member_headers).json()
    assert [t["title"] for t in mine["items"]] == ["Fix login"]

    searched = client.get("/api/tasks?search=LOGIN", headers=member_headers).json()
    assert searched["total"] == 1

    ordered = client.get("/api/tasks?sort_by=priority&sort_order=asc", headers=member_headers).json()
    assert [t["priority"] for t in ordered["items"]] == [1, 3]

    page = client.get("/api/tasks?limit=1", headers=member_headers).json()
    assert page["total"] == 2
    assert page["has_more"] is True
    assert page["total_pages"] == 2


def test_task_statistics(client: TestClient):
    project_id, (_, owner_headers), (member_id, member_headers) = _alpha(client)
    first = create_task(client, owner_headers, project_id, assigned_to_id=member_id)
    create_task(client, owner_headers, project_id)
    client.patch(f"/api/tasks/{first['id']}/status", json={"status": "done"}, headers=member_headers)

    resp = client.get("/api/tasks/statistics", headers=member_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "total": 2,
        "by_status": {"to_do": 1, "in_progress": 0, "done": 1},
        "overdue": 0,
        "assigned_to_me": 1,
        "completion_rate": 50,
    }


def test_offset_due_date_is_compared_as_an_instant(client: TestClient):
    project_id, (_, owner_headers), (_, member_headers) = _alpha(client)
    plus_five = timezone(timedelta(hours=5))
    # An hour ago, but five hours ahead on the wall clock
    an_hour_ago = (utc_now() - timedelta(hours=1)).astimezone(plus_five)
    task = create_task(client, owner_headers, project_id, due_date=an_hour_ago.isoformat())

    stats = client.get("/api/tasks/statistics", headers=member_headers).json()
    assert stats["overdue"] == 1

    in_an_hour = (utc_now() + timedelta(hours=1)).astimezone(timezone(timedelta(hours=-5)))
    resp = client.put(f"/api/tasks/{task['id']}", json={"due_date": in_an_hour.isoformat()}, headers=owner_headers)
    assert resp.status_code == 200

    stats = client.get("/api/tasks/statistics", headers=member_headers).json()
    assert stats["overdue"] == 0
