from fastapi.testclient import TestClient

from app import models
from app.db import SessionLocal
from app.schemas.enums import UserRole


def register(client: TestClient, username: str, password: str = "secret") -> dict:
    resp = client.post(
        "/api/auth/register",
        json={
            "email": f"{username}@example.com",
            "username": username,
            "full_name": username.title(),
            "password": password,
        },
    )
    assert resp.status_code == 201
    return resp.json()


def login(client: TestClient, username: str, password: str = "secret") -> dict:
    resp = client.post(
        "/api/auth/token",
        data={"username": f"{username}@example.com", "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def register_and_login(client: TestClient, username: str) -> tuple[int, dict]:
    """Returns (user id, auth headers)."""
    user = register(client, username)
    return user["id"], login(client, username)


def promote_to_admin(user_id: int) -> None:
    # Registration only ever creates members
    with SessionLocal() as session:
        user = session.get(models.User, user_id)
        user.role = UserRole.ADMIN.value
        session.commit()


def create_project(client: TestClient, headers: dict, name: str = "Alpha") -> int:
    resp = client.post("/api/projects", json={"name": name, "description": "desc"}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["id"]


def add_member(client: TestClient, headers: dict, project_id: int, user_id: int) -> None:
    resp = client.post(f"/api/projects/{project_id}/members", json={"user_id": user_id}, headers=headers)
    assert resp.status_code == 201


def create_task(client: TestClient, headers: dict, project_id: int, **fields) -> dict:
    payload = {"project_id": project_id, "title": "Task", **fields}
    resp = client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 201
    return resp.json()


def create_comment(
    client: TestClient, headers: dict, task_id: int, content: str, parent_comment_id: int | None = None
) -> dict:
    resp = client.post(
        "/api/comments",
        json={"task_id": task_id, "content": content, "parent_comment_id": parent_comment_id},
        headers=headers,
    )
    assert resp.status_code == 201
    return resp.json()
