"""
Demo data for local development: an admin, two regular users and one
project with a small comment thread.

Re-running is safe: users are matched by email and the demo project is
recreated only when missing.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app import models
from app.core.logging import get_logger
from app.core.security import hash_password
from app.db import SessionLocal
from app.schemas.enums import TaskStatus, UserRole

logger = get_logger(__name__)

DEMO_PROJECT_NAME = "DEMO_Alpha"

DEMO_USERS = [
    {
        "email": "admin@taskmanager.com",
        "username": "admin",
        "full_name": "Admin User",
        "password": "admin123",
        "role": UserRole.ADMIN,
    },
    {
        "email": "john@example.com",
        "username": "john_doe",
        "full_name": "John Doe",
        "password": "user123",
        "role": UserRole.MEMBER,
    },
    {
        "email": "jane@example.com",
        "username": "jane_roe",
        "full_name": "Jane Roe",
        "password": "user123",
        "role": UserRole.MEMBER,
    },
]


def _upsert_user(session: Session, account: dict) -> models.User:
    user = session.query(models.User).filter(models.User.email == account["email"]).first()
    if user is not None:
        return user
    user = models.User(
        email=account["email"],
        username=account["username"],
        full_name=account["full_name"],
        hashed_password=hash_password(account["password"]),
        role=account["role"].value,
        is_active=True,
    )
    session.add(user)
    session.flush()
    return user


def _seed_project(session: Session, owner: models.User, member: models.User) -> models.Project:
    project = models.Project(
        name=DEMO_PROJECT_NAME,
        description="Demo project for UI scenarios",
        created_by_id=owner.id,
    )
    session.add(project)
    session.flush()

    session.add(models.ProjectMember(project_id=project.id, user_id=member.id, added_by_id=owner.id))

    task = models.Task(
        title="Write spec",
        description="First draft of the requirements",
        project_id=project.id,
        assigned_to_id=member.id,
        created_by_id=owner.id,
        status=TaskStatus.IN_PROGRESS.value,
        priority=2,
    )
    session.add(task)
    session.flush()

    question = models.Comment(task_id=task.id, user_id=owner.id, content="Can we get a draft by Friday?")
    session.add(question)
    session.flush()
    session.add(
        models.Comment(
            task_id=task.id,
            user_id=member.id,
            parent_comment_id=question.id,
            content="Yes, outline is already done.",
        )
    )
    return project


def seed_demo_data(session: Optional[Session] = None) -> dict:
    """Create the demo rows; returns the ids of what was created or found."""
    own_session = session is None
    session = session or SessionLocal()
    try:
        admin, owner, member = (_upsert_user(session, account) for account in DEMO_USERS)
        project = (
            session.query(models.Project)
            .filter(models.Project.name == DEMO_PROJECT_NAME, models.Project.is_active.is_(True))
            .first()
        )
        if project is None:
            project = _seed_project(session, owner, member)
        session.commit()
        logger.info("demo_data_seeded", project_id=project.id, admin_id=admin.id)
        return {
            "admin_id": admin.id,
            "owner_id": owner.id,
            "member_id": member.id,
            "project_id": project.id,
        }
    except Exception:
        session.rollback()
        raise
    finally:
        if own_session:
            session.close()
