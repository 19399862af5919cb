"""
Persistence contract consumed by the services.

The services never touch a SQLAlchemy session directly; they receive an
object satisfying ``Repository`` at construction time. Production code uses
``SqlAlchemyRepository``; authorization tests substitute an in-memory fake.

Write methods commit immediately. Constraint violations surface as
``DuplicateRecord`` (unique keys) or ``ReferencedRecord`` (foreign keys);
any other storage failure propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from app import models
from app.schemas.enums import SortOrder, TaskSortField


@dataclass
class TaskFilter:
    # Tasks of soft-deleted projects never match. viewer_id=None skips the
    # membership restriction (admins); otherwise only projects the viewer
    # created or belongs to are matched
    viewer_id: Optional[int] = None
    project_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    status: Optional[str] = None
    exclude_status: Optional[str] = None
    priority: Optional[int] = None
    search: Optional[str] = None
    due_before: Optional[datetime] = None


@dataclass
class CommentFilter:
    viewer_id: Optional[int] = None
    task_id: Optional[int] = None
    project_id: Optional[int] = None
    user_id: Optional[int] = None
    created_since: Optional[datetime] = None


class Repository(Protocol):
    # users
    def get_user(self, user_id: int) -> Optional[models.User]: ...

    def get_user_by_email(self, email: str) -> Optional[models.User]: ...

    def add_user(self, user: models.User) -> models.User: ...

    # projects
    def get_project(self, project_id: int) -> Optional[models.Project]: ...

    def add_project(self, project: models.Project) -> models.Project: ...

    def list_projects(
        self, viewer_id: Optional[int], skip: int, limit: int
    ) -> tuple[list[models.Project], int]: ...

    # memberships
    def find_membership(self, project_id: int, user_id: int) -> Optional[models.ProjectMember]: ...

    def add_membership(self, membership: models.ProjectMember) -> models.ProjectMember: ...

    def delete_membership(self, membership: models.ProjectMember) -> None: ...

    def list_memberships(self, project_id: int) -> list[models.ProjectMember]: ...

    # tasks
    def get_task(self, task_id: int) -> Optional[models.Task]: ...

    def add_task(self, task: models.Task) -> models.Task: ...

    def delete_task(self, task: models.Task) -> None: ...

    def list_tasks(
        self,
        task_filter: TaskFilter,
        sort_by: TaskSortField,
        sort_order: SortOrder,
        skip: int,
        limit: int,
    ) -> tuple[list[models.Task], int]: ...

    def count_tasks(self, task_filter: TaskFilter) -> int: ...

    # comments
    def get_comment(self, comment_id: int) -> Optional[models.Comment]: ...

    def add_comment(self, comment: models.Comment) -> models.Comment: ...

    def delete_comment(self, comment: models.Comment) -> None: ...

    def count_replies(self, comment_id: int) -> int: ...

    def list_replies(self, comment_id: int) -> list[models.Comment]: ...

    def list_task_comments(self, task_id: int) -> list[models.Comment]: ...

    def list_recent_comments(self, viewer_id: Optional[int], limit: int) -> list[models.Comment]: ...

    def count_comments(self, comment_filter: CommentFilter) -> int: ...

    # generic
    def save(self, instance): ...