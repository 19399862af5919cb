from __future__ import annotations

from typing import Optional

from sqlalchemy import asc, desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, joinedload

from app import models
from app.core.exceptions import DuplicateRecord, ReferencedRecord
from app.repositories.base import CommentFilter, TaskFilter
from app.schemas.enums import SortOrder, TaskSortField


def _visible_projects(query: Query, viewer_id: Optional[int]) -> Query:
    """Restrict a query that already involves ``project`` to what the viewer may see."""
    query = query.filter(models.Project.is_active.is_(True))
    if viewer_id is None:
        return query
    return query.filter(
        or_(
            models.Project.created_by_id == viewer_id,
            models.Project.memberships.any(models.ProjectMember.user_id == viewer_id),
        )
    )


class SqlAlchemyRepository:
    """``Repository`` backed by a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, instance=None, on_conflict=DuplicateRecord):
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise on_conflict(details={"constraint": str(exc.orig)}) from exc
        if instance is not None:
            self.db.refresh(instance)
        return instance

    def save(self, instance):
        self.db.add(instance)
        return self._commit(instance)

    # users

    def get_user(self, user_id: int) -> Optional[models.User]:
        return self.db.get(models.User, user_id)

    def get_user_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def add_user(self, user: models.User) -> models.User:
        self.db.add(user)
        return self._commit(user)

    # projects

    def get_project(self, project_id: int) -> Optional[models.Project]:
        return self.db.get(models.Project, project_id)

    def add_project(self, project: models.Project) -> models.Project:
        self.db.add(project)
        return self._commit(project)

    def list_projects(
        self, viewer_id: Optional[int], skip: int, limit: int
    ) -> tuple[list[models.Project], int]:
        base_query = _visible_projects(self.db.query(models.Project), viewer_id)
        total = base_query.count()
        projects = (
            base_query.options(joinedload(models.Project.created_by))
            .order_by(models.Project.created_at.desc(), models.Project.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return projects, total

    # memberships

    def find_membership(self, project_id: int, user_id: int) -> Optional[models.ProjectMember]:
        return (
            self.db.query(models.ProjectMember)
            .filter(
                models.ProjectMember.project_id == project_id,
                models.ProjectMember.user_id == user_id,
            )
            .first()
        )

    def add_membership(self, membership: models.ProjectMember) -> models.ProjectMember:
        self.db.add(membership)
        return self._commit(membership, on_conflict=DuplicateRecord)

    def delete_membership(self, membership: models.ProjectMember) -> None:
        self.db.delete(membership)
        self._commit()

    def list_memberships(self, project_id: int) -> list[models.ProjectMember]:
        return (
            self.db.query(models.ProjectMember)
            .options(
                joinedload(models.ProjectMember.user),
                joinedload(models.ProjectMember.added_by),
            )
            .filter(models.ProjectMember.project_id == project_id)
            .order_by(models.ProjectMember.added_at.asc(), models.ProjectMember.id.asc())
            .all()
        )

    # tasks

    def get_task(self, task_id: int) -> Optional[models.Task]:
        return self.db.get(models.Task, task_id)

    def add_task(self, task: models.Task) -> models.Task:
        self.db.add(task)
        return self._commit(task, on_conflict=ReferencedRecord)

    def delete_task(self, task: models.Task) -> None:
        self.db.delete(task)
        self._commit(on_conflict=ReferencedRecord)

    def _task_query(self, task_filter: TaskFilter) -> Query:
        query = self.db.query(models.Task).join(
            models.Project, models.Task.project_id == models.Project.id
        )
        query = _visible_projects(query, task_filter.viewer_id)
        if task_filter.project_id is not None:
            query = query.filter(models.Task.project_id == task_filter.project_id)
        if task_filter.assigned_to_id is not None:
            query = query.filter(models.Task.assigned_to_id == task_filter.assigned_to_id)
        if task_filter.status is not None:
            query = query.filter(models.Task.status == task_filter.status)
        if task_filter.exclude_status is not None:
            query = query.filter(models.Task.status != task_filter.exclude_status)
        if task_filter.priority is not None:
            query = query.filter(models.Task.priority == task_filter.priority)
        if task_filter.due_before is not None:
            query = query.filter(
                models.Task.due_date.is_not(None), models.Task.due_date < task_filter.due_before
            )
        if task_filter.search:
            pattern = f"%{task_filter.search}%"
            query = query.filter(
                or_(models.Task.title.ilike(pattern), models.Task.description.ilike(pattern))
            )
        return query

    def list_tasks(
        self,
        task_filter: TaskFilter,
        sort_by: TaskSortField,
        sort_order: SortOrder,
        skip: int,
        limit: int,
    ) -> tuple[list[models.Task], int]:
        base_query = self._task_query(task_filter)
        total = base_query.count()

        direction = asc if sort_order == SortOrder.ASC else desc
        sort_column = getattr(models.Task, sort_by.value)
        tasks = (
            base_query.options(
                joinedload(models.Task.assigned_to),
                joinedload(models.Task.created_by),
            )
            .order_by(direction(sort_column), direction(models.Task.id))
            .offset(skip)
            .limit(limit)
            .all()
        )
        return tasks, total

    def count_tasks(self, task_filter: TaskFilter) -> int:
        return self._task_query(task_filter).count()

    # comments

    def get_comment(self, comment_id: int) -> Optional[models.Comment]:
        return self.db.get(models.Comment, comment_id)

    def add_comment(self, comment: models.Comment) -> models.Comment:
        self.db.add(comment)
        return self._commit(comment, on_conflict=ReferencedRecord)

    def delete_comment(self, comment: models.Comment) -> None:
        self.db.delete(comment)
        self._commit(on_conflict=ReferencedRecord)

    def count_replies(self, comment_id: int) -> int:
        return (
            self.db.query(models.Comment)
            .filter(models.Comment.parent_comment_id == comment_id)
            .count()
        )

    def list_replies(self, comment_id: int) -> list[models.Comment]:
        return (
            self.db.query(models.Comment)
            .options(joinedload(models.Comment.user))
            .filter(models.Comment.parent_comment_id == comment_id)
            .order_by(models.Comment.created_at.asc(), models.Comment.id.asc())
            .all()
        )

    def list_task_comments(self, task_id: int) -> list[models.Comment]:
        return (
            self.db.query(models.Comment)
            .options(joinedload(models.Comment.user))
            .filter(models.Comment.task_id == task_id)
            .order_by(models.Comment.created_at.asc(), models.Comment.id.asc())
            .all()
        )

    def _comment_query(self, viewer_id: Optional[int]) -> Query:
        query = (
            self.db.query(models.Comment)
            .join(models.Task, models.Comment.task_id == models.Task.id)
            .join(models.Project, models.Task.project_id == models.Project.id)
        )
        return _visible_projects(query, viewer_id)

    def list_recent_comments(self, viewer_id: Optional[int], limit: int) -> list[models.Comment]:
        return (
            self._comment_query(viewer_id)
            .options(joinedload(models.Comment.user), joinedload(models.Comment.task))
            .order_by(models.Comment.created_at.desc(), models.Comment.id.desc())
            .limit(limit)
            .all()
        )

    def count_comments(self, comment_filter: CommentFilter) -> int:
        query = self._comment_query(comment_filter.viewer_id)
        if comment_filter.task_id is not None:
            query = query.filter(models.Comment.task_id == comment_filter.task_id)
        if comment_filter.project_id is not None:
            query = query.filter(models.Task.project_id == comment_filter.project_id)
        if comment_filter.user_id is not None:
            query = query.filter(models.Comment.user_id == comment_filter.user_id)
        if comment_filter.created_since is not None:
            query = query.filter(models.Comment.created_at >= comment_filter.created_since)
        return query.count()
