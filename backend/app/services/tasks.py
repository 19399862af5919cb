from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from app import models
from app.core.exceptions import NotFoundOrDenied, PermissionDenied
from app.core.time_utils import as_utc, utc_now
from app.repositories import Repository, TaskFilter
from app.schemas.enums import SortOrder, TaskSortField, TaskStatus
from app.services.access import AccessControlEvaluator
from app.services.actor import Actor
from app.services.assignment import TaskAssignmentValidator

MUTABLE_TASK_FIELDS = ("title", "description", "status", "priority", "due_date", "assigned_to_id")


def _apply_status(task: models.Task, status: TaskStatus | str) -> None:
    status = TaskStatus(status)
    if status == TaskStatus.DONE and task.status != TaskStatus.DONE.value:
        task.completed_at = utc_now()
    elif status != TaskStatus.DONE:
        task.completed_at = None
    task.status = status.value


class TaskManager:
    """Task operations inside a project.

    Any actor who can view a project may create and update its tasks; only
    the project creator or an admin may delete them.
    """

    def __init__(
        self,
        repository: Repository,
        access: AccessControlEvaluator,
        validator: TaskAssignmentValidator,
    ):
        self.repository = repository
        self.access = access
        self.validator = validator

    def _viewable(self, actor: Actor, task_id: int) -> tuple[models.Task, models.Project]:
        task = self.repository.get_task(task_id)
        project = self.repository.get_project(task.project_id) if task is not None else None
        if not self.access.can_view(actor, project):
            raise NotFoundOrDenied("Task", task_id)
        return task, project

    def create(
        self,
        actor: Actor,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        assigned_to_id: Optional[int] = None,
        priority: int = 1,
        due_date: Optional[datetime] = None,
    ) -> models.Task:
        project = self.repository.get_project(project_id)
        if not self.access.can_mutate_tasks(actor, project):
            raise NotFoundOrDenied("Project", project_id)

        if assigned_to_id is not None:
            self.validator.validate_assignment(project.id, assigned_to_id)

        task = models.Task(
            title=title,
            description=description,
            project_id=project.id,
            assigned_to_id=assigned_to_id,
            created_by_id=actor.id,
            priority=priority,
            due_date=as_utc(due_date) if due_date is not None else None,
            status=TaskStatus.TO_DO.value,
        )
        return self.repository.add_task(task)

    def list_tasks(
        self,
        actor: Actor,
        project_id: Optional[int] = None,
        assigned_to_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: TaskSortField = TaskSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[models.Task], int]:
        if project_id is not None and not self.access.can_view(
            actor, self.repository.get_project(project_id)
        ):
            raise NotFoundOrDenied("Project", project_id)

        task_filter = TaskFilter(
            viewer_id=self.access.visibility_scope(actor),
            project_id=project_id,
            assigned_to_id=assigned_to_id,
            status=TaskStatus(status).value if status is not None else None,
            priority=priority,
            search=search,
        )
        return self.repository.list_tasks(task_filter, sort_by, sort_order, skip, limit)

    def get(self, actor: Actor, task_id: int) -> models.Task:
        task, _ = self._viewable(actor, task_id)
        return task

    def update(self, actor: Actor, task_id: int, changes: dict[str, Any]) -> models.Task:
        """Apply only the fields present in ``changes``.

        ``assigned_to_id`` is validated when it changes to a non-null user;
        clearing it never is.
        """
        task, project = self._viewable(actor, task_id)
        if not self.access.can_mutate_tasks(actor, project):
            raise NotFoundOrDenied("Task", task_id)

        if "assigned_to_id" in changes:
            new_assignee = changes["assigned_to_id"]
            if new_assignee is not None and new_assignee != task.assigned_to_id:
                self.validator.validate_assignment(project.id, new_assignee)

        for field_name in MUTABLE_TASK_FIELDS:
            if field_name not in changes:
                continue
            if field_name == "status":
                _apply_status(task, changes["status"])
            elif field_name == "due_date" and changes["due_date"] is not None:
                task.due_date = as_utc(changes["due_date"])
            else:
                setattr(task, field_name, changes[field_name])
        return self.repository.save(task)

    def update_status(self, actor: Actor, task_id: int, status: TaskStatus) -> models.Task:
        return self.update(actor, task_id, {"status": status})

    def delete(self, actor: Actor, task_id: int) -> None:
        task, project = self._viewable(actor, task_id)
        if not self.access.can_delete_task(actor, project):
            # Viewers already know the task exists: forbidden, not hidden
            raise PermissionDenied("Only project creators can delete tasks")
        self.repository.delete_task(task)

    def get_statistics(self, actor: Actor, project_id: Optional[int] = None) -> dict[str, Any]:
        scope = TaskFilter(viewer_id=self.access.visibility_scope(actor), project_id=project_id)
        total = self.repository.count_tasks(scope)
        by_status = {
            status.value: self.repository.count_tasks(replace(scope, status=status.value))
            for status in TaskStatus
        }
        done = by_status[TaskStatus.DONE.value]
        return {
            "total": total,
            "by_status": by_status,
            "overdue": self.repository.count_tasks(
                replace(scope, due_before=utc_now(), exclude_status=TaskStatus.DONE.value)
            ),
            "assigned_to_me": self.repository.count_tasks(replace(scope, assigned_to_id=actor.id)),
            "completion_rate": round(done / total * 100) if total else 0,
        }
