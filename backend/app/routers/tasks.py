from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.logging import get_logger
from app.routers.auth import get_current_actor
from app.schemas import (
    MAX_PAGE_SIZE,
    PaginatedResponse,
    SortOrder,
    TaskCreate,
    TaskRead,
    TaskSortField,
    TaskStatistics,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from app.services import Actor, Services, get_services

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
logger = get_logger(__name__)


@router.get("", response_model=PaginatedResponse[TaskRead])
def list_tasks(
    project_id: Optional[int] = Query(default=None),
    assigned_to_id: Optional[int] = Query(default=None),
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    priority: Optional[int] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=255),
    sort_by: TaskSortField = Query(TaskSortField.CREATED_AT),
    sort_order: SortOrder = Query(SortOrder.DESC),
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> PaginatedResponse[TaskRead]:
    """
    Tasks from every project the caller can view.

    - **project_id**: restrict to one project (404 if the caller cannot view it)
    - **status**, **priority**, **assigned_to_id**: exact-match filters
    - **search**: case-insensitive match on title or description
    """
    tasks, total = services.tasks.list_tasks(
        actor,
        project_id=project_id,
        assigned_to_id=assigned_to_id,
        status=status_filter,
        priority=priority,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        total=total,
        skip=skip,
        limit=limit,
        items=[TaskRead.model_validate(t, from_attributes=True) for t in tasks],
    )


@router.get("/statistics", response_model=TaskStatistics)
def get_task_statistics(
    project_id: Optional[int] = Query(default=None),
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> TaskStatistics:
    return TaskStatistics(**services.tasks.get_statistics(actor, project_id=project_id))


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> TaskRead:
    task = services.tasks.create(
        actor,
        payload.project_id,
        payload.title,
        description=payload.description,
        assigned_to_id=payload.assigned_to_id,
        priority=payload.priority,
        due_date=payload.due_date,
    )
    logger.info("task_created", task_id=task.id, project_id=task.project_id)
    return TaskRead.model_validate(task, from_attributes=True)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> TaskRead:
    return TaskRead.model_validate(services.tasks.get(actor, task_id), from_attributes=True)


@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> TaskRead:
    task = services.tasks.update(actor, task_id, payload.changes())
    return TaskRead.model_validate(task, from_attributes=True)


@router.patch("/{task_id}/status", response_model=TaskRead)
def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> TaskRead:
    task = services.tasks.update_status(actor, task_id, payload.status)
    return TaskRead.model_validate(task, from_attributes=True)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
):
    services.tasks.delete(actor, task_id)
    logger.info("task_deleted", task_id=task_id)
    return None
