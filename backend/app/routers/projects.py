from fastapi import APIRouter, Depends, Query, status

from app.core.logging import get_logger
from app.routers.auth import get_current_actor
from app.schemas import (
    MAX_PAGE_SIZE,
    PaginatedResponse,
    ProjectCreate,
    ProjectMemberAddRequest,
    ProjectMemberRead,
    ProjectRead,
    ProjectUpdate,
)
from app.services import Actor, Services, get_services

router = APIRouter(prefix="/api/projects", tags=["projects"])
logger = get_logger(__name__)


@router.get("", response_model=PaginatedResponse[ProjectRead])
def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> PaginatedResponse[ProjectRead]:
    """
    Active projects the caller created or belongs to (every active project for admins),
    newest first.
    """
    projects, total = services.projects.list_for(actor, skip=skip, limit=limit)
    return PaginatedResponse(
        total=total,
        skip=skip,
        limit=limit,
        items=[ProjectRead.model_validate(p, from_attributes=True) for p in projects],
    )


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> ProjectRead:
    project = services.projects.create(actor, payload.name, payload.description)
    logger.info("project_created", project_id=project.id)
    return ProjectRead.model_validate(project, from_attributes=True)


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> ProjectRead:
    project = services.projects.get(actor, project_id)
    return ProjectRead.model_validate(project, from_attributes=True)


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> ProjectRead:
    project = services.projects.update(actor, project_id, payload.changes())
    return ProjectRead.model_validate(project, from_attributes=True)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
):
    services.projects.soft_delete(actor, project_id)
    logger.info("project_soft_deleted", project_id=project_id)
    return None


@router.get("/{project_id}/members", response_model=list[ProjectMemberRead])
def list_project_members(
    project_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> list[ProjectMemberRead]:
    memberships = services.projects.list_members(actor, project_id)
    return [ProjectMemberRead.model_validate(m, from_attributes=True) for m in memberships]


@router.post(
    "/{project_id}/members", response_model=ProjectMemberRead, status_code=status.HTTP_201_CREATED
)
def add_project_member(
    project_id: int,
    payload: ProjectMemberAddRequest,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> ProjectMemberRead:
    membership = services.projects.add_member(actor, project_id, payload.user_id)
    logger.info("project_member_added", project_id=project_id, user_id=payload.user_id)
    return ProjectMemberRead.model_validate(membership, from_attributes=True)


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_project_member(
    project_id: int,
    user_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
):
    services.projects.remove_member(actor, project_id, user_id)
    logger.info("project_member_removed", project_id=project_id, user_id=user_id)
    return None
