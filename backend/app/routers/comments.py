from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.logging import get_logger
from app.core.settings import settings
from app.routers.auth import get_current_actor
from app.schemas import (
    MAX_PAGE_SIZE,
    CommentCreate,
    CommentRead,
    CommentStatistics,
    CommentThreadRead,
    CommentUpdate,
)
from app.services import Actor, Services, get_services

router = APIRouter(prefix="/api/comments", tags=["comments"])
logger = get_logger(__name__)


@router.get("/task/{task_id}", response_model=list[CommentThreadRead])
def list_task_comments(
    task_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> list[CommentThreadRead]:
    """Top-level comments (newest first), each with its full reply thread (oldest first)."""
    tree = services.comments.list_for_task(actor, task_id)
    return [CommentThreadRead.from_node(node) for node in tree]


@router.get("/recent", response_model=list[CommentRead])
def list_recent_comments(
    limit: Optional[int] = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> list[CommentRead]:
    comments = services.comments.list_recent(actor, limit or settings.recent_comments_limit)
    return [CommentRead.model_validate(c, from_attributes=True) for c in comments]


@router.get("/statistics", response_model=CommentStatistics)
def get_comment_statistics(
    task_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> CommentStatistics:
    stats = services.comments.get_statistics(actor, task_id=task_id, project_id=project_id)
    return CommentStatistics(**stats)


@router.post("", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> CommentRead:
    comment = services.comments.create(
        actor, payload.task_id, payload.content, parent_comment_id=payload.parent_comment_id
    )
    logger.info(
        "comment_created",
        comment_id=comment.id,
        task_id=comment.task_id,
        parent_comment_id=comment.parent_comment_id,
    )
    return CommentRead.model_validate(comment, from_attributes=True)


@router.get("/{comment_id}", response_model=CommentThreadRead)
def get_comment(
    comment_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> CommentThreadRead:
    return CommentThreadRead.from_node(services.comments.get(actor, comment_id))


@router.put("/{comment_id}", response_model=CommentRead)
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
) -> CommentRead:
    comment = services.comments.update(actor, comment_id, payload.content)
    return CommentRead.model_validate(comment, from_attributes=True)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    services: Services = Depends(get_services),
    actor: Actor = Depends(get_current_actor),
):
    services.comments.delete(actor, comment_id)
    logger.info("comment_deleted", comment_id=comment_id)
    return None
