from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.user import UserSummary

MAX_COMMENT_LENGTH = 2000


def _validate_content(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) < 1:
        raise ValueError("content must not be empty")
    if len(trimmed) > MAX_COMMENT_LENGTH:
        raise ValueError(f"content must be at most {MAX_COMMENT_LENGTH} characters long")
    return trimmed


class CommentCreate(BaseModel):
    task_id: int
    content: str
    parent_comment_id: Optional[int] = None

    @field_validator("content")
    @classmethod
    def _normalize_content(cls, value: str) -> str:
        return _validate_content(value)


class CommentUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _normalize_content(cls, value: str) -> str:
        return _validate_content(value)


class CommentRead(BaseModel):
    id: int
    task_id: int
    content: str
    is_edited: bool
    parent_comment_id: Optional[int] = None
    user_id: int
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentThreadRead(CommentRead):
    """A comment with its reply subtree; ``reply_count`` counts direct replies only."""

    reply_count: int = 0
    replies: list[CommentThreadRead] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node) -> "CommentThreadRead":
        # Built bottom-up with an explicit stack so deep threads don't recurse
        order = []
        stack = [node]
        while stack:
            current = stack.pop()
            order.append(current)
            stack.extend(current.replies)

        built: dict[int, CommentThreadRead] = {}
        for current in reversed(order):
            read = cls.model_validate(current.comment, from_attributes=True)
            read.reply_count = current.reply_count
            read.replies = [built[id(reply)] for reply in current.replies]
            built[id(current)] = read
        return built[id(node)]


class CommentStatistics(BaseModel):
    total: int
    my_comments: int
    recent: int
    today: int


CommentThreadRead.model_rebuild()
