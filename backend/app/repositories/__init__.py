from .base import CommentFilter, Repository, TaskFilter
from .sql import SqlAlchemyRepository

__all__ = [
    "CommentFilter",
    "Repository",
    "SqlAlchemyRepository",
    "TaskFilter",
]
