from .comment import (
    CommentCreate,
    CommentRead,
    CommentStatistics,
    CommentThreadRead,
    CommentUpdate,
)
from .enums import SortOrder, TaskSortField, TaskStatus, UserRole
from .pagination import MAX_PAGE_SIZE, PaginatedResponse
from .project import (
    ProjectCreate,
    ProjectMemberAddRequest,
    ProjectMemberRead,
    ProjectRead,
    ProjectUpdate,
)
from .task import TaskCreate, TaskRead, TaskStatistics, TaskStatusUpdate, TaskUpdate
from .user import Token, UserCreate, UserRead, UserSummary

__all__ = [
    "CommentCreate",
    "CommentRead",
    "CommentStatistics",
    "CommentThreadRead",
    "CommentUpdate",
    "SortOrder",
    "TaskSortField",
    "TaskStatus",
    "UserRole",
    "MAX_PAGE_SIZE",
    "PaginatedResponse",
    "ProjectCreate",
    "ProjectMemberAddRequest",
    "ProjectMemberRead",
    "ProjectRead",
    "ProjectUpdate",
    "TaskCreate",
    "TaskRead",
    "TaskStatistics",
    "TaskStatusUpdate",
    "TaskUpdate",
    "Token",
    "UserCreate",
    "UserRead",
    "UserSummary",
]
