# Enums shared by models, schemas and services
from enum import Enum


class UserRole(str, Enum):
    """Global role of a user; admins bypass every project-scoped check"""

    ADMIN = "admin"
    MEMBER = "member"


class TaskStatus(str, Enum):
    """Workflow status of a task"""

    TO_DO = "to_do"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskSortField(str, Enum):
    """Columns a task list may be ordered by"""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


__all__ = [
    "UserRole",
    "TaskStatus",
    "TaskSortField",
    "SortOrder",
]
