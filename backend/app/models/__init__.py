from .comment import Comment
from .project import Project
from .project_member import ProjectMember
from .task import Task
from .user import User

__all__ = [
    "Comment",
    "Project",
    "ProjectMember",
    "Task",
    "User",
]
