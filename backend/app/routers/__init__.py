from fastapi import APIRouter

from . import auth, comments, projects, tasks

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(comments.router)

__all__ = [
    "api_router",
    "auth",
    "comments",
    "projects",
    "tasks",
]
