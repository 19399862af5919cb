"""
Core services: membership, access control, assignment validation, comment
threads, project lifecycle and tasks. ``build_services`` wires them around a
single repository; routers obtain the bundle through ``get_services``.
"""

from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.repositories import Repository, SqlAlchemyRepository
from app.services.access import AccessControlEvaluator
from app.services.actor import Actor
from app.services.assignment import TaskAssignmentValidator
from app.services.comment_threads import CommentNode, CommentThreadManager, build_comment_tree
from app.services.membership import MembershipRegistry
from app.services.projects import ProjectLifecycleManager
from app.services.tasks import TaskManager


@dataclass
class Services:
    registry: MembershipRegistry
    access: AccessControlEvaluator
    assignments: TaskAssignmentValidator
    comments: CommentThreadManager
    projects: ProjectLifecycleManager
    tasks: TaskManager


def build_services(repository: Repository) -> Services:
    registry = MembershipRegistry(repository)
    access = AccessControlEvaluator(registry)
    assignments = TaskAssignmentValidator(registry, repository)
    return Services(
        registry=registry,
        access=access,
        assignments=assignments,
        comments=CommentThreadManager(repository, access),
        projects=ProjectLifecycleManager(repository, registry, access),
        tasks=TaskManager(repository, access, assignments),
    )


def get_services(db: Session = Depends(get_db)) -> Services:
    return build_services(SqlAlchemyRepository(db))


__all__ = [
    "AccessControlEvaluator",
    "Actor",
    "CommentNode",
    "CommentThreadManager",
    "MembershipRegistry",
    "ProjectLifecycleManager",
    "Services",
    "TaskAssignmentValidator",
    "TaskManager",
    "build_comment_tree",
    "build_services",
    "get_services",
]
