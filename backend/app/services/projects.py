from __future__ import annotations

from typing import Any, Optional

from app import models
from app.core.exceptions import (
    AlreadyMember,
    DuplicateRecord,
    NotAMember,
    NotFoundOrDenied,
    UserNotFound,
)
from app.repositories import Repository
from app.services.access import AccessControlEvaluator
from app.services.actor import Actor
from app.services.membership import MembershipRegistry

# Fields a creator/admin may change through ``update``
MUTABLE_PROJECT_FIELDS = ("name", "description")


class ProjectLifecycleManager:
    """Project creation, metadata changes, soft delete and membership.

    Project lookups that fail the relevant access check raise
    ``NotFoundOrDenied`` exactly as a missing project would.
    """

    def __init__(
        self,
        repository: Repository,
        registry: MembershipRegistry,
        access: AccessControlEvaluator,
    ):
        self.repository = repository
        self.registry = registry
        self.access = access

    def _viewable(self, actor: Actor, project_id: int) -> models.Project:
        project = self.repository.get_project(project_id)
        if not self.access.can_view(actor, project):
            raise NotFoundOrDenied("Project", project_id)
        return project

    def _mutable(self, actor: Actor, project_id: int) -> models.Project:
        project = self.repository.get_project(project_id)
        if not self.access.can_mutate(actor, project):
            raise NotFoundOrDenied("Project", project_id)
        return project

    def create(self, actor: Actor, name: str, description: Optional[str] = None) -> models.Project:
        project = models.Project(name=name, description=description, created_by_id=actor.id)
        return self.repository.add_project(project)

    def list_for(self, actor: Actor, skip: int = 0, limit: int = 10) -> tuple[list[models.Project], int]:
        return self.repository.list_projects(self.access.visibility_scope(actor), skip, limit)

    def get(self, actor: Actor, project_id: int) -> models.Project:
        return self._viewable(actor, project_id)

    def update(self, actor: Actor, project_id: int, changes: dict[str, Any]) -> models.Project:
        project = self._mutable(actor, project_id)
        for field_name in MUTABLE_PROJECT_FIELDS:
            if field_name in changes:
                setattr(project, field_name, changes[field_name])
        return self.repository.save(project)

    def soft_delete(self, actor: Actor, project_id: int) -> None:
        # Tasks, comments and memberships stay in place, just unreachable
        project = self._mutable(actor, project_id)
        project.is_active = False
        self.repository.save(project)

    def add_member(self, actor: Actor, project_id: int, candidate_user_id: int) -> models.ProjectMember:
        project = self._mutable(actor, project_id)

        candidate = self.repository.get_user(candidate_user_id)
        if candidate is None or not candidate.is_active:
            raise UserNotFound(candidate_user_id)
        # The creator is implicitly a member and never gets a row
        if candidate.id == project.created_by_id:
            raise AlreadyMember("User is the project creator")
        if self.repository.find_membership(project.id, candidate.id) is not None:
            raise AlreadyMember(details={"project_id": project.id, "user_id": candidate.id})

        membership = models.ProjectMember(
            project_id=project.id,
            user_id=candidate.id,
            added_by_id=actor.id,
        )
        try:
            return self.repository.add_membership(membership)
        except DuplicateRecord:
            # A concurrent add won the race; the unique constraint caught it
            raise AlreadyMember(details={"project_id": project.id, "user_id": candidate.id})

    def remove_member(self, actor: Actor, project_id: int, user_id: int) -> None:
        # Tasks assigned to the removed user keep their assignee
        project = self._mutable(actor, project_id)
        membership = self.repository.find_membership(project.id, user_id)
        if membership is None:
            raise NotAMember(details={"project_id": project.id, "user_id": user_id})
        self.repository.delete_membership(membership)

    def list_members(self, actor: Actor, project_id: int) -> list[models.ProjectMember]:
        project = self._viewable(actor, project_id)
        return self.registry.list_memberships(project.id)
