"""
Who may act on a project.

A project's creator never has a membership row; membership is implicit for
them. Every lookup answers ``False`` (or an empty list) for a project that
does not exist or has been soft-deleted, so callers cannot tell "no access"
from "no such project".
"""

from __future__ import annotations

from typing import Optional

from app import models
from app.repositories import Repository


class MembershipRegistry:
    def __init__(self, repository: Repository):
        self.repository = repository

    def _active_project(self, project_id: int) -> Optional[models.Project]:
        project = self.repository.get_project(project_id)
        if project is None or not project.is_active:
            return None
        return project

    def is_member(self, project_id: int, user_id: int) -> bool:
        if self._active_project(project_id) is None:
            return False
        return self.repository.find_membership(project_id, user_id) is not None

    def is_creator_or_member(self, project_id: int, user_id: int) -> bool:
        project = self._active_project(project_id)
        if project is None:
            return False
        if project.created_by_id == user_id:
            return True
        return self.repository.find_membership(project_id, user_id) is not None

    def list_memberships(self, project_id: int) -> list[models.ProjectMember]:
        if self._active_project(project_id) is None:
            return []
        return self.repository.list_memberships(project_id)

    def list_members(self, project_id: int) -> list[models.User]:
        """Member users in the order they were added (the creator is not included)."""
        return [membership.user for membership in self.list_memberships(project_id)]
