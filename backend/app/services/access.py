"""
Allow/deny decisions for project-scoped resources.

| Actor   | view project | project metadata | tasks (create/update) | delete task | comments   |
|---------|--------------|------------------|-----------------------|-------------|------------|
| admin   | yes          | yes              | yes                   | yes         | any        |
| creator | yes          | yes              | yes                   | yes         | own only   |
| member  | yes          | no               | yes                   | no          | own only   |
| other   | no           | no               | no                    | no          | no         |

Soft-deleted projects are out of reach for everyone, admins included.
"""

from __future__ import annotations

from typing import Optional

from app import models
from app.services.actor import Actor
from app.services.membership import MembershipRegistry


class AccessControlEvaluator:
    def __init__(self, registry: MembershipRegistry):
        self.registry = registry

    @staticmethod
    def _is_live(project: Optional[models.Project]) -> bool:
        return project is not None and bool(project.is_active)

    def can_view(self, actor: Actor, project: Optional[models.Project]) -> bool:
        if not self._is_live(project):
            return False
        if actor.is_admin:
            return True
        return self.registry.is_creator_or_member(project.id, actor.id)

    def can_mutate(self, actor: Actor, project: Optional[models.Project]) -> bool:
        """Project metadata: rename, soft-delete, member add/remove."""
        if not self._is_live(project):
            return False
        return actor.is_admin or project.created_by_id == actor.id

    def can_mutate_tasks(self, actor: Actor, project: Optional[models.Project]) -> bool:
        return self.can_view(actor, project)

    def can_delete_task(self, actor: Actor, project: Optional[models.Project]) -> bool:
        return self.can_mutate(actor, project)

    def can_mutate_comment(
        self, actor: Actor, comment: models.Comment, project: Optional[models.Project]
    ) -> bool:
        if not self._is_live(project):
            return False
        if actor.is_admin:
            return True
        # A former member keeps authorship but loses the right to edit
        return comment.user_id == actor.id and self.can_view(actor, project)

    def visibility_scope(self, actor: Actor) -> Optional[int]:
        """Viewer id for list queries; ``None`` lifts the membership restriction."""
        return None if actor.is_admin else actor.id
