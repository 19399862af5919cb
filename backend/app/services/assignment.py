from __future__ import annotations

from app.core.exceptions import NotAProjectMember
from app.repositories import Repository
from app.services.membership import MembershipRegistry


class TaskAssignmentValidator:
    """Point-in-time gate for task assignees.

    The check runs when an assignee is written. Removing a member later does
    not revalidate or unassign the tasks they already hold.
    """

    def __init__(self, registry: MembershipRegistry, repository: Repository):
        self.registry = registry
        self.repository = repository

    def validate_assignment(self, project_id: int, candidate_user_id: int) -> None:
        candidate = self.repository.get_user(candidate_user_id)
        if candidate is None or not candidate.is_active:
            raise NotAProjectMember(details={"project_id": project_id, "user_id": candidate_user_id})
        if not self.registry.is_creator_or_member(project_id, candidate_user_id):
            raise NotAProjectMember(details={"project_id": project_id, "user_id": candidate_user_id})
