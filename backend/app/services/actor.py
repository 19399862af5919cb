from __future__ import annotations

from dataclasses import dataclass

from app import models
from app.schemas.enums import UserRole


@dataclass(frozen=True)
class Actor:
    """The caller of a core operation: who they are and their global role."""

    id: int
    role: UserRole = UserRole.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: models.User) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role))
