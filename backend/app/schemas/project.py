from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.user import UserSummary


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None

    def changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        return changes


class ProjectRead(ProjectBase):
    id: int
    is_active: bool
    created_by_id: int
    created_by: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectMemberAddRequest(BaseModel):
    user_id: int


class ProjectMemberRead(BaseModel):
    id: int
    user: UserSummary
    added_by: Optional[UserSummary] = None
    added_at: datetime

    model_config = {"from_attributes": True}
