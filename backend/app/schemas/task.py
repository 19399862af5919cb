from datetime import datetime
from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.core.time_utils import as_utc
from app.schemas.enums import TaskStatus
from app.schemas.user import UserSummary

# Clients send either name for the assignee; the core only ever sees assigned_to_id
ASSIGNEE_ALIASES = AliasChoices("assigned_to_id", "assigned_to")

REQUIRED_TASK_FIELDS = frozenset({"title", "status", "priority"})


class TaskCreate(BaseModel):
    project_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    assigned_to_id: Optional[int] = Field(default=None, validation_alias=ASSIGNEE_ALIASES)
    priority: int = Field(default=1, ge=0)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def _due_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assigned_to_id: Optional[int] = Field(default=None, validation_alias=ASSIGNEE_ALIASES)
    priority: Optional[int] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def _due_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    def changes(self) -> dict:
        """Fields the client actually sent; explicit nulls only where a null is meaningful."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name not in REQUIRED_TASK_FIELDS
        }


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: int
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to_id: Optional[int] = None
    assigned_to: Optional[UserSummary] = None
    created_by_id: int
    created_by: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskStatistics(BaseModel):
    total: int
    by_status: Dict[str, int]
    overdue: int
    assigned_to_me: int
    completion_rate: int
