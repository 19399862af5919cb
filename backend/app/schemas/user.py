from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.enums import UserRole


class UserBase(BaseModel):
    email: str
    username: str = Field(..., min_length=1, max_length=100)
    full_name: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserSummary(BaseModel):
    """Compact user reference embedded in projects, tasks and comments."""

    id: int
    username: str
    full_name: Optional[str] = None

    model_config = {"from_attributes": True}


class UserRead(UserBase):
    id: int
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
