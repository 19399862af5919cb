from app.core.time_utils import utc_now
from app.db import Base
from app.schemas.enums import TaskStatus
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship


class Task(Base):
    __tablename__ = "task"
    # Row ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default=TaskStatus.TO_DO.value)
    priority = Column(Integer, nullable=False, default=1)
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    project_id = Column(Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True)
    # Validated against membership when written, never revalidated afterwards
    assigned_to_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    created_by_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    project = relationship("Project")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    created_by = relationship("User", foreign_keys=[created_by_id])
    comments = relationship(
        "Comment", back_populates="task", cascade="all, delete-orphan", passive_deletes=True
    )
