from app.core.time_utils import utc_now
from app.db import Base
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship


class Comment(Base):
    __tablename__ = "comment"
    # Ids are never reused, so a stale parent_comment_id always fails the FK
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    is_edited = Column(Boolean, nullable=False, default=False)
    task_id = Column(Integer, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    # No ON DELETE action: a comment with replies cannot be deleted, even by a
    # racing request, while a whole task still cascades in one statement
    parent_comment_id = Column(Integer, ForeignKey("comment.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    task = relationship("Task", back_populates="comments")
    user = relationship("User")
    # Many-to-one only: replies are derived by query, the ORM must never
    # null out children when a parent is deleted
    parent = relationship("Comment", remote_side=[id])
