from app.core.time_utils import utc_now
from app.db import Base
from app.models.project import Project
from app.models.user import User
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship


class ProjectMember(Base):
    __tablename__ = "project_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    added_by_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    added_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    project = relationship(Project, back_populates="memberships")
    user = relationship(User, foreign_keys=[user_id], backref="project_memberships")
    added_by = relationship(User, foreign_keys=[added_by_id])

    __table_args__ = (
        # Last line of defence against concurrent duplicate adds
        UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
        {"sqlite_autoincrement": True},
    )
