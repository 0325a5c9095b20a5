"""Project model."""
from enum import Enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from worktrack.database import Base
from worktrack.db.types import GUID, IdentifierString
from worktrack.utils.timeutils import utcnow


class ProjectStatus(str, Enum):
    """Project status."""

    CURRENT = "Current"
    UPCOMING = "Upcoming"
    SLEEPING_ON_HOLD = "Sleeping-on-Hold"
    COMPLETED = "Completed"


class Project(Base):
    """Container of tasks. Owns its tasks by reference."""

    __tablename__ = "projects"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    assigned_employee_id = Column(IdentifierString(), nullable=True, index=True)
    assigned_employee_name = Column(String(255), nullable=True)
    status = Column(SQLEnum(ProjectStatus), default=ProjectStatus.CURRENT, nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    progress = Column(Integer, default=0, nullable=False)
    is_employee_created = Column(Boolean, default=False, nullable=False)
    director_input_required = Column(Boolean, default=False, nullable=False)
    created_by_id = Column(IdentifierString(), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    tasks = relationship("Task", back_populates="project", passive_deletes=True)
    comments = relationship(
        "ProjectComment",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectComment.timestamp",
        lazy="selectin",
    )


class ProjectComment(Base):
    """Append-only project comment."""

    __tablename__ = "project_comments"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    project_id = Column(GUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(IdentifierString(), nullable=False)
    user_name = Column(String(255), nullable=False, default="")
    user_role = Column(String(50), nullable=True)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    is_visible_to_employee = Column(Boolean, default=True, nullable=False)

    project = relationship("Project", back_populates="comments")
