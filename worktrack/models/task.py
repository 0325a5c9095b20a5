"""Task model with its completion and extension sub-states."""
from enum import Enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from worktrack.database import Base
from worktrack.db.types import GUID, IdentifierString
from worktrack.utils.timeutils import utcnow


class TaskStatus(str, Enum):
    """Primary lifecycle status."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    """Task priority."""

    URGENT = "Urgent"
    LESS_URGENT = "Less Urgent"
    FREE_TIME = "Free Time"
    CUSTOM = "Custom"


class CompletionRequestStatus(str, Enum):
    """Completion sub-workflow state. NULL on the row means never requested."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ExtensionRequestStatus(str, Enum):
    """Deadline extension sub-workflow state."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Task(Base):
    """Unit of work."""

    __tablename__ = "tasks"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    project_id = Column(GUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True)
    project_name = Column(String(255), nullable=True)

    assigned_to_id = Column(IdentifierString(), nullable=True, index=True)
    assigned_to_name = Column(String(255), nullable=True)
    assigned_by_id = Column(IdentifierString(), nullable=False, index=True)
    assigned_by_name = Column(String(255), nullable=True)

    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.LESS_URGENT, nullable=False, index=True)
    status = Column(SQLEnum(TaskStatus), default=TaskStatus.PENDING, nullable=False, index=True)
    estimated_hours = Column(Float, nullable=True)
    actual_hours = Column(Float, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    completed_date = Column(DateTime(timezone=True), nullable=True)  # set iff status is COMPLETED
    reminder_date = Column(DateTime(timezone=True), nullable=True)

    is_locked = Column(Boolean, default=False, nullable=False)
    director_input_required = Column(Boolean, default=False, nullable=False)
    is_employee_created = Column(Boolean, default=False, nullable=False)
    work_done = Column(Integer, default=0, nullable=False)  # percent
    rating = Column(Integer, nullable=True)
    rating_comment = Column(Text, nullable=True)

    # Completion approval
    completion_request_status = Column(SQLEnum(CompletionRequestStatus), nullable=True, index=True)
    completion_requested_by = Column(IdentifierString(), nullable=True)
    completion_request_date = Column(DateTime(timezone=True), nullable=True)
    completion_response_by = Column(IdentifierString(), nullable=True)
    completion_response_date = Column(DateTime(timezone=True), nullable=True)
    completion_response_comment = Column(Text, nullable=True)

    # Deadline extension
    extension_request_status = Column(SQLEnum(ExtensionRequestStatus), nullable=True, index=True)
    new_deadline_proposal = Column(DateTime(timezone=True), nullable=True)
    reason_for_extension = Column(Text, nullable=True)
    extension_requested_by = Column(IdentifierString(), nullable=True)
    extension_request_date = Column(DateTime(timezone=True), nullable=True)
    extension_response_by = Column(IdentifierString(), nullable=True)
    extension_response_date = Column(DateTime(timezone=True), nullable=True)
    extension_response_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskComment.timestamp",
        lazy="selectin",
    )


class TaskComment(Base):
    """Append-only task comment."""

    __tablename__ = "task_comments"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    task_id = Column(GUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(IdentifierString(), nullable=False)
    user_name = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    is_visible_to_employee = Column(Boolean, default=True, nullable=False)

    task = relationship("Task", back_populates="comments")
