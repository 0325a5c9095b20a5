"""Independent work log model."""
from enum import Enum
import uuid

from sqlalchemy import Column, Date, DateTime, Enum as SQLEnum, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from worktrack.database import Base
from worktrack.db.types import GUID, IdentifierString
from worktrack.utils.timeutils import utcnow


class WorkCategory(str, Enum):
    """Independent work category."""

    DESIGN = "Design"
    SITE = "Site"
    OFFICE = "Office"
    OTHER = "Other"


class IndependentWork(Base):
    """Per-employee log entry outside the task workflow."""

    __tablename__ = "independent_work"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    employee_id = Column(IdentifierString(), nullable=False, index=True)
    employee_name = Column(String(255), nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    work_description = Column(Text, nullable=False)
    category = Column(SQLEnum(WorkCategory), nullable=False)
    time_spent = Column(Float, nullable=False, default=0)  # hours
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    comments = relationship(
        "IndependentWorkComment",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="IndependentWorkComment.timestamp",
        lazy="selectin",
    )


class IndependentWorkComment(Base):
    """Append-only comment on an independent work entry."""

    __tablename__ = "independent_work_comments"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4, index=True)
    entry_id = Column(GUID(), ForeignKey("independent_work.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(IdentifierString(), nullable=False)
    user_name = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    entry = relationship("IndependentWork", back_populates="comments")
