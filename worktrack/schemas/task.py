"""Task schemas."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from worktrack.models.task import (
    CompletionRequestStatus,
    ExtensionRequestStatus,
    TaskPriority,
    TaskStatus,
)


class CommentCreate(BaseModel):
    """Comment append payload."""

    content: str = Field(min_length=1)
    author_name: Optional[str] = None
    is_visible_to_employee: bool = True


class TaskCommentResponse(BaseModel):
    """Task comment."""

    id: UUID
    user_id: str
    user_name: str
    content: str
    timestamp: datetime
    is_visible_to_employee: bool

    class Config:
        from_attributes = True


class TaskBase(BaseModel):
    """Base task schema."""

    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    project_id: Optional[UUID] = None
    project_name: Optional[str] = None
    assigned_to_id: Optional[str] = None
    assigned_to_name: Optional[str] = None
    priority: TaskPriority = TaskPriority.LESS_URGENT
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    director_input_required: bool = False
    is_employee_created: bool = False


class TaskCreate(TaskBase):
    """Task creation schema. The assigner is the acting principal."""

    status: TaskStatus = TaskStatus.PENDING
    assigned_by_name: Optional[str] = None
    work_done: int = Field(default=0, ge=0, le=100)


class TaskUpdate(BaseModel):
    """Task update schema for fields outside the approval sub-workflows."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    project_id: Optional[UUID] = None
    project_name: Optional[str] = None
    assigned_to_id: Optional[str] = None
    assigned_to_name: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    is_locked: Optional[bool] = None
    director_input_required: Optional[bool] = None
    work_done: Optional[int] = Field(default=None, ge=0, le=100)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    rating_comment: Optional[str] = None


class TaskStatusUpdate(BaseModel):
    """Direct primary status change."""

    status: TaskStatus


class CompletionResponsePayload(BaseModel):
    """Director decision on a completion request."""

    action: Literal["approve", "reject"]
    comment: Optional[str] = None
    work_done: Optional[int] = Field(default=None, ge=0, le=100)


class ExtensionRequestPayload(BaseModel):
    """Deadline extension proposal."""

    new_deadline: datetime
    reason: str = Field(min_length=1)


class ExtensionResponsePayload(BaseModel):
    """Decision on a deadline extension."""

    status: ExtensionRequestStatus
    comment: Optional[str] = None


class TaskResponse(TaskBase):
    """Task response schema."""

    id: UUID
    status: TaskStatus
    assigned_by_id: str
    assigned_by_name: Optional[str] = None
    actual_hours: Optional[float] = None
    completed_date: Optional[datetime] = None
    is_locked: bool
    work_done: int
    rating: Optional[int] = None
    rating_comment: Optional[str] = None

    completion_request_status: Optional[CompletionRequestStatus] = None
    completion_requested_by: Optional[str] = None
    completion_request_date: Optional[datetime] = None
    completion_response_by: Optional[str] = None
    completion_response_date: Optional[datetime] = None
    completion_response_comment: Optional[str] = None

    extension_request_status: Optional[ExtensionRequestStatus] = None
    new_deadline_proposal: Optional[datetime] = None
    reason_for_extension: Optional[str] = None
    extension_requested_by: Optional[str] = None
    extension_request_date: Optional[datetime] = None
    extension_response_by: Optional[str] = None
    extension_response_date: Optional[datetime] = None
    extension_response_comment: Optional[str] = None

    comments: List[TaskCommentResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
