"""Project schemas."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from worktrack.models.project import ProjectStatus


class ProjectCommentResponse(BaseModel):
    """Project comment."""

    id: UUID
    user_id: str
    user_name: str
    user_role: Optional[str] = None
    content: str
    timestamp: datetime
    is_visible_to_employee: bool

    class Config:
        from_attributes = True


class ProjectBase(BaseModel):
    """Base project schema."""

    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    assigned_employee_id: Optional[str] = None
    assigned_employee_name: Optional[str] = None
    status: ProjectStatus = ProjectStatus.CURRENT
    start_date: Optional[datetime] = None
    progress: int = Field(default=0, ge=0, le=100)
    director_input_required: bool = False
    is_employee_created: bool = False


class ProjectCreate(ProjectBase):
    """Project creation schema."""

    pass


class ProjectUpdate(BaseModel):
    """Project update schema."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    assigned_employee_id: Optional[str] = None
    assigned_employee_name: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[datetime] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    director_input_required: Optional[bool] = None


class ProjectResponse(ProjectBase):
    """Project response schema."""

    id: UUID
    created_by_id: Optional[str] = None
    comments: List[ProjectCommentResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectDeleteResponse(BaseModel):
    """Outcome of a cascading project delete."""

    id: UUID
    removed_tasks: int
