"""Independent work schemas."""
import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from worktrack.models.independent_work import WorkCategory


class IndependentWorkCommentResponse(BaseModel):
    """Comment on an independent work entry."""

    id: UUID
    user_id: str
    user_name: str
    content: str
    timestamp: dt.datetime

    class Config:
        from_attributes = True


class IndependentWorkBase(BaseModel):
    """Base independent work schema."""

    date: dt.date
    work_description: str = Field(min_length=1)
    category: WorkCategory
    time_spent: float = Field(ge=0)


class IndependentWorkCreate(IndependentWorkBase):
    """Independent work creation schema. Employees log for themselves."""

    employee_id: Optional[str] = None
    employee_name: Optional[str] = None


class IndependentWorkUpdate(BaseModel):
    """Independent work update schema."""

    date: Optional[dt.date] = None
    work_description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[WorkCategory] = None
    time_spent: Optional[float] = Field(default=None, ge=0)


class IndependentWorkResponse(IndependentWorkBase):
    """Independent work response schema."""

    id: UUID
    employee_id: str
    employee_name: str
    comments: List[IndependentWorkCommentResponse] = []
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True
