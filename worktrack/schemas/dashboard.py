"""Dashboard schemas."""
from typing import Optional

from pydantic import BaseModel


class TaskCountersResponse(BaseModel):
    total: int
    completed: int
    pending: int
    in_progress: int
    overdue: int

    class Config:
        from_attributes = True


class ProjectCountersResponse(BaseModel):
    total: int
    active: int

    class Config:
        from_attributes = True


class PriorityBreakdownResponse(BaseModel):
    urgent: int
    less_urgent: int
    free_time: int
    completed: int

    class Config:
        from_attributes = True


class DashboardSummaryResponse(BaseModel):
    """Dashboard counters for the acting principal."""

    tasks: TaskCountersResponse
    projects: ProjectCountersResponse
    active_employees: int
    priority_breakdown: PriorityBreakdownResponse
    scope: str
    viewer_id: Optional[str] = None

    class Config:
        from_attributes = True
