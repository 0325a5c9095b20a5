"""Dashboard API endpoints."""
from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.api.v1.tasks import to_task_response
from worktrack.core.security import Principal
from worktrack.crud.employee import employee as employee_crud
from worktrack.crud.project import project as project_crud
from worktrack.crud.task import task as task_crud
from worktrack.database import get_db
from worktrack.dependencies import get_current_principal
from worktrack.models.task import TaskStatus
from worktrack.schemas.dashboard import DashboardSummaryResponse
from worktrack.schemas.task import TaskResponse
from worktrack.services.analytics_service import AnalyticsService
from worktrack.services.visibility_service import (
    CreationSource,
    TaskQuery,
    apply_task_filters,
    filter_projects_for_viewer,
    filter_tasks_for_viewer,
)
from worktrack.utils.permissions import can_view_employee
from worktrack.utils.timeutils import utcnow

router = APIRouter()


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Dashboard counters over the records the principal may see."""
    tasks = filter_tasks_for_viewer(await task_crud.list_all(db), principal)
    projects = filter_projects_for_viewer(await project_crud.list_all(db), principal)
    employees = [
        item
        for item in await employee_crud.list_all(db)
        if can_view_employee(principal.role, item.id, principal.id)
    ]

    summary = AnalyticsService.compute_dashboard_summary(tasks, projects, employees, principal, utcnow())
    return asdict(summary)


@router.get("/tasks", response_model=List[TaskResponse])
async def dashboard_tasks(
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    priority: Optional[str] = Query(default=None, description="Task priority or 'flagged'"),
    assignee_id: Optional[str] = None,
    source: Optional[CreationSource] = None,
    due_from: Optional[datetime] = None,
    due_to: Optional[datetime] = None,
    overdue_only: bool = False,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Dashboard task drill-down with compound filters."""
    tasks = filter_tasks_for_viewer(await task_crud.list_all(db), principal)
    employees = await employee_crud.list_all(db)
    query = TaskQuery(
        status=status_filter,
        priority=priority,
        assignee_id=assignee_id,
        source=source,
        due_from=due_from,
        due_to=due_to,
        overdue_only=overdue_only,
    )
    filtered = apply_task_filters(tasks, employees, query, now=utcnow())
    return [to_task_response(item, principal) for item in filtered]
