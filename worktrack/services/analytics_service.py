"""Dashboard aggregation over task, project and employee snapshots.

Everything here is pure: inputs are never mutated and the result depends only
on the snapshot and the ``now`` passed in. Overdue is derived on every call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from worktrack.core.security import Principal
from worktrack.models.employee import EmployeeStatus
from worktrack.models.project import ProjectStatus
from worktrack.models.task import TaskPriority, TaskStatus
from worktrack.utils.permissions import can_view_all, is_self
from worktrack.utils.timeutils import as_utc, utcnow


@dataclass
class TaskCounters:
    """Task counters data transfer object."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0


@dataclass
class ProjectCounters:
    """Project counters data transfer object."""

    total: int = 0
    active: int = 0


@dataclass
class PriorityBreakdown:
    """Open tasks per priority bucket plus the completed count of the same scope."""

    urgent: int = 0
    less_urgent: int = 0
    free_time: int = 0
    completed: int = 0


@dataclass
class DashboardSummaryDTO:
    """Dashboard summary data transfer object."""

    tasks: TaskCounters
    projects: ProjectCounters
    active_employees: int
    priority_breakdown: PriorityBreakdown
    scope: str  # "all" or "assigned"
    viewer_id: Optional[str] = None


def is_overdue(task: Any, now: datetime) -> bool:
    """Not completed, has a due date, and the due date is strictly before now."""
    if task.status == TaskStatus.COMPLETED:
        return False
    due = as_utc(task.due_date)
    return due is not None and due < as_utc(now)


class AnalyticsService:
    """Service for computing dashboard counters."""

    @staticmethod
    def count_tasks(tasks: Iterable[Any], now: datetime) -> TaskCounters:
        counters = TaskCounters()
        for task in tasks:
            counters.total += 1
            if task.status == TaskStatus.COMPLETED:
                counters.completed += 1
            elif task.status == TaskStatus.IN_PROGRESS:
                counters.in_progress += 1
            elif task.status == TaskStatus.PENDING:
                counters.pending += 1
            if is_overdue(task, now):
                counters.overdue += 1
        return counters

    @staticmethod
    def count_projects(projects: Iterable[Any]) -> ProjectCounters:
        counters = ProjectCounters()
        for project in projects:
            counters.total += 1
            if project.status == ProjectStatus.CURRENT:
                counters.active += 1
        return counters

    @staticmethod
    def count_active_employees(employees: Iterable[Any]) -> int:
        return sum(1 for employee in employees if employee.status == EmployeeStatus.ACTIVE)

    @staticmethod
    def priority_breakdown(tasks: Iterable[Any]) -> PriorityBreakdown:
        """Bucket open tasks by priority; completed tasks are counted once, separately.

        Custom priority has no bucket of its own.
        """
        breakdown = PriorityBreakdown()
        for task in tasks:
            if task.status == TaskStatus.COMPLETED:
                breakdown.completed += 1
            elif task.priority == TaskPriority.URGENT:
                breakdown.urgent += 1
            elif task.priority == TaskPriority.LESS_URGENT:
                breakdown.less_urgent += 1
            elif task.priority == TaskPriority.FREE_TIME:
                breakdown.free_time += 1
        return breakdown

    @staticmethod
    def compute_dashboard_summary(
        tasks: Iterable[Any],
        projects: Iterable[Any],
        employees: Iterable[Any],
        principal: Principal,
        now: Optional[datetime] = None,
    ) -> DashboardSummaryDTO:
        """Summarise a snapshot for a viewer.

        Directors and project heads get the priority breakdown over every
        task in the snapshot; employees over the tasks assigned to them.
        """
        now = now or utcnow()
        tasks = list(tasks)

        if can_view_all(principal.role):
            scope = "all"
            scoped: List[Any] = tasks
        else:
            scope = "assigned"
            scoped = [task for task in tasks if is_self(task.assigned_to_id, principal.id)]

        return DashboardSummaryDTO(
            tasks=AnalyticsService.count_tasks(tasks, now),
            projects=AnalyticsService.count_projects(projects),
            active_employees=AnalyticsService.count_active_employees(employees),
            priority_breakdown=AnalyticsService.priority_breakdown(scoped),
            scope=scope,
            viewer_id=principal.id or None,
        )


analytics_service = AnalyticsService()
