"""Attribution and visibility rules for tasks and projects."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from worktrack.core.security import Principal
from worktrack.models.employee import EmployeeRole
from worktrack.models.task import TaskPriority, TaskStatus
from worktrack.services.analytics_service import is_overdue
from worktrack.utils.identifiers import ids_match, normalize_id
from worktrack.utils.permissions import can_view_all, is_self
from worktrack.utils.timeutils import as_utc, utcnow

FLAGGED_PRIORITY = "flagged"


class CreationSource(str, Enum):
    """Who originated a task or project."""

    DIRECTOR = "Director"
    PROJECT_HEAD = "Project Head"
    EMPLOYEE = "Employee"


def _as_role(value: Any) -> Optional[EmployeeRole]:
    try:
        return EmployeeRole(value)
    except ValueError:
        return None


def build_role_index(employees: Iterable[Any]) -> Dict[str, Optional[EmployeeRole]]:
    """Map normalized employee ids to roles."""
    index: Dict[str, Optional[EmployeeRole]] = {}
    for employee in employees:
        key = normalize_id(getattr(employee, "id", None))
        if key is not None:
            index[key] = _as_role(getattr(employee, "role", None))
    return index


def _classify(employee_created: bool, creator_id: Any, roles: Dict[str, Optional[EmployeeRole]]) -> CreationSource:
    if employee_created:
        return CreationSource.EMPLOYEE
    if roles.get(normalize_id(creator_id) or "") == EmployeeRole.PROJECT_HEAD:
        return CreationSource.PROJECT_HEAD
    return CreationSource.DIRECTOR


def classify_task_source(task: Any, employees: Iterable[Any]) -> CreationSource:
    """Classify a task as Director, Project Head or Employee originated.

    Self-service tasks are always Employee; otherwise the assigner's role
    decides, and anything not traceable to a project head counts as
    Director.
    """
    return _classify(bool(task.is_employee_created), task.assigned_by_id, build_role_index(employees))


def classify_project_source(project: Any, employees: Iterable[Any]) -> CreationSource:
    """Same rule as tasks, using the project's creator."""
    return _classify(bool(project.is_employee_created), project.created_by_id, build_role_index(employees))


def filter_tasks_for_viewer(tasks: Iterable[Any], principal: Principal) -> List[Any]:
    """Employees only see tasks assigned to them."""
    if can_view_all(principal.role):
        return list(tasks)
    return [task for task in tasks if is_self(task.assigned_to_id, principal.id)]


def filter_projects_for_viewer(projects: Iterable[Any], principal: Principal) -> List[Any]:
    """Employees only see projects assigned to them."""
    if can_view_all(principal.role):
        return list(projects)
    return [project for project in projects if is_self(project.assigned_employee_id, principal.id)]


def can_view_task(task: Any, principal: Principal) -> bool:
    return can_view_all(principal.role) or is_self(task.assigned_to_id, principal.id)


def can_view_project(project: Any, principal: Principal) -> bool:
    return can_view_all(principal.role) or is_self(project.assigned_employee_id, principal.id)


def visible_comments(comments: Iterable[Any], principal: Principal) -> List[Any]:
    """Drop comments hidden from employees when the viewer is one."""
    if principal.role == EmployeeRole.EMPLOYEE:
        return [comment for comment in comments if comment.is_visible_to_employee]
    return list(comments)


@dataclass
class TaskQuery:
    """Compound dashboard filter. Every set field must match."""

    status: Optional[TaskStatus] = None
    priority: Optional[str] = None  # a TaskPriority value or "flagged"
    assignee_id: Optional[str] = None
    source: Optional[CreationSource] = None
    due_from: Optional[datetime] = None
    due_to: Optional[datetime] = None
    overdue_only: bool = False


def _matches_priority(task: Any, priority: str) -> bool:
    if priority == FLAGGED_PRIORITY:
        return bool(task.director_input_required)
    try:
        return task.priority == TaskPriority(priority)
    except ValueError:
        return False


def apply_task_filters(
    tasks: Iterable[Any],
    employees: Iterable[Any],
    query: TaskQuery,
    now: Optional[datetime] = None,
) -> List[Any]:
    """Filter tasks by AND-ing every criterion set on ``query``.

    The due date range is inclusive on both ends; tasks without a due date
    never match a range.
    """
    now = now or utcnow()
    roles = build_role_index(employees) if query.source is not None else {}
    due_from = as_utc(query.due_from)
    due_to = as_utc(query.due_to)

    matched = []
    for task in tasks:
        if query.status is not None and task.status != query.status:
            continue
        if query.priority and not _matches_priority(task, query.priority):
            continue
        if query.assignee_id is not None and not ids_match(task.assigned_to_id, query.assignee_id):
            continue
        if query.source is not None and _classify(
            bool(task.is_employee_created), task.assigned_by_id, roles
        ) != query.source:
            continue
        if due_from is not None or due_to is not None:
            due = as_utc(task.due_date)
            if due is None:
                continue
            if due_from is not None and due < due_from:
                continue
            if due_to is not None and due > due_to:
                continue
        if query.overdue_only and not is_overdue(task, now):
            continue
        matched.append(task)
    return matched
