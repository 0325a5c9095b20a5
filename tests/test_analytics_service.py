"""Tests for dashboard aggregation."""
import uuid
from datetime import datetime, timedelta, timezone

from worktrack.core.security import Principal
from worktrack.models.employee import Employee, EmployeeRole, EmployeeStatus
from worktrack.models.project import Project, ProjectStatus
from worktrack.models.task import Task, TaskPriority, TaskStatus
from worktrack.services.analytics_service import analytics_service, is_overdue

NOW = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
STAFF_ID = str(uuid.uuid4())
OTHER_ID = str(uuid.uuid4())


def build_task(**overrides) -> Task:
    values = {
        "title": "Task",
        "assigned_to_id": STAFF_ID,
        "assigned_by_id": "dir-1",
        "priority": TaskPriority.URGENT,
        "status": TaskStatus.PENDING,
        "due_date": None,
    }
    values.update(overrides)
    return Task(**values)


def test_pending_task_due_yesterday_is_overdue():
    task = build_task(due_date=NOW - timedelta(days=1))
    summary = analytics_service.compute_dashboard_summary(
        [task], [], [], Principal(role=EmployeeRole.DIRECTOR, id="dir-1"), NOW
    )
    assert summary.tasks.overdue == 1
    assert summary.tasks.completed == 0
    assert summary.tasks.pending == 1


def test_overdue_flips_exactly_at_due_date():
    due = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    task = build_task(due_date=due)
    assert not is_overdue(task, due - timedelta(microseconds=1))
    assert not is_overdue(task, due)
    assert is_overdue(task, due + timedelta(microseconds=1))

    task.status = TaskStatus.COMPLETED
    assert not is_overdue(task, due + timedelta(days=3))


def test_naive_due_dates_are_treated_as_utc():
    task = build_task(due_date=datetime(2025, 5, 31, 9, 0))
    assert is_overdue(task, NOW)


def test_summary_counters():
    tasks = [
        build_task(status=TaskStatus.COMPLETED, priority=TaskPriority.URGENT),
        build_task(status=TaskStatus.IN_PROGRESS, priority=TaskPriority.LESS_URGENT),
        build_task(status=TaskStatus.PENDING, priority=TaskPriority.FREE_TIME, assigned_to_id=OTHER_ID),
        build_task(status=TaskStatus.PENDING, priority=TaskPriority.CUSTOM),
    ]
    projects = [
        Project(name="A", status=ProjectStatus.CURRENT),
        Project(name="B", status=ProjectStatus.SLEEPING_ON_HOLD),
        Project(name="C", status=ProjectStatus.COMPLETED),
    ]
    employees = [
        Employee(first_name="A", last_name="A", status=EmployeeStatus.ACTIVE),
        Employee(first_name="B", last_name="B", status=EmployeeStatus.ON_LEAVE),
    ]

    director = Principal(role=EmployeeRole.DIRECTOR, id="dir-1")
    summary = analytics_service.compute_dashboard_summary(tasks, projects, employees, director, NOW)

    assert (summary.tasks.total, summary.tasks.completed, summary.tasks.in_progress, summary.tasks.pending) == (4, 1, 1, 2)
    assert (summary.projects.total, summary.projects.active) == (3, 1)
    assert summary.active_employees == 1
    assert summary.scope == "all"
    breakdown = summary.priority_breakdown
    assert (breakdown.urgent, breakdown.less_urgent, breakdown.free_time, breakdown.completed) == (0, 1, 1, 1)

    staff = Principal(role=EmployeeRole.EMPLOYEE, id=STAFF_ID)
    own = analytics_service.compute_dashboard_summary(tasks, projects, employees, staff, NOW)
    assert own.scope == "assigned"
    assert own.priority_breakdown.free_time == 0
    assert own.priority_breakdown.completed == 1


def test_inputs_are_not_mutated():
    tasks = [build_task(due_date=NOW - timedelta(hours=1))]
    snapshot = [(t.status, t.due_date) for t in tasks]
    principal = Principal(role=EmployeeRole.PROJECT_HEAD, id="ph-1")

    first = analytics_service.compute_dashboard_summary(tasks, [], [], principal, NOW)
    second = analytics_service.compute_dashboard_summary(tasks, [], [], principal, NOW)

    assert first == second
    assert [(t.status, t.due_date) for t in tasks] == snapshot
