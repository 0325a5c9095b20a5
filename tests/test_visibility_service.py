"""Tests for attribution and visibility rules."""
import uuid
from datetime import datetime, timedelta, timezone

from worktrack.core.security import Principal
from worktrack.models.employee import Employee, EmployeeRole
from worktrack.models.project import Project, ProjectStatus
from worktrack.models.task import Task, TaskComment, TaskPriority, TaskStatus
from worktrack.services.visibility_service import (
    CreationSource,
    TaskQuery,
    apply_task_filters,
    classify_project_source,
    classify_task_source,
    filter_projects_for_viewer,
    filter_tasks_for_viewer,
    visible_comments,
)

NOW = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)

DIRECTOR_ID = uuid.uuid4()
HEAD_ID = uuid.uuid4()
STAFF_ID = uuid.uuid4()

EMPLOYEES = [
    Employee(id=DIRECTOR_ID, first_name="Diana", last_name="D", role=EmployeeRole.DIRECTOR),
    Employee(id=HEAD_ID, first_name="Paul", last_name="H", role=EmployeeRole.PROJECT_HEAD),
    Employee(id=STAFF_ID, first_name="Erin", last_name="E", role=EmployeeRole.EMPLOYEE),
]


def build_task(**overrides) -> Task:
    values = {
        "id": uuid.uuid4(),
        "title": "Task",
        "assigned_to_id": str(STAFF_ID),
        "assigned_by_id": str(DIRECTOR_ID),
        "priority": TaskPriority.LESS_URGENT,
        "status": TaskStatus.PENDING,
        "is_employee_created": False,
        "director_input_required": False,
        "due_date": None,
    }
    values.update(overrides)
    return Task(**values)


def test_employee_created_always_wins():
    task = build_task(is_employee_created=True, assigned_by_id=str(HEAD_ID))
    assert classify_task_source(task, EMPLOYEES) == CreationSource.EMPLOYEE


def test_project_head_assigner_matches_across_id_types():
    # assigner stored as upper-case text, employee id as a UUID object
    task = build_task(assigned_by_id=str(HEAD_ID).upper())
    assert classify_task_source(task, EMPLOYEES) == CreationSource.PROJECT_HEAD


def test_unknown_assigner_counts_as_director():
    assert classify_task_source(build_task(), EMPLOYEES) == CreationSource.DIRECTOR
    assert classify_task_source(build_task(assigned_by_id="ghost"), []) == CreationSource.DIRECTOR


def test_project_source():
    project = Project(name="Depot", is_employee_created=False, created_by_id=str(HEAD_ID))
    assert classify_project_source(project, EMPLOYEES) == CreationSource.PROJECT_HEAD
    project.is_employee_created = True
    assert classify_project_source(project, EMPLOYEES) == CreationSource.EMPLOYEE


def test_employee_sees_only_assigned_records():
    mine = build_task()
    theirs = build_task(assigned_to_id=str(HEAD_ID))
    unassigned = build_task(assigned_to_id=None)
    staff = Principal(role=EmployeeRole.EMPLOYEE, id=str(STAFF_ID))
    head = Principal(role=EmployeeRole.PROJECT_HEAD, id=str(HEAD_ID))

    assert filter_tasks_for_viewer([mine, theirs, unassigned], staff) == [mine]
    assert filter_tasks_for_viewer([mine, theirs, unassigned], head) == [mine, theirs, unassigned]

    project = Project(name="Depot", assigned_employee_id=str(STAFF_ID), status=ProjectStatus.CURRENT)
    other = Project(name="Yard", assigned_employee_id=None, status=ProjectStatus.CURRENT)
    assert filter_projects_for_viewer([project, other], staff) == [project]


def test_hidden_comments_dropped_for_employees():
    shown = TaskComment(user_id="a", user_name="A", content="hi", is_visible_to_employee=True)
    hidden = TaskComment(user_id="b", user_name="B", content="internal", is_visible_to_employee=False)

    staff = Principal(role=EmployeeRole.EMPLOYEE, id=str(STAFF_ID))
    director = Principal(role=EmployeeRole.DIRECTOR, id=str(DIRECTOR_ID))
    assert visible_comments([shown, hidden], staff) == [shown]
    assert visible_comments([shown, hidden], director) == [shown, hidden]


def test_compound_filters_and_together():
    urgent_flagged = build_task(priority=TaskPriority.URGENT, director_input_required=True)
    urgent_by_head = build_task(priority=TaskPriority.URGENT, assigned_by_id=str(HEAD_ID))
    free_time = build_task(priority=TaskPriority.FREE_TIME)
    tasks = [urgent_flagged, urgent_by_head, free_time]

    assert apply_task_filters(tasks, EMPLOYEES, TaskQuery(priority="flagged"), NOW) == [urgent_flagged]
    assert apply_task_filters(tasks, EMPLOYEES, TaskQuery(priority="Urgent"), NOW) == [urgent_flagged, urgent_by_head]
    assert apply_task_filters(
        tasks, EMPLOYEES, TaskQuery(priority="Urgent", source=CreationSource.PROJECT_HEAD), NOW
    ) == [urgent_by_head]
    assert apply_task_filters(tasks, EMPLOYEES, TaskQuery(status=TaskStatus.COMPLETED), NOW) == []
    assert apply_task_filters(tasks, EMPLOYEES, TaskQuery(priority="bogus"), NOW) == []
    assert apply_task_filters(tasks, EMPLOYEES, TaskQuery(assignee_id=str(HEAD_ID)), NOW) == []


def test_due_range_is_inclusive():
    start = datetime(2025, 6, 1, tzinfo=timezone.utc)
    end = datetime(2025, 6, 30, tzinfo=timezone.utc)
    on_start = build_task(due_date=start)
    on_end = build_task(due_date=end)
    after = build_task(due_date=end + timedelta(seconds=1))
    no_due = build_task()

    query = TaskQuery(due_from=start, due_to=end)
    assert apply_task_filters([on_start, on_end, after, no_due], EMPLOYEES, query, NOW) == [on_start, on_end]


def test_overdue_only():
    late = build_task(due_date=NOW - timedelta(days=1))
    late_but_done = build_task(due_date=NOW - timedelta(days=1), status=TaskStatus.COMPLETED)
    upcoming = build_task(due_date=NOW + timedelta(days=1))

    result = apply_task_filters([late, late_but_done, upcoming], EMPLOYEES, TaskQuery(overdue_only=True), NOW)
    assert result == [late]
