"""Integration tests for dashboards API endpoints."""
from datetime import datetime, timedelta, timezone

import pytest

from worktrack.models.project import Project, ProjectStatus
from worktrack.models.task import TaskPriority, TaskStatus


@pytest.mark.asyncio
async def test_summary_for_director_and_employee(client, headers_for, db_session, make_task, director, project_head, staff):
    now = datetime.now(timezone.utc)
    await make_task(due_date=now - timedelta(days=1))
    await make_task(status=TaskStatus.COMPLETED, completed_date=now, priority=TaskPriority.FREE_TIME)
    await make_task(assigned_to_id=str(project_head.id), priority=TaskPriority.LESS_URGENT)
    db_session.add(Project(name="Depot", status=ProjectStatus.CURRENT, assigned_employee_id=str(staff.id)))
    db_session.add(Project(name="Archive", status=ProjectStatus.COMPLETED))
    await db_session.commit()

    response = await client.get("/api/v1/dashboards/summary", headers=headers_for(director))
    assert response.status_code == 200
    data = response.json()
    assert data["tasks"] == {"total": 3, "completed": 1, "pending": 2, "in_progress": 0, "overdue": 1}
    assert data["projects"] == {"total": 2, "active": 1}
    assert data["active_employees"] == 3
    assert data["scope"] == "all"
    assert data["priority_breakdown"] == {"urgent": 1, "less_urgent": 1, "free_time": 0, "completed": 1}

    response = await client.get("/api/v1/dashboards/summary", headers=headers_for(staff))
    data = response.json()
    assert data["tasks"]["total"] == 2
    assert data["projects"] == {"total": 1, "active": 1}
    assert data["active_employees"] == 1
    assert data["scope"] == "assigned"
    assert data["priority_breakdown"]["less_urgent"] == 0


@pytest.mark.asyncio
async def test_dashboard_task_filters(client, headers_for, make_task, director, project_head, staff):
    flagged = await make_task(director_input_required=True)
    by_head = await make_task(assigned_by_id=str(project_head.id), priority=TaskPriority.FREE_TIME)
    await make_task(is_employee_created=True, priority=TaskPriority.LESS_URGENT)

    response = await client.get("/api/v1/dashboards/tasks?priority=flagged", headers=headers_for(director))
    assert [item["id"] for item in response.json()] == [str(flagged.id)]

    response = await client.get(
        "/api/v1/dashboards/tasks", params={"source": "Project Head"}, headers=headers_for(director)
    )
    assert [item["id"] for item in response.json()] == [str(by_head.id)]

    response = await client.get(
        "/api/v1/dashboards/tasks",
        params={"source": "Employee", "priority": "Urgent"},
        headers=headers_for(director),
    )
    assert response.json() == []


@pytest.mark.asyncio
async def test_meta_enums(client, headers_for, staff):
    response = await client.get("/api/v1/meta/enums", headers=headers_for(staff))
    assert response.status_code == 200
    data = response.json()
    assert data["task_status"] == ["Pending", "In Progress", "Completed"]
    assert "flagged" in data["task_filter_priority"]

    response = await client.get("/api/v1/meta/capabilities", headers=headers_for(staff))
    assert response.json() == []


@pytest.mark.asyncio
async def test_health_and_metrics(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "ok"

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "worktrack_http_requests_total" in response.text
