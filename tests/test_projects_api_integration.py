"""Integration tests for project endpoints."""
import pytest

from worktrack.crud.task import task as task_crud


@pytest.mark.asyncio
async def test_project_delete_removes_its_tasks(
    client, headers_for, db_session, make_task, director, staff, workflow_settings
):
    created = await client.post(
        "/api/v1/projects",
        json={"name": "Warehouse refit", "assigned_employee_id": str(staff.id)},
        headers=headers_for(director),
    )
    assert created.status_code == 201
    project_id = created.json()["id"]
    assert created.json()["created_by_id"] == str(director.id)

    task_response = await client.post(
        "/api/v1/tasks",
        json={"title": "Order shelving", "project_id": project_id, "assigned_to_id": str(staff.id)},
        headers=headers_for(director),
    )
    assert task_response.json()["project_name"] == "Warehouse refit"
    task_id = task_response.json()["id"]
    await client.post(
        f"/api/v1/tasks/{task_id}/comments", json={"content": "Quote attached"}, headers=headers_for(director)
    )
    unrelated = await make_task()

    deleted = await client.delete(f"/api/v1/projects/{project_id}", headers=headers_for(director))
    assert deleted.status_code == 200
    assert deleted.json() == {"id": project_id, "removed_tasks": 1}

    assert await task_crud.get(db_session, id=task_id) is None
    assert await task_crud.get(db_session, id=unrelated.id) is not None

    missing = await client.get(f"/api/v1/projects/{project_id}", headers=headers_for(director))
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_project_permissions(client, headers_for, project_head, staff, director, workflow_settings):
    refused = await client.post("/api/v1/projects", json={"name": "Head office"}, headers=headers_for(project_head))
    assert refused.status_code == 403

    own = await client.post(
        "/api/v1/projects",
        json={"name": "Portfolio", "is_employee_created": True},
        headers=headers_for(staff),
    )
    assert own.status_code == 201
    assert own.json()["assigned_employee_id"] == str(staff.id)

    other = await client.post("/api/v1/projects", json={"name": "Yard"}, headers=headers_for(director))

    listed = await client.get("/api/v1/projects", headers=headers_for(staff))
    assert [item["name"] for item in listed.json()] == ["Portfolio"]

    hidden = await client.get(f"/api/v1/projects/{other.json()['id']}", headers=headers_for(staff))
    assert hidden.status_code == 403

    renamed = await client.patch(
        f"/api/v1/projects/{own.json()['id']}", json={"progress": 50}, headers=headers_for(staff)
    )
    assert renamed.status_code == 200
    assert renamed.json()["progress"] == 50


@pytest.mark.asyncio
async def test_project_comments(client, headers_for, director, staff, workflow_settings):
    project = await client.post(
        "/api/v1/projects",
        json={"name": "Depot", "assigned_employee_id": str(staff.id)},
        headers=headers_for(director),
    )
    project_id = project.json()["id"]

    await client.post(
        f"/api/v1/projects/{project_id}/comments",
        json={"content": "Budget is tight", "is_visible_to_employee": False},
        headers=headers_for(director),
    )
    posted = await client.post(
        f"/api/v1/projects/{project_id}/comments",
        json={"content": "Noted"},
        headers=headers_for(staff),
    )
    assert posted.status_code == 201
    assert [(c["content"], c["user_role"]) for c in posted.json()["comments"]] == [("Noted", "Employee")]

    full = await client.get(f"/api/v1/projects/{project_id}", headers=headers_for(director))
    assert len(full.json()["comments"]) == 2
