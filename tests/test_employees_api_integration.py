"""Integration tests for employee and independent work endpoints."""
import pytest


@pytest.mark.asyncio
async def test_employee_management(client, headers_for, director, project_head, staff, workflow_settings):
    payload = {
        "first_name": "Nina",
        "last_name": "Novak",
        "email": "nina@example.com",
        "username": "nina",
        "role": "Project Head",
    }
    refused = await client.post("/api/v1/employees", json=payload, headers=headers_for(project_head))
    assert refused.status_code == 403

    created = await client.post("/api/v1/employees", json=payload, headers=headers_for(director))
    assert created.status_code == 201
    assert created.json()["role"] == "Project Head"
    assert created.json()["full_name"] == "Nina Novak"

    duplicate = await client.post("/api/v1/employees", json=payload, headers=headers_for(director))
    assert duplicate.status_code == 409

    # role is not part of the update schema and is ignored
    updated = await client.patch(
        f"/api/v1/employees/{created.json()['id']}",
        json={"department": "Design", "role": "Director"},
        headers=headers_for(director),
    )
    assert updated.status_code == 200
    assert updated.json()["department"] == "Design"
    assert updated.json()["role"] == "Project Head"

    clash = await client.patch(
        f"/api/v1/employees/{created.json()['id']}",
        json={"email": staff.email},
        headers=headers_for(director),
    )
    assert clash.status_code == 409

    listed = await client.get("/api/v1/employees", headers=headers_for(staff))
    assert [item["id"] for item in listed.json()] == [str(staff.id)]

    other = await client.get(f"/api/v1/employees/{director.id}", headers=headers_for(staff))
    assert other.status_code == 403


@pytest.mark.asyncio
async def test_independent_work_log(client, headers_for, director, staff, workflow_settings):
    entry = {"date": "2025-04-02", "work_description": "Site visit", "category": "Site", "time_spent": 3.5}

    created = await client.post("/api/v1/independent-work", json=entry, headers=headers_for(staff))
    assert created.status_code == 201
    entry_id = created.json()["id"]
    assert created.json()["employee_id"] == str(staff.id)

    refused = await client.post(
        "/api/v1/independent-work",
        json={**entry, "employee_id": str(director.id)},
        headers=headers_for(staff),
    )
    assert refused.status_code == 403

    negative = await client.post(
        "/api/v1/independent-work", json={**entry, "time_spent": -1}, headers=headers_for(staff)
    )
    assert negative.status_code == 422

    commented = await client.post(
        f"/api/v1/independent-work/{entry_id}/comments",
        json={"content": "Photos uploaded"},
        headers=headers_for(staff),
    )
    assert commented.status_code == 201
    assert [c["content"] for c in commented.json()["comments"]] == ["Photos uploaded"]

    by_employee = await client.get(
        f"/api/v1/independent-work/employee/{staff.id}", headers=headers_for(director)
    )
    assert [item["id"] for item in by_employee.json()] == [entry_id]

    forbidden = await client.get(
        f"/api/v1/independent-work/employee/{director.id}", headers=headers_for(staff)
    )
    assert forbidden.status_code == 403

    updated = await client.patch(
        f"/api/v1/independent-work/{entry_id}", json={"time_spent": 4}, headers=headers_for(staff)
    )
    assert updated.json()["time_spent"] == 4

    deleted = await client.delete(f"/api/v1/independent-work/{entry_id}", headers=headers_for(staff))
    assert deleted.status_code == 204
    listed = await client.get("/api/v1/independent-work", headers=headers_for(staff))
    assert listed.json() == []


@pytest.mark.asyncio
async def test_employee_edits_own_profile_but_not_status(client, headers_for, director, staff, workflow_settings):
    profile = await client.patch(
        f"/api/v1/employees/{staff.id}", json={"phone": "+1 555 0100"}, headers=headers_for(staff)
    )
    assert profile.status_code == 200
    assert profile.json()["phone"] == "+1 555 0100"

    leave = await client.patch(
        f"/api/v1/employees/{staff.id}", json={"status": "On Leave"}, headers=headers_for(staff)
    )
    assert leave.status_code == 403

    current = await client.get(f"/api/v1/employees/{staff.id}", headers=headers_for(staff))
    assert current.json()["status"] == "Active"

    managed = await client.patch(
        f"/api/v1/employees/{staff.id}", json={"status": "On Leave"}, headers=headers_for(director)
    )
    assert managed.status_code == 200
    assert managed.json()["status"] == "On Leave"
