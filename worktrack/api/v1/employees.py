"""Employee endpoints."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.config import settings
from worktrack.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from worktrack.core.security import Capability, Principal
from worktrack.crud.employee import employee as employee_crud
from worktrack.database import get_db
from worktrack.dependencies import get_current_principal, require_capability
from worktrack.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from worktrack.utils.permissions import can_view_employee, has_capability, is_self

router = APIRouter()


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List employees visible to the principal."""
    employees = await employee_crud.list_all(db)
    if not settings.ENFORCE_CAPABILITIES:
        return employees
    return [item for item in employees if can_view_employee(principal.role, item.id, principal.id)]


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.EMPLOYEE_MANAGE)),
):
    """Create employee."""
    existing = await employee_crud.find_conflict(db, email=payload.email, username=payload.username)
    if existing:
        raise ConflictError("Employee with this email or username already exists")
    return await employee_crud.create(db, obj_in=payload)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Fetch employee by id."""
    employee_obj = await employee_crud.get(db, id=employee_id)
    if not employee_obj:
        raise NotFoundError("Employee not found")
    if settings.ENFORCE_CAPABILITIES and not can_view_employee(principal.role, employee_obj.id, principal.id):
        raise ForbiddenError("Permission denied")
    return employee_obj


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update employee profile. Role cannot be changed; status is director-managed."""
    employee_obj = await employee_crud.get(db, id=employee_id)
    if not employee_obj:
        raise NotFoundError("Employee not found")
    if (
        settings.ENFORCE_CAPABILITIES
        and not has_capability(principal.role, Capability.EMPLOYEE_MANAGE)
        and not is_self(employee_obj.id, principal.id)
    ):
        raise ForbiddenError("Permission denied")
    if (
        settings.ENFORCE_CAPABILITIES
        and payload.status is not None
        and not has_capability(principal.role, Capability.EMPLOYEE_MANAGE)
    ):
        raise ForbiddenError("Only directors may change employment status")

    if payload.email is not None or payload.username is not None:
        existing = await employee_crud.find_conflict(
            db,
            email=payload.email or employee_obj.email,
            username=payload.username or employee_obj.username,
            exclude_id=employee_obj.id,
        )
        if existing:
            raise ConflictError("Employee with this email or username already exists")

    return await employee_crud.update(db, db_obj=employee_obj, obj_in=payload)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.EMPLOYEE_MANAGE)),
):
    """Delete employee."""
    removed = await employee_crud.remove(db, id=employee_id)
    if not removed:
        raise NotFoundError("Employee not found")
