"""Independent work log endpoints."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.config import settings
from worktrack.core.exceptions import ForbiddenError, NotFoundError
from worktrack.core.security import Principal
from worktrack.crud.independent_work import independent_work as work_crud
from worktrack.database import get_db
from worktrack.dependencies import get_current_principal
from worktrack.models.employee import EmployeeRole
from worktrack.models.independent_work import IndependentWork
from worktrack.schemas.independent_work import (
    IndependentWorkCreate,
    IndependentWorkResponse,
    IndependentWorkUpdate,
)
from worktrack.schemas.task import CommentCreate
from worktrack.utils.permissions import can_view_employee, is_self

router = APIRouter()


def _check_owner(entry: IndependentWork, principal: Principal) -> None:
    if settings.ENFORCE_CAPABILITIES and not can_view_employee(principal.role, entry.employee_id, principal.id):
        raise ForbiddenError("Entry belongs to another employee")


async def _get_entry(db: AsyncSession, entry_id: UUID, principal: Principal) -> IndependentWork:
    entry = await work_crud.get(db, id=entry_id)
    if not entry:
        raise NotFoundError("Independent work entry not found")
    _check_owner(entry, principal)
    return entry


@router.get("", response_model=List[IndependentWorkResponse])
async def list_entries(
    employee_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List entries; employees only see their own."""
    if settings.ENFORCE_CAPABILITIES and principal.role == EmployeeRole.EMPLOYEE:
        employee_id = principal.id
    return await work_crud.list_entries(db, employee_id=employee_id)


@router.get("/employee/{employee_id}", response_model=List[IndependentWorkResponse])
async def list_employee_entries(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List entries logged by one employee."""
    if settings.ENFORCE_CAPABILITIES and not can_view_employee(principal.role, employee_id, principal.id):
        raise ForbiddenError("Permission denied")
    return await work_crud.list_entries(db, employee_id=employee_id)


@router.post("", response_model=IndependentWorkResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: IndependentWorkCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Log independent work, for the principal unless another employee is named."""
    data = payload.model_dump()
    employee_id = payload.employee_id or principal.id
    if settings.ENFORCE_CAPABILITIES and not can_view_employee(principal.role, employee_id, principal.id):
        raise ForbiddenError("Employees may only log their own work")
    data["employee_id"] = employee_id
    if not payload.employee_name:
        data["employee_name"] = principal.name if is_self(employee_id, principal.id) else ""
    return await work_crud.create(db, obj_in=data)


@router.get("/{entry_id}", response_model=IndependentWorkResponse)
async def get_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Fetch entry by id."""
    return await _get_entry(db, entry_id, principal)


@router.patch("/{entry_id}", response_model=IndependentWorkResponse)
async def update_entry(
    entry_id: UUID,
    payload: IndependentWorkUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update entry."""
    entry = await _get_entry(db, entry_id, principal)
    return await work_crud.update(db, db_obj=entry, obj_in=payload)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete entry."""
    entry = await _get_entry(db, entry_id, principal)
    await work_crud.remove(db, id=entry.id)


@router.post("/{entry_id}/comments", response_model=IndependentWorkResponse, status_code=status.HTTP_201_CREATED)
async def add_entry_comment(
    entry_id: UUID,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Append a comment to the entry thread."""
    await _get_entry(db, entry_id, principal)
    entry = await work_crud.append_comment(
        db,
        parent_id=entry_id,
        values={
            "user_id": principal.id,
            "user_name": payload.author_name or principal.name or principal.id,
            "content": payload.content,
        },
    )
    if entry is None:
        raise NotFoundError("Independent work entry not found")
    return entry
