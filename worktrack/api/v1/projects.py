"""Project endpoints."""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.config import settings
from worktrack.core.exceptions import ForbiddenError, NotFoundError
from worktrack.core.security import Capability, Principal
from worktrack.crud.project import project as project_crud
from worktrack.database import get_db
from worktrack.dependencies import get_current_principal
from worktrack.models.employee import EmployeeRole
from worktrack.models.project import Project
from worktrack.schemas.project import (
    ProjectCreate,
    ProjectDeleteResponse,
    ProjectResponse,
    ProjectUpdate,
)
from worktrack.schemas.task import CommentCreate
from worktrack.services.visibility_service import (
    can_view_project,
    filter_projects_for_viewer,
    visible_comments,
)
from worktrack.utils.permissions import has_capability, is_self

logger = logging.getLogger(__name__)

router = APIRouter()


def to_project_response(project: Project, principal: Principal) -> ProjectResponse:
    response = ProjectResponse.model_validate(project)
    response.comments = visible_comments(response.comments, principal)
    return response


def _can_manage(project: Project, principal: Principal) -> bool:
    """Directors manage every project; employees only their self-service ones."""
    if not settings.ENFORCE_CAPABILITIES or has_capability(principal.role, Capability.PROJECT_MANAGE):
        return True
    return (
        principal.role == EmployeeRole.EMPLOYEE
        and project.is_employee_created
        and is_self(project.assigned_employee_id, principal.id)
    )


async def _get_visible_project(db: AsyncSession, project_id: UUID, principal: Principal) -> Project:
    project_obj = await project_crud.get(db, id=project_id)
    if not project_obj:
        raise NotFoundError("Project not found")
    if not can_view_project(project_obj, principal):
        raise ForbiddenError("Project is not assigned to you")
    return project_obj


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List projects visible to the principal."""
    projects = filter_projects_for_viewer(await project_crud.list_all(db), principal)
    return [to_project_response(item, principal) for item in projects]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Create project. Employees may only create self-service projects."""
    data = payload.model_dump()
    if settings.ENFORCE_CAPABILITIES and not has_capability(principal.role, Capability.PROJECT_MANAGE):
        if principal.role != EmployeeRole.EMPLOYEE or not payload.is_employee_created:
            raise ForbiddenError(f"Capability required: {Capability.PROJECT_MANAGE.value}")
        data["assigned_employee_id"] = principal.id
        data["assigned_employee_name"] = payload.assigned_employee_name or principal.name
    data["created_by_id"] = principal.id

    project_obj = await project_crud.create(db, obj_in=data)
    logger.info("Project %s created by %s", project_obj.id, principal.id)
    return to_project_response(project_obj, principal)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Fetch project by id."""
    return to_project_response(await _get_visible_project(db, project_id, principal), principal)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update project data."""
    project_obj = await _get_visible_project(db, project_id, principal)
    if not _can_manage(project_obj, principal):
        raise ForbiddenError("Your role does not allow this action")
    project_obj = await project_crud.update(db, db_obj=project_obj, obj_in=payload)
    return to_project_response(project_obj, principal)


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
async def delete_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete project together with all of its tasks."""
    project_obj = await _get_visible_project(db, project_id, principal)
    if not _can_manage(project_obj, principal):
        raise ForbiddenError("Your role does not allow this action")

    removed = await project_crud.remove_with_tasks(db, id=project_obj.id)
    if removed is None:
        raise NotFoundError("Project not found")
    deleted, task_count = removed
    logger.info("Project %s deleted by %s with %d tasks", deleted.id, principal.id, task_count)
    return ProjectDeleteResponse(id=deleted.id, removed_tasks=task_count)


@router.post("/{project_id}/comments", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def add_project_comment(
    project_id: UUID,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Append a comment to the project thread."""
    await _get_visible_project(db, project_id, principal)
    is_visible = payload.is_visible_to_employee or principal.role == EmployeeRole.EMPLOYEE
    project_obj = await project_crud.append_comment(
        db,
        parent_id=project_id,
        values={
            "user_id": principal.id,
            "user_name": payload.author_name or principal.name or principal.id,
            "user_role": principal.role.value,
            "content": payload.content,
            "is_visible_to_employee": is_visible,
        },
    )
    if project_obj is None:
        raise NotFoundError("Project not found")
    return to_project_response(project_obj, principal)
