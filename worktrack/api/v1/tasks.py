"""Task endpoints: CRUD, comments and the approval workflow."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.config import settings
from worktrack.core.exceptions import ForbiddenError, NotFoundError, raise_for_result
from worktrack.core.security import Capability, Principal
from worktrack.crud.task import task as task_crud
from worktrack.database import get_db
from worktrack.dependencies import get_current_principal, require_capability
from worktrack.models.task import CompletionRequestStatus, Task
from worktrack.schemas.task import (
    CommentCreate,
    CompletionResponsePayload,
    ExtensionRequestPayload,
    ExtensionResponsePayload,
    TaskCreate,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from worktrack.services.task_workflow_service import task_workflow_service
from worktrack.services.visibility_service import (
    can_view_task,
    filter_tasks_for_viewer,
    visible_comments,
)
from worktrack.utils.permissions import can_view_employee

router = APIRouter()


def to_task_response(task: Task, principal: Principal) -> TaskResponse:
    """Serialize a task, hiding comments the viewer may not see."""
    response = TaskResponse.model_validate(task)
    response.comments = visible_comments(response.comments, principal)
    return response


async def _get_visible_task(db: AsyncSession, task_id: UUID, principal: Principal) -> Task:
    task_obj = await task_crud.get(db, id=task_id)
    if not task_obj:
        raise NotFoundError("Task not found")
    if not can_view_task(task_obj, principal):
        raise ForbiddenError("Task is not assigned to you")
    return task_obj


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List tasks visible to the principal, newest first."""
    tasks = filter_tasks_for_viewer(await task_crud.list_all(db), principal)
    return [to_task_response(item, principal) for item in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Create a task assigned by the principal."""
    result = await task_workflow_service.create_task(db, principal=principal, data=payload)
    return to_task_response(raise_for_result(result), principal)


@router.get("/completion-requests", response_model=List[TaskResponse])
async def list_completion_requests(
    request_status: Optional[CompletionRequestStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.TASK_VIEW_ALL)),
):
    """Tasks carrying a completion request, newest first."""
    items = await task_crud.list_completion_requests(db, status=request_status)
    return [to_task_response(item, principal) for item in items]


@router.get("/extension-requests", response_model=List[TaskResponse])
async def list_extension_requests(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.TASK_VIEW_ALL)),
):
    """Tasks with a pending deadline extension, newest first."""
    items = await task_crud.list_pending_extensions(db)
    return [to_task_response(item, principal) for item in items]


@router.get("/user/{employee_id}", response_model=List[TaskResponse])
async def list_employee_tasks(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Tasks assigned to one employee."""
    if settings.ENFORCE_CAPABILITIES and not can_view_employee(principal.role, employee_id, principal.id):
        raise ForbiddenError("Permission denied")
    items = await task_crud.list_for_assignee(db, assignee_id=employee_id)
    return [to_task_response(item, principal) for item in items]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Fetch task by id."""
    return to_task_response(await _get_visible_task(db, task_id, principal), principal)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update task fields outside the approval workflow."""
    result = await task_workflow_service.update_fields(
        db,
        task_id=task_id,
        principal=principal,
        changes=payload.model_dump(exclude_unset=True),
    )
    return to_task_response(raise_for_result(result), principal)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.TASK_CREATE)),
):
    """Delete task and its comments."""
    removed = await task_crud.remove(db, id=task_id)
    if not removed:
        raise NotFoundError("Task not found")


@router.put("/{task_id}/status", response_model=TaskResponse)
async def set_task_status(
    task_id: UUID,
    payload: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Move the primary status along the direct path."""
    result = await task_workflow_service.set_primary_status(
        db, task_id=task_id, principal=principal, status=payload.status
    )
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/comments", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def add_task_comment(
    task_id: UUID,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Append a comment to the task thread."""
    result = await task_workflow_service.add_comment(
        db,
        task_id=task_id,
        principal=principal,
        content=payload.content,
        author_name=payload.author_name,
        is_visible_to_employee=payload.is_visible_to_employee,
    )
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/completion-request", response_model=TaskResponse)
async def request_completion(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Ask for the task to be signed off as completed."""
    result = await task_workflow_service.request_completion(db, task_id=task_id, principal=principal)
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/completion-response", response_model=TaskResponse)
async def respond_to_completion(
    task_id: UUID,
    payload: CompletionResponsePayload,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Approve or reject a completion request."""
    result = await task_workflow_service.respond_to_completion(
        db,
        task_id=task_id,
        principal=principal,
        action=payload.action,
        comment=payload.comment,
        work_done=payload.work_done,
    )
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/extension-request", response_model=TaskResponse)
async def request_extension(
    task_id: UUID,
    payload: ExtensionRequestPayload,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Propose a new deadline."""
    result = await task_workflow_service.request_extension(
        db,
        task_id=task_id,
        principal=principal,
        new_deadline=payload.new_deadline,
        reason=payload.reason,
    )
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/extension-response", response_model=TaskResponse)
async def respond_to_extension(
    task_id: UUID,
    payload: ExtensionResponsePayload,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Approve or reject a deadline extension; the due date is not changed."""
    result = await task_workflow_service.respond_to_extension(
        db,
        task_id=task_id,
        principal=principal,
        status=payload.status,
        comment=payload.comment,
    )
    return to_task_response(raise_for_result(result), principal)


@router.post("/{task_id}/extension-apply", response_model=TaskResponse)
async def apply_extension_deadline(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Move the due date to the approved proposal."""
    result = await task_workflow_service.apply_extension_deadline(db, task_id=task_id, principal=principal)
    return to_task_response(raise_for_result(result), principal)
