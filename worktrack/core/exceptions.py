"""Custom exceptions."""
from typing import Optional
from fastapi import HTTPException, status

from worktrack.core.results import WorkflowErrorKind, WorkflowResult


class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail or "Resource not found")


class UnauthorizedError(HTTPException):
    """Unauthorized exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail or "Not authenticated")


class ForbiddenError(HTTPException):
    """Forbidden exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail or "Permission denied")


class ConflictError(HTTPException):
    """Conflict exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail or "Resource conflict")


REASON_MESSAGES = {
    "task_not_found": "Task not found",
    "task_already_completed": "Task is already completed",
    "no_pending_request": "There is no pending request to respond to",
    "invalid_extension_decision": "Extension responses must be Approved or Rejected",
    "extension_not_approved": "Extension has not been approved",
    "no_deadline_proposal": "Task has no proposed deadline",
    "illegal_status_transition": "Status change is not allowed",
    "missing_capability": "Your role does not allow this action",
    "self_service_only": "Employees may only create self-assigned tasks",
    "not_task_assignee": "Task is not assigned to you",
    "field_not_editable": "Your role may not edit these fields",
    "protected_field": "Field is managed by the approval workflow",
    "project_not_found": "Project not found",
    "task_locked": "Task is locked by the director",
}


def raise_for_result(result: WorkflowResult):
    """Return the value of a successful result or raise the matching HTTP error."""
    if result.ok:
        return result.value

    detail = REASON_MESSAGES.get(result.reason or "", result.reason)
    if result.error == WorkflowErrorKind.NOT_FOUND:
        raise NotFoundError(detail)
    if result.error == WorkflowErrorKind.UNAUTHORIZED:
        raise ForbiddenError(detail)
    raise ConflictError(detail)
