"""Meta endpoints describing workflow enumerations."""
from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends

from worktrack.core.security import Principal
from worktrack.dependencies import get_current_principal
from worktrack.models.employee import EmployeeRole, EmployeeStatus
from worktrack.models.independent_work import WorkCategory
from worktrack.models.project import ProjectStatus
from worktrack.models.task import (
    CompletionRequestStatus,
    ExtensionRequestStatus,
    TaskPriority,
    TaskStatus,
)
from worktrack.services.visibility_service import FLAGGED_PRIORITY, CreationSource
from worktrack.utils.permissions import get_role_capabilities

router = APIRouter()

ENUMS = {
    "task_status": TaskStatus,
    "task_priority": TaskPriority,
    "completion_request_status": CompletionRequestStatus,
    "extension_request_status": ExtensionRequestStatus,
    "project_status": ProjectStatus,
    "employee_role": EmployeeRole,
    "employee_status": EmployeeStatus,
    "work_category": WorkCategory,
    "creation_source": CreationSource,
}


@router.get("/enums", response_model=Dict[str, List[str]])
async def enums(
    principal: Principal = Depends(get_current_principal),
):
    """Return the values accepted for every workflow enumeration."""
    values = {name: [member.value for member in enum] for name, enum in ENUMS.items()}
    values["task_filter_priority"] = values["task_priority"] + [FLAGGED_PRIORITY]
    return values


@router.get("/capabilities", response_model=List[str])
async def capabilities(
    principal: Principal = Depends(get_current_principal),
):
    """Capabilities granted to the principal's role."""
    return get_role_capabilities(principal.role)
