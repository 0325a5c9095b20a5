"""Role capabilities and the acting principal."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from worktrack.models.employee import EmployeeRole
from worktrack.utils.identifiers import normalize_id


class Capability(str, Enum):
    """Capability constants checked by the workflow."""

    TASK_CREATE = "task.create"
    TASK_VIEW_ALL = "task.view_all"
    COMPLETION_APPROVE = "task.completion.approve"
    EXTENSION_RESPOND = "task.extension.respond"
    PROJECT_VIEW_ALL = "project.view_all"
    EMPLOYEE_VIEW_ALL = "employee.view_all"
    PROJECT_MANAGE = "project.manage"
    EMPLOYEE_MANAGE = "employee.manage"
    TASK_LOCK_OVERRIDE = "task.lock.override"


# Role definitions with capabilities
ROLE_CAPABILITIES = {
    EmployeeRole.DIRECTOR: [
        Capability.TASK_CREATE,
        Capability.TASK_VIEW_ALL,
        Capability.COMPLETION_APPROVE,
        Capability.EXTENSION_RESPOND,
        Capability.PROJECT_VIEW_ALL,
        Capability.EMPLOYEE_VIEW_ALL,
        Capability.PROJECT_MANAGE,
        Capability.EMPLOYEE_MANAGE,
        Capability.TASK_LOCK_OVERRIDE,
    ],
    # Project heads create and assign work but do not sign off completions
    # or manage projects and staff. Locked tasks are read-only to them.
    EmployeeRole.PROJECT_HEAD: [
        Capability.TASK_CREATE,
        Capability.TASK_VIEW_ALL,
        Capability.EXTENSION_RESPOND,
        Capability.PROJECT_VIEW_ALL,
        Capability.EMPLOYEE_VIEW_ALL,
    ],
    EmployeeRole.EMPLOYEE: [],
}


@dataclass(frozen=True)
class Principal:
    """Acting identity: a role plus an opaque identifier."""

    role: EmployeeRole
    id: str
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_id(self.id) or "")
