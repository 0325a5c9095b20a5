"""Model modules."""
from worktrack.models.employee import Employee, EmployeeRole, EmployeeStatus
from worktrack.models.project import Project, ProjectComment, ProjectStatus
from worktrack.models.task import (
    CompletionRequestStatus,
    ExtensionRequestStatus,
    Task,
    TaskComment,
    TaskPriority,
    TaskStatus,
)
from worktrack.models.independent_work import (
    IndependentWork,
    IndependentWorkComment,
    WorkCategory,
)

__all__ = [
    "Employee",
    "EmployeeRole",
    "EmployeeStatus",
    "Project",
    "ProjectComment",
    "ProjectStatus",
    "Task",
    "TaskComment",
    "TaskPriority",
    "TaskStatus",
    "CompletionRequestStatus",
    "ExtensionRequestStatus",
    "IndependentWork",
    "IndependentWorkComment",
    "WorkCategory",
]
