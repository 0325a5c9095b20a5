"""Schema modules."""
from worktrack.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeResponse
from worktrack.schemas.task import (
    CommentCreate,
    CompletionResponsePayload,
    ExtensionRequestPayload,
    ExtensionResponsePayload,
    TaskCommentResponse,
    TaskCreate,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from worktrack.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse, ProjectDeleteResponse
from worktrack.schemas.independent_work import (
    IndependentWorkCreate,
    IndependentWorkUpdate,
    IndependentWorkResponse,
)
from worktrack.schemas.dashboard import DashboardSummaryResponse
