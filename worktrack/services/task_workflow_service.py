"""Task lifecycle and approval workflow.

Every mutation is a single guarded ``UPDATE ... RETURNING`` issued through
the task record store: preconditions live in the WHERE clause, so a request
and a concurrent response on the same task can never interleave into a lost
update. When the guarded statement matches nothing, the task is re-read only
to explain the miss (not found, wrong state, wrong principal).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.config import settings
from worktrack.core.results import WorkflowResult
from worktrack.core.security import Principal
from worktrack.crud.project import project as project_crud
from worktrack.crud.task import task as task_crud
from worktrack.middleware.metrics import record_workflow_outcome
from worktrack.models.employee import EmployeeRole
from worktrack.models.task import (
    CompletionRequestStatus,
    ExtensionRequestStatus,
    Task,
    TaskStatus,
)
from worktrack.schemas.task import TaskCreate
from worktrack.utils.identifiers import ids_match
from worktrack.utils.permissions import (
    can_approve,
    can_create_task,
    can_edit_locked,
    can_respond_to_extension,
)
from worktrack.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# Primary status moves allowed through the direct status path. Completion by
# approval bypasses this table and is reachable from any non-completed state.
ALLOWED_TRANSITIONS = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED},
    TaskStatus.COMPLETED: set(),
}

UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "project_id",
        "project_name",
        "assigned_to_id",
        "assigned_to_name",
        "priority",
        "estimated_hours",
        "actual_hours",
        "start_date",
        "due_date",
        "reminder_date",
        "is_locked",
        "director_input_required",
        "work_done",
        "rating",
        "rating_comment",
    }
)

EMPLOYEE_UPDATABLE_FIELDS = frozenset({"actual_hours", "work_done"})

Check = Tuple[Callable[[Task], bool], WorkflowResult]


def _enforcing() -> bool:
    return settings.ENFORCE_CAPABILITIES


def _restricted_to_assignee(principal: Principal) -> bool:
    return _enforcing() and principal.role == EmployeeRole.EMPLOYEE


def _assignee_conditions(principal: Principal) -> List[Any]:
    if _restricted_to_assignee(principal):
        return [Task.assigned_to_id == principal.id]
    return []


def _assignee_check(principal: Principal) -> List[Check]:
    if not _restricted_to_assignee(principal):
        return []
    return [
        (
            lambda task: not ids_match(task.assigned_to_id, principal.id),
            WorkflowResult.unauthorized("not_task_assignee"),
        )
    ]


def _lock_conditions(principal: Principal) -> List[Any]:
    if _enforcing() and not can_edit_locked(principal.role):
        return [Task.is_locked.is_(False)]
    return []


def _lock_check(principal: Principal) -> List[Check]:
    if not _lock_conditions(principal):
        return []
    return [(lambda task: task.is_locked, WorkflowResult.unauthorized("task_locked"))]


def _finish(operation: str, task_id: Any, result: WorkflowResult) -> WorkflowResult:
    if result.ok:
        record_workflow_outcome(operation, "ok")
    else:
        record_workflow_outcome(operation, result.error.value)
        logger.info(
            "Task workflow %s refused for %s: %s (%s)",
            operation,
            task_id,
            result.error.value,
            result.reason,
        )
    return result


async def _explain_miss(db: AsyncSession, task_id: Any, checks: Sequence[Check]) -> WorkflowResult:
    """Work out why a guarded update matched no row."""
    task = await task_crud.get(db, id=task_id)
    if task is None:
        return WorkflowResult.not_found()
    for failed, outcome in checks:
        if failed(task):
            return outcome
    # The guard matched nothing but every precondition now holds: a
    # concurrent writer changed the row between the two statements.
    return WorkflowResult.invalid_transition("illegal_status_transition")


class TaskWorkflowService:
    """State machine for the primary status and both request sub-workflows."""

    @staticmethod
    async def create_task(
        db: AsyncSession,
        *,
        principal: Principal,
        data: TaskCreate,
    ) -> WorkflowResult[Task]:
        """Create a task assigned by the acting principal.

        Employees may only create self-service tasks, which are always
        assigned to themselves.
        """
        payload = data.model_dump()
        if principal.role == EmployeeRole.EMPLOYEE and _enforcing():
            if not data.is_employee_created:
                return _finish("create_task", None, WorkflowResult.unauthorized("self_service_only"))
            payload["assigned_to_id"] = principal.id
            payload["assigned_to_name"] = data.assigned_to_name or principal.name
        elif _enforcing() and not can_create_task(principal.role):
            return _finish("create_task", None, WorkflowResult.unauthorized())

        if data.status == TaskStatus.COMPLETED and _enforcing() and not can_approve(principal.role):
            # Only an approver may record work as already finished.
            return _finish("create_task", None, WorkflowResult.unauthorized())

        if data.project_id is not None:
            project = await project_crud.get(db, id=data.project_id)
            if project is None:
                return _finish("create_task", None, WorkflowResult.not_found("project_not_found"))
            payload["project_name"] = data.project_name or project.name

        payload["assigned_by_id"] = principal.id
        payload["assigned_by_name"] = data.assigned_by_name or principal.name or None
        if data.status == TaskStatus.COMPLETED:
            payload["completed_date"] = utcnow()

        task = await task_crud.create(db, obj_in=payload)
        logger.info("Task %s created by %s (%s)", task.id, principal.id, principal.role.value)
        return _finish("create_task", task.id, WorkflowResult.success(task))

    @staticmethod
    async def request_completion(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
    ) -> WorkflowResult[Task]:
        """Raise (or re-stamp) a completion request on a non-completed task."""
        now = utcnow()
        task = await task_crud.apply_update(
            db,
            id=task_id,
            values={
                "completion_request_status": CompletionRequestStatus.PENDING,
                "completion_requested_by": principal.id,
                "completion_request_date": now,
            },
            conditions=[Task.status != TaskStatus.COMPLETED, *_assignee_conditions(principal)],
        )
        if task is None:
            result = await _explain_miss(
                db,
                task_id,
                [
                    *_assignee_check(principal),
                    (
                        lambda t: t.status == TaskStatus.COMPLETED,
                        WorkflowResult.invalid_transition("task_already_completed"),
                    ),
                ],
            )
            return _finish("request_completion", task_id, result)

        logger.info("Completion requested for task %s by %s", task.id, principal.id)
        return _finish("request_completion", task_id, WorkflowResult.success(task))

    @staticmethod
    async def respond_to_completion(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        action: str,
        comment: Optional[str] = None,
        work_done: Optional[int] = None,
    ) -> WorkflowResult[Task]:
        """Approve or reject a completion request.

        Approval completes the task. A task that is already completed keeps
        its original completion date, so repeating an approval is harmless.
        """
        if _enforcing() and not can_approve(principal.role):
            return _finish("respond_to_completion", task_id, WorkflowResult.unauthorized())
        if action not in ("approve", "reject"):
            return _finish(
                "respond_to_completion",
                task_id,
                WorkflowResult.invalid_transition("illegal_status_transition"),
            )

        approve = action == "approve"
        now = utcnow()
        response: Dict[str, Any] = {
            "completion_request_status": (
                CompletionRequestStatus.APPROVED if approve else CompletionRequestStatus.REJECTED
            ),
            "completion_response_by": principal.id,
            "completion_response_date": now,
            "completion_response_comment": comment,
        }
        if work_done is not None:
            response["work_done"] = work_done

        guards: List[Any] = []
        checks: List[Check] = []
        if settings.STRICT_REQUEST_RESPONSES:
            guards.append(Task.completion_request_status == CompletionRequestStatus.PENDING)
            checks.append(
                (
                    lambda t: t.completion_request_status != CompletionRequestStatus.PENDING,
                    WorkflowResult.invalid_transition("no_pending_request"),
                )
            )

        if approve:
            task = await task_crud.apply_update(
                db,
                id=task_id,
                values={**response, "status": TaskStatus.COMPLETED, "completed_date": now},
                conditions=[*guards, Task.status != TaskStatus.COMPLETED],
            )
            if task is None:
                task = await task_crud.apply_update(
                    db,
                    id=task_id,
                    values=response,
                    conditions=[*guards, Task.status == TaskStatus.COMPLETED],
                )
        else:
            task = await task_crud.apply_update(db, id=task_id, values=response, conditions=guards)

        if task is None:
            return _finish("respond_to_completion", task_id, await _explain_miss(db, task_id, checks))

        logger.info("Completion %s for task %s by %s", action, task.id, principal.id)
        return _finish("respond_to_completion", task_id, WorkflowResult.success(task))

    @staticmethod
    async def request_extension(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        new_deadline: datetime,
        reason: str,
    ) -> WorkflowResult[Task]:
        """Propose a new deadline. The due date is left alone."""
        task = await task_crud.apply_update(
            db,
            id=task_id,
            values={
                "extension_request_status": ExtensionRequestStatus.PENDING,
                "new_deadline_proposal": new_deadline,
                "reason_for_extension": reason,
                "extension_requested_by": principal.id,
                "extension_request_date": utcnow(),
            },
            conditions=_assignee_conditions(principal),
        )
        if task is None:
            result = await _explain_miss(db, task_id, _assignee_check(principal))
            return _finish("request_extension", task_id, result)

        logger.info("Extension requested for task %s by %s", task.id, principal.id)
        return _finish("request_extension", task_id, WorkflowResult.success(task))

    @staticmethod
    async def respond_to_extension(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        status: ExtensionRequestStatus,
        comment: Optional[str] = None,
    ) -> WorkflowResult[Task]:
        """Record an extension decision without touching status or due date."""
        if _enforcing() and not can_respond_to_extension(principal.role):
            return _finish("respond_to_extension", task_id, WorkflowResult.unauthorized())
        if status not in (ExtensionRequestStatus.APPROVED, ExtensionRequestStatus.REJECTED):
            return _finish(
                "respond_to_extension",
                task_id,
                WorkflowResult.invalid_transition("invalid_extension_decision"),
            )

        guards: List[Any] = []
        checks: List[Check] = []
        if settings.STRICT_REQUEST_RESPONSES:
            guards.append(Task.extension_request_status == ExtensionRequestStatus.PENDING)
            checks.append(
                (
                    lambda t: t.extension_request_status != ExtensionRequestStatus.PENDING,
                    WorkflowResult.invalid_transition("no_pending_request"),
                )
            )

        task = await task_crud.apply_update(
            db,
            id=task_id,
            values={
                "extension_request_status": status,
                "extension_response_by": principal.id,
                "extension_response_date": utcnow(),
                "extension_response_comment": comment,
            },
            conditions=guards,
        )
        if task is None:
            return _finish("respond_to_extension", task_id, await _explain_miss(db, task_id, checks))

        logger.info("Extension %s for task %s by %s", status.value, task.id, principal.id)
        return _finish("respond_to_extension", task_id, WorkflowResult.success(task))

    @staticmethod
    async def apply_extension_deadline(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
    ) -> WorkflowResult[Task]:
        """Move the due date to an approved deadline proposal."""
        if _enforcing() and not can_respond_to_extension(principal.role):
            return _finish("apply_extension_deadline", task_id, WorkflowResult.unauthorized())

        current = await task_crud.get(db, id=task_id)
        if current is None:
            return _finish("apply_extension_deadline", task_id, WorkflowResult.not_found())
        if current.new_deadline_proposal is None:
            return _finish(
                "apply_extension_deadline",
                task_id,
                WorkflowResult.invalid_transition("no_deadline_proposal"),
            )

        # Guarded on the proposal read above, so a concurrent re-request with a
        # different date is not applied under an approval it never received.
        proposal = current.new_deadline_proposal
        task = await task_crud.apply_update(
            db,
            id=task_id,
            values={"due_date": proposal},
            conditions=[
                Task.extension_request_status == ExtensionRequestStatus.APPROVED,
                Task.new_deadline_proposal == proposal,
            ],
        )
        if task is None:
            result = await _explain_miss(
                db,
                task_id,
                [
                    (
                        lambda t: t.extension_request_status != ExtensionRequestStatus.APPROVED,
                        WorkflowResult.invalid_transition("extension_not_approved"),
                    ),
                ],
            )
            return _finish("apply_extension_deadline", task_id, result)

        logger.info("Extended deadline applied to task %s by %s", task.id, principal.id)
        return _finish("apply_extension_deadline", task_id, WorkflowResult.success(task))

    @staticmethod
    async def set_primary_status(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        status: TaskStatus,
    ) -> WorkflowResult[Task]:
        """Move the primary status along the direct path."""
        result = await TaskWorkflowService._apply_changes(
            db,
            task_id=task_id,
            principal=principal,
            status=status,
            changes={},
            guards=_assignee_conditions(principal),
            checks=_assignee_check(principal),
        )
        return _finish("set_primary_status", task_id, result)

    @staticmethod
    async def update_fields(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        changes: Dict[str, Any],
    ) -> WorkflowResult[Task]:
        """Update fields outside both request sub-workflows.

        A ``status`` key follows the direct status path rules and is applied
        in the same statement as the other fields.
        """
        changes = dict(changes)
        status = changes.pop("status", None)

        if set(changes) - UPDATABLE_FIELDS:
            return _finish("update_fields", task_id, WorkflowResult.invalid_transition("protected_field"))
        if _restricted_to_assignee(principal) and set(changes) - EMPLOYEE_UPDATABLE_FIELDS:
            return _finish("update_fields", task_id, WorkflowResult.unauthorized("field_not_editable"))
        if "is_locked" in changes and _enforcing() and not can_edit_locked(principal.role):
            return _finish("update_fields", task_id, WorkflowResult.unauthorized("field_not_editable"))
        if changes.get("project_id") is not None and "project_name" not in changes:
            project = await project_crud.get(db, id=changes["project_id"])
            if project is None:
                return _finish("update_fields", task_id, WorkflowResult.not_found("project_not_found"))
            changes["project_name"] = project.name

        # Locked tasks are frozen for everyone below director.
        guards = [*_assignee_conditions(principal), *_lock_conditions(principal)]
        checks = [*_assignee_check(principal), *_lock_check(principal)]
        if status is None:
            task = await task_crud.apply_update(db, id=task_id, values=changes, conditions=guards)
            if task is None:
                result = await _explain_miss(db, task_id, checks)
            else:
                result = WorkflowResult.success(task)
        else:
            result = await TaskWorkflowService._apply_changes(
                db,
                task_id=task_id,
                principal=principal,
                status=TaskStatus(status),
                changes=changes,
                guards=guards,
                checks=checks,
            )

        if result.ok:
            logger.info("Task %s updated by %s: %s", task_id, principal.id, sorted(changes))
        return _finish("update_fields", task_id, result)

    @staticmethod
    async def _apply_changes(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        status: TaskStatus,
        changes: Dict[str, Any],
        guards: Sequence[Any],
        checks: Sequence[Check],
    ) -> WorkflowResult[Task]:
        if status == TaskStatus.COMPLETED and _enforcing() and not can_approve(principal.role):
            return WorkflowResult.unauthorized()

        sources = [source for source, targets in ALLOWED_TRANSITIONS.items() if status in targets]
        values = {**changes, "status": status}
        if status == TaskStatus.COMPLETED:
            values["completed_date"] = utcnow()

        task = None
        if sources:
            task = await task_crud.apply_update(
                db, id=task_id, values=values, conditions=[Task.status.in_(sources), *guards]
            )
        if task is None:
            # Same-state requests are no-ops for the status and still apply
            # the other fields.
            task = await task_crud.apply_update(
                db, id=task_id, values=changes, conditions=[Task.status == status, *guards]
            )
        if task is not None:
            return WorkflowResult.success(task)

        return await _explain_miss(
            db,
            task_id,
            [
                *checks,
                (
                    lambda t: t.status == TaskStatus.COMPLETED,
                    WorkflowResult.invalid_transition("task_already_completed"),
                ),
                (
                    lambda t: t.status not in sources,
                    WorkflowResult.invalid_transition("illegal_status_transition"),
                ),
            ],
        )

    @staticmethod
    async def add_comment(
        db: AsyncSession,
        *,
        task_id: Any,
        principal: Principal,
        content: str,
        author_name: Optional[str] = None,
        is_visible_to_employee: bool = True,
    ) -> WorkflowResult[Task]:
        """Append one comment; existing comments are never rewritten."""
        if _restricted_to_assignee(principal):
            current = await task_crud.get(db, id=task_id)
            if current is None:
                return _finish("add_comment", task_id, WorkflowResult.not_found())
            if not ids_match(current.assigned_to_id, principal.id):
                return _finish("add_comment", task_id, WorkflowResult.unauthorized("not_task_assignee"))
            # Employees cannot hide their own comments from themselves.
            is_visible_to_employee = True

        task = await task_crud.append_comment(
            db,
            parent_id=task_id,
            values={
                "user_id": principal.id,
                "user_name": author_name or principal.name or principal.id,
                "content": content,
                "is_visible_to_employee": is_visible_to_employee,
            },
        )
        if task is None:
            return _finish("add_comment", task_id, WorkflowResult.not_found())

        logger.info("Comment added to task %s by %s", task.id, principal.id)
        return _finish("add_comment", task_id, WorkflowResult.success(task))


task_workflow_service = TaskWorkflowService()
