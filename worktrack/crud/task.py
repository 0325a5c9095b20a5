"""Task CRUD operations."""
from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.crud.base import CRUDBase, CommentThreadMixin
from worktrack.models.task import (
    CompletionRequestStatus,
    ExtensionRequestStatus,
    Task,
    TaskComment,
)
from worktrack.schemas.task import TaskCreate, TaskUpdate
from worktrack.utils.identifiers import as_uuid


class CRUDTask(CommentThreadMixin, CRUDBase[Task, TaskCreate, TaskUpdate]):
    """CRUD operations for Task."""

    comment_model = TaskComment
    comment_fk = "task_id"

    async def list_all(self, db: AsyncSession) -> List[Task]:
        return await self.get_multi(db, limit=None)

    async def list_for_assignee(self, db: AsyncSession, *, assignee_id: str) -> List[Task]:
        return await self.get_multi(db, limit=None, filters={"assigned_to_id": assignee_id})

    async def list_completion_requests(
        self,
        db: AsyncSession,
        *,
        status: Optional[CompletionRequestStatus] = None,
    ) -> List[Task]:
        """Tasks with a completion request, newest request first."""
        query = select(Task).where(Task.completion_request_status.is_not(None))
        if status is not None:
            query = query.where(Task.completion_request_status == status)
        result = await db.execute(query.order_by(Task.completion_request_date.desc()))
        return list(result.scalars().all())

    async def list_pending_extensions(self, db: AsyncSession) -> List[Task]:
        """Tasks awaiting an extension decision, newest request first."""
        result = await db.execute(
            select(Task)
            .where(Task.extension_request_status == ExtensionRequestStatus.PENDING)
            .order_by(Task.extension_request_date.desc())
        )
        return list(result.scalars().all())

    async def remove_by_project(self, db: AsyncSession, *, project_id: Any) -> int:
        """Delete every task of a project together with its comments.

        Does not commit; callers delete the project in the same transaction.
        """
        record_id = as_uuid(project_id)
        if record_id is None:
            return 0
        task_ids = select(Task.id).where(Task.project_id == record_id)
        await db.execute(
            delete(TaskComment)
            .where(TaskComment.task_id.in_(task_ids))
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(
            delete(Task)
            .where(Task.project_id == record_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0


task = CRUDTask(Task, collections=("comments",))
