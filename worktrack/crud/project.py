"""Project CRUD operations."""
from __future__ import annotations

from typing import Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.crud.base import CRUDBase, CommentThreadMixin
from worktrack.crud.task import task as task_crud
from worktrack.models.project import Project, ProjectComment
from worktrack.schemas.project import ProjectCreate, ProjectUpdate


class CRUDProject(CommentThreadMixin, CRUDBase[Project, ProjectCreate, ProjectUpdate]):
    """CRUD operations for Project."""

    comment_model = ProjectComment
    comment_fk = "project_id"

    async def list_all(self, db: AsyncSession) -> List[Project]:
        return await self.get_multi(db, limit=None)

    async def remove_with_tasks(self, db: AsyncSession, *, id: Any) -> Optional[Tuple[Project, int]]:
        """Delete a project and every task that references it.

        Returns the deleted project and the number of tasks removed with it.
        """
        project = await self.get(db, id=id)
        if project is None:
            return None
        removed = await task_crud.remove_by_project(db, project_id=project.id)
        await db.delete(project)
        await db.commit()
        return project, removed


project = CRUDProject(Project, collections=("comments",))
