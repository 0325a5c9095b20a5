"""Independent work CRUD operations."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.crud.base import CRUDBase, CommentThreadMixin
from worktrack.models.independent_work import IndependentWork, IndependentWorkComment
from worktrack.schemas.independent_work import IndependentWorkCreate, IndependentWorkUpdate


class CRUDIndependentWork(
    CommentThreadMixin,
    CRUDBase[IndependentWork, IndependentWorkCreate, IndependentWorkUpdate],
):
    """CRUD operations for IndependentWork."""

    comment_model = IndependentWorkComment
    comment_fk = "entry_id"

    async def list_entries(self, db: AsyncSession, *, employee_id: Optional[str] = None) -> List[IndependentWork]:
        """Entries newest date first, optionally for one employee."""
        return await self.get_multi(
            db,
            limit=None,
            filters={"employee_id": employee_id} if employee_id is not None else None,
            order_by=(IndependentWork.date.desc(), IndependentWork.created_at.desc()),
        )


independent_work = CRUDIndependentWork(IndependentWork, collections=("comments",))
