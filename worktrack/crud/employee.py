"""Employee CRUD operations."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.crud.base import CRUDBase
from worktrack.models.employee import Employee
from worktrack.schemas.employee import EmployeeCreate, EmployeeUpdate


class CRUDEmployee(CRUDBase[Employee, EmployeeCreate, EmployeeUpdate]):
    """CRUD operations for Employee."""

    async def find_conflict(
        self,
        db: AsyncSession,
        *,
        email: str,
        username: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Employee]:
        """Another employee already using the email or username."""
        query = select(Employee).where(or_(Employee.email == email, Employee.username == username))
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def list_all(self, db: AsyncSession) -> List[Employee]:
        return await self.get_multi(db, limit=None, order_by=(Employee.last_name, Employee.first_name))


employee = CRUDEmployee(Employee)
