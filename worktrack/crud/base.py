"""Base CRUD operations shared by all record stores."""
from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.database import Base
from worktrack.utils.identifiers import as_uuid
from worktrack.utils.timeutils import utcnow

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def _as_dict(obj_in: Union[BaseModel, Dict[str, Any]], *, exclude_unset: bool = False) -> Dict[str, Any]:
    if isinstance(obj_in, dict):
        return dict(obj_in)
    return obj_in.model_dump(exclude_unset=exclude_unset, mode="python")


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Generic async CRUD helpers over one mapped model.

    ``collections`` names relationships that are refreshed after writes so
    responses can serialize them without lazy loading.
    """

    def __init__(self, model: Type[ModelType], *, collections: Sequence[str] = ()):
        self.model = model
        self.collections = tuple(collections)

    async def _load_collections(self, db: AsyncSession, db_obj: ModelType) -> None:
        if self.collections:
            await db.refresh(db_obj, attribute_names=list(self.collections))

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Get a record by id; malformed ids resolve to nothing."""
        record_id = as_uuid(id)
        if record_id is None:
            return None
        result = await db.execute(
            select(self.model)
            .where(self.model.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Sequence[Any] = (),
    ) -> List[ModelType]:
        """List records with simple equality filters."""
        query = select(self.model)
        for field, value in (filters or {}).items():
            query = query.where(getattr(self.model, field) == value)
        if order_by:
            query = query.order_by(*order_by)
        elif hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**_as_dict(obj_in))
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        await self._load_collections(db, db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        """Update an already loaded record."""
        update_data = _as_dict(obj_in, exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        await self._load_collections(db, db_obj)
        return db_obj

    async def apply_update(
        self,
        db: AsyncSession,
        *,
        id: Any,
        values: Dict[str, Any],
        conditions: Sequence[Any] = (),
    ) -> Optional[ModelType]:
        """Atomically update one record and return its post-update state.

        The statement is a single ``UPDATE ... WHERE id = :id AND <conditions>
        RETURNING *``; None means no row matched (missing record or a failed
        guard condition).
        """
        record_id = as_uuid(id)
        if record_id is None:
            return None

        values = dict(values)
        if hasattr(self.model, "updated_at"):
            values.setdefault("updated_at", utcnow())

        stmt = (
            update(self.model)
            .where(self.model.id == record_id, *conditions)
            .values(**values)
            .returning(self.model)
            .execution_options(synchronize_session="fetch")
        )
        result = await db.execute(stmt)
        db_obj = result.scalar_one_or_none()
        # An unmatched guard writes nothing; the transaction is closed either way.
        await db.commit()
        if db_obj is None:
            return None

        await self._load_collections(db, db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """Delete a record by id."""
        db_obj = await self.get(db, id=id)
        if db_obj is None:
            return None
        await db.delete(db_obj)
        await db.commit()
        return db_obj


class CommentThreadMixin:
    """Append-only comment threads stored as child rows.

    Appending inserts exactly one row in the same transaction that touches
    the parent, so concurrent appends from different sessions never
    overwrite each other.
    """

    comment_model: Type[Base]
    comment_fk: str

    async def append_comment(
        self,
        db: AsyncSession,
        *,
        parent_id: Any,
        values: Dict[str, Any],
    ):
        """Append a comment and return the parent with its refreshed thread."""
        record_id = as_uuid(parent_id)
        if record_id is None:
            return None

        stmt = (
            update(self.model)
            .where(self.model.id == record_id)
            .values(updated_at=utcnow())
            .returning(self.model)
            .execution_options(synchronize_session="fetch")
        )
        result = await db.execute(stmt)
        parent = result.scalar_one_or_none()
        if parent is None:
            await db.commit()
            return None

        comment_values = {"timestamp": utcnow(), **values, self.comment_fk: record_id}
        db.add(self.comment_model(**comment_values))
        await db.commit()
        await db.refresh(parent, attribute_names=["comments"])
        return parent
