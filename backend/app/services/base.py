"""
Duet Backend — CRUD Service Base
==================================

What:  Generic get/list/create/update/delete over one ORM model, plus the
       translation of SQLAlchemy failures into application exceptions.
How:   Writes are flushed (not committed); `get_db_session` commits once the
       route returns. Rows are refreshed after each write so server-side
       values are loaded before the session is used outside the greenlet.

Error translation:
    IntegrityError   → ConflictError (409): duplicate key or broken FK
    SQLAlchemyError  → DatabaseError (500): details logged, not returned
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import ConflictError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@contextmanager
def translate_db_errors(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as DuetError subclasses."""
    try:
        yield
    except IntegrityError as e:
        logger.warning("Integrity error during %s: %s", operation, e.orig)
        raise ConflictError(
            message=f"Could not {operation}: it conflicts with existing data.",
            context={"operation": operation, **context},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, e, exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__, **context},
        ) from e


class CRUDService(Generic[ModelT]):
    """
    Table-level operations shared by the resource services.

    Subclasses set `model` and `resource` (used in 404 messages) and add
    whatever lookups their resource needs on top.
    """

    model: Type[ModelT]
    resource: str = "resource"

    async def get(self, db: AsyncSession, obj_id: int) -> ModelT:
        """Row by primary key. Raises NotFoundError (→ 404)."""
        with translate_db_errors(f"load {self.resource}", id=obj_id):
            result = await db.execute(select(self.model).where(self.model.id == obj_id))
            obj = result.scalar_one_or_none()
        if obj is None:
            raise NotFoundError(resource=self.resource, resource_id=obj_id)
        return obj

    async def list(
        self,
        db: AsyncSession,
        *filters: ColumnElement[bool],
        order_by: Optional[Sequence[Any]] = None,
    ) -> List[ModelT]:
        query = select(self.model).where(*filters)
        query = query.order_by(*(order_by if order_by is not None else (self.model.id,)))
        with translate_db_errors(f"list {self.resource}"):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> ModelT:
        obj = self.model(**values)
        with translate_db_errors(f"create {self.resource}"):
            db.add(obj)
            await db.flush()
            await db.refresh(obj)
        logger.info("Created %s %s", self.resource, obj.id)
        return obj

    async def update(self, db: AsyncSession, obj_id: int, values: Dict[str, Any]) -> ModelT:
        """
        Apply `values` to the row. Keys absent from `values` are left alone;
        callers pass `model_dump(exclude_unset=True)`.
        """
        obj = await self.get(db, obj_id)
        for field, value in values.items():
            setattr(obj, field, value)
        with translate_db_errors(f"update {self.resource}", id=obj_id):
            await db.flush()
            await db.refresh(obj)
        return obj

    async def delete(self, db: AsyncSession, obj_id: int) -> int:
        await self.get(db, obj_id)
        with translate_db_errors(f"delete {self.resource}", id=obj_id):
            await db.execute(delete(self.model).where(self.model.id == obj_id))
            await db.flush()
        logger.info("Deleted %s %s", self.resource, obj_id)
        return obj_id
