"""
Duet Backend — User Service
=============================

What:  Registration, profile updates and the two deletion modes.
How:   A soft delete sets `deleted = True` and keeps every row that refers
       to the user; a hard delete removes the user and cascades. Lookups
       made on behalf of other services (`get_active`) treat soft-deleted
       users as missing.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.base import CRUDService, translate_db_errors

logger = logging.getLogger(__name__)


class UserService(CRUDService[User]):
    model = User
    resource = "user"

    async def get_active(self, db: AsyncSession, user_id: int) -> User:
        user = await self.get(db, user_id)
        if user.deleted:
            raise NotFoundError(resource=self.resource, resource_id=user_id)
        return user

    async def register(self, db: AsyncSession, payload: UserCreate) -> User:
        """
        Create a user, refusing duplicates of `social_id` or `uuid`.

        Raises:
            ConflictError: Another user already has the social id or uuid;
                           the existing id is returned in the error details.
        """
        identity = [User.uuid == payload.uuid]
        if payload.social_id:
            identity.append(User.social_id == payload.social_id)

        with translate_db_errors("check user identity"):
            result = await db.execute(select(User).where(or_(*identity)).limit(1))
            existing = result.scalar_one_or_none()
        if existing is not None:
            field = "uuid" if existing.uuid == payload.uuid else "socialId"
            raise ConflictError(
                message=f"A user with this {field} already exists",
                context={"field": field, "existing_user_id": existing.id},
            )

        values: Dict[str, Any] = payload.model_dump(exclude_none=True)
        return await self.create(db, values)

    async def soft_delete(self, db: AsyncSession, user_id: int) -> User:
        user = await self.get(db, user_id)
        user.deleted = True
        user.is_active = False
        with translate_db_errors("soft delete user", id=user_id):
            await db.flush()
            await db.refresh(user)
        logger.info("Soft-deleted user %s", user_id)
        return user

    async def restore(self, db: AsyncSession, user_id: int) -> User:
        user = await self.get(db, user_id)
        if not user.deleted:
            return user
        user.deleted = False
        user.is_active = True
        with translate_db_errors("restore user", id=user_id):
            await db.flush()
            await db.refresh(user)
        logger.info("Restored user %s", user_id)
        return user

    async def list_deleted(self, db: AsyncSession) -> List[User]:
        return await self.list(db, User.deleted.is_(True), order_by=[User.updated_at.desc()])


user_service = UserService()
