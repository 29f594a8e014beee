"""
Duet Backend — Relationship Service
=====================================

What:  Pairing and unpairing users.
How:   Both members must exist and not be soft-deleted. Joining by invite
       code looks up the code's owner and pairs them with the inviter.
       Disconnecting is an update of `deleted`; delete removes the row.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, ValidationError
from app.models.relationship import Relationship
from app.models.user import User
from app.schemas.relationship import RelationshipCreate, RelationshipInvite, RelationshipUpdate
from app.services.base import CRUDService, translate_db_errors
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


class RelationshipService(CRUDService[Relationship]):
    model = Relationship
    resource = "relationship"

    async def get_connected(self, db: AsyncSession, relationship_id: int) -> Relationship:
        """A relationship that has not been disconnected."""
        relationship = await self.get(db, relationship_id)
        if relationship.deleted:
            raise NotFoundError(resource=self.resource, resource_id=relationship_id)
        return relationship

    async def list_all(
        self, db: AsyncSession, user_id: Optional[int] = None, include_deleted: bool = True
    ) -> List[Relationship]:
        filters = []
        if user_id is not None:
            filters.append(or_(Relationship.user1_id == user_id, Relationship.user2_id == user_id))
        if not include_deleted:
            filters.append(Relationship.deleted.is_(False))
        return await self.list(db, *filters)

    async def find_active_for_user(self, db: AsyncSession, user_id: int) -> Optional[Relationship]:
        """The user's newest connected relationship, if any."""
        query = (
            select(Relationship)
            .where(
                or_(Relationship.user1_id == user_id, Relationship.user2_id == user_id),
                Relationship.deleted.is_(False),
            )
            .order_by(Relationship.created_at.desc(), Relationship.id.desc())
            .limit(1)
        )
        with translate_db_errors("find active relationship", user_id=user_id):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def pair(self, db: AsyncSession, payload: RelationshipCreate) -> Relationship:
        await user_service.get_active(db, payload.user1_id)
        await user_service.get_active(db, payload.user2_id)
        return await self.create(db, payload.model_dump(exclude_none=True))

    async def pair_by_invite_code(self, db: AsyncSession, payload: RelationshipInvite) -> Relationship:
        """
        Pair `user1_id` with the owner of `invite_code`.

        Raises:
            NotFoundError:   No active user owns the code, or user1 is missing.
            ValidationError: The code belongs to user1 themselves.
        """
        await user_service.get_active(db, payload.user1_id)

        with translate_db_errors("look up invite code"):
            result = await db.execute(
                select(User).where(User.invite_code == payload.invite_code, User.deleted.is_(False))
            )
            owner = result.scalar_one_or_none()
        if owner is None:
            raise NotFoundError(
                resource="user",
                message="No user found with this invite code",
                context={"invite_code": payload.invite_code},
            )
        if owner.id == payload.user1_id:
            raise ValidationError("You cannot use your own invite code", field="inviteCode")

        values = {"user1_id": payload.user1_id, "user2_id": owner.id}
        if payload.started_at is not None:
            values["started_at"] = payload.started_at
        relationship = await self.create(db, values)
        logger.info("User %s joined user %s by invite code", owner.id, payload.user1_id)
        return relationship

    async def modify(self, db: AsyncSession, relationship_id: int, payload: RelationshipUpdate) -> Relationship:
        values = payload.model_dump(exclude_unset=True)
        for key in ("user1_id", "user2_id"):
            if values.get(key) is not None:
                await user_service.get_active(db, values[key])
        relationship = await self.update(db, relationship_id, values)
        if values.get("deleted"):
            logger.info("Relationship %s disconnected", relationship_id)
        return relationship


relationship_service = RelationshipService()
