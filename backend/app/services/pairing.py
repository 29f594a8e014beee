"""
Duet Backend — Pairing Resolution
===================================

What:  Turns the `relationshipId` / `userId` query pair most derived views
       accept into the users the view is about.
How:   A relationship id wins when both are given. A disconnected
       relationship resolves to its first user alone; the partner is never
       compared against.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.relationship import Relationship
from app.services.relationship_service import relationship_service
from app.services.user_service import user_service


@dataclass(frozen=True)
class Pairing:
    user1_id: int
    user2_id: Optional[int] = None
    relationship: Optional[Relationship] = None

    @property
    def relationship_id(self) -> Optional[int]:
        return self.relationship.id if self.relationship is not None else None

    @property
    def has_partner(self) -> bool:
        return self.user2_id is not None

    @property
    def user_ids(self) -> List[int]:
        return [self.user1_id] if self.user2_id is None else [self.user1_id, self.user2_id]


def require_scope(relationship_id: Optional[int], user_id: Optional[int]) -> None:
    if relationship_id is None and user_id is None:
        raise ValidationError(
            "Either relationshipId or userId must be provided",
            context={"accepted": ["relationshipId", "userId"]},
        )


async def resolve_pairing(
    db: AsyncSession,
    relationship_id: Optional[int],
    user_id: Optional[int],
    lookup_relationship: bool = False,
) -> Pairing:
    """
    Raises:
        ValidationError: Neither id was given.
        NotFoundError:   The relationship or user does not exist.
    """
    require_scope(relationship_id, user_id)

    if relationship_id is not None:
        relationship = await relationship_service.get(db, relationship_id)
        return Pairing(
            user1_id=relationship.user1_id,
            user2_id=relationship.partner_user_id,
            relationship=relationship,
        )

    await user_service.get_active(db, user_id)
    if lookup_relationship:
        relationship = await relationship_service.find_active_for_user(db, user_id)
        if relationship is not None:
            return Pairing(
                user1_id=relationship.user1_id,
                user2_id=relationship.user2_id,
                relationship=relationship,
            )
    return Pairing(user1_id=user_id)
