"""
Duet Backend — Relationship Schemas
=====================================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.schemas.common import CamelModel


class RelationshipCreate(CamelModel):
    user1_id: int = Field(gt=0)
    user2_id: int = Field(gt=0)
    started_at: Optional[datetime] = None

    @model_validator(mode="after")
    def distinct_users(self) -> "RelationshipCreate":
        if self.user1_id == self.user2_id:
            raise ValueError("user1Id and user2Id must be different users")
        return self


class RelationshipInvite(CamelModel):
    """Pair `user1_id` with whichever user owns `invite_code`."""

    user1_id: int = Field(gt=0)
    invite_code: str = Field(min_length=1, max_length=100)
    started_at: Optional[datetime] = None


class RelationshipUpdate(CamelModel):
    user1_id: Optional[int] = Field(default=None, gt=0)
    user2_id: Optional[int] = Field(default=None, gt=0)
    started_at: Optional[datetime] = None
    # True disconnects the pair; False reconnects it
    deleted: Optional[bool] = None


class RelationshipResponse(CamelModel):
    id: int
    user1_id: int
    user2_id: int
    started_at: Optional[datetime] = None
    deleted: bool
    created_at: datetime
    updated_at: datetime
