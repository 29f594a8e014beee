"""
Duet Backend — Relationship Model
===================================

What:  ORM model for the `relationships` table, the pairing of two users.
How:   `deleted = True` marks a disconnected pairing. A disconnected
       relationship is still readable by id (history, journals) but every
       derived view treats it as solo: the partner is never compared against.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import TimestampMixin


class Relationship(TimestampMixin, Base):
    __tablename__ = "relationships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user1_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user2_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))

    @property
    def partner_user_id(self) -> Optional[int]:
        """user2, unless the pairing has been disconnected."""
        return None if self.deleted else self.user2_id

    def partner_of(self, user_id: int) -> int:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self) -> str:
        return (
            f"<Relationship(id={self.id}, user1_id={self.user1_id}, "
            f"user2_id={self.user2_id}, deleted={self.deleted})>"
        )
