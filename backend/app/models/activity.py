"""
Duet Backend — Activity Models
================================

What:  Rows the derived-state rules read from:
       - `daily_app_opens`: at most one row per user and UTC day (streaks)
       - `active_random_subtopics`: the home screen's current random
         sub-topic batch, keyed by relationship or by user
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Index, Integer, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import utcnow


class DailyAppOpen(Base):
    __tablename__ = "daily_app_opens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    # UTC calendar day of opened_at
    opened_on: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "opened_on", name="uq_daily_app_opens_user_day"),
        Index("idx_daily_app_opens_user_opened", "user_id", "opened_at"),
    )


class ActiveRandomSubtopicSet(Base):
    """
    A stored random batch of sub-topics.

    Exactly one of `relationship_id` / `user_id` is set. The newest row for
    a key is the active batch; it is replaced once every sub-topic in it is
    completed by every user sharing it.
    """

    __tablename__ = "active_random_subtopics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    relationship_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("relationships.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    subtopic_ids: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
