"""
Duet Backend — Journal Models
===============================

What:  Shared journal of a couple (`journal`) and comments on its entries
       (`journal_comments`).
How:   An entry is either a `memory` or a `special_day`. `location` is a
       free-text place name; the home overview counts distinct locations.
       `images` holds comma-separated URLs produced elsewhere.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import TimestampMixin, utcnow


class JournalEntry(TimestampMixin, Base):
    __tablename__ = "journal"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    relationship_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("relationships.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # memory | special_day
    title: Mapped[Optional[str]] = mapped_column(Text)
    color_code: Mapped[Optional[str]] = mapped_column(String(50))
    date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    lat: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 8))
    long: Mapped[Optional[Decimal]] = mapped_column(Numeric(11, 8))
    location: Mapped[Optional[str]] = mapped_column(Text)
    images: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)


class JournalComment(Base):
    __tablename__ = "journal_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    journal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("journal.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
