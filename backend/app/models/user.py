"""
Duet Backend — User Model
===========================

What:  ORM model for the `users` table.
How:   A user is created from a device/social identity (`uuid`, `social_id`)
       and fills in the profile later. Soft deletion flips `deleted`; hard
       deletion cascades to answers, pairings and app opens.

Query Patterns:
    - Lookup by id (primary key)
    - Lookup by `invite_code` when a partner joins (unique index)
    - Duplicate checks on `social_id` and `uuid` at registration
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(Text)
    social_id: Mapped[Optional[str]] = mapped_column(Text, index=True)

    # ── Profile ───────────────────────────────────────────────────────────
    name: Mapped[Optional[str]] = mapped_column(String(255))
    gender: Mapped[Optional[str]] = mapped_column(String(30))
    birth_date: Mapped[Optional[date]] = mapped_column(Date)
    lat: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 8))
    long: Mapped[Optional[Decimal]] = mapped_column(Numeric(11, 8))
    anniversary: Mapped[Optional[date]] = mapped_column(Date)
    relationship_status: Mapped[Optional[str]] = mapped_column(String(100))
    expectations: Mapped[Optional[str]] = mapped_column(Text)
    invite_code: Mapped[Optional[str]] = mapped_column(String(100), unique=True)
    profile_img: Mapped[Optional[str]] = mapped_column(Text)
    mood: Mapped[Optional[str]] = mapped_column(String(100))

    # ── Preferences ───────────────────────────────────────────────────────
    lang: Mapped[str] = mapped_column(String(5), nullable=False, default="en", server_default=text("'en'"))
    distance_unit: Mapped[str] = mapped_column(
        String(10), nullable=False, default="km", server_default=text("'km'")
    )
    # Hides sub-topics flagged `adult` from every listing and progress view
    hide_content: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    location_permission: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    # ── Lifecycle ─────────────────────────────────────────────────────────
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))
    last_active_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', deleted={self.deleted})>"
