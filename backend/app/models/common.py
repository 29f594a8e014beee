"""
Duet Backend — Shared Model Columns
=====================================

What:  Timestamp helpers reused by every table.
How:   Python-side defaults are always UTC-aware; the server default covers
       rows inserted outside the ORM (seed scripts, psql).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """`created_at` / `updated_at` pair; `updated_at` moves on every ORM update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
