"""
Duet Backend — Journal Service
================================

What:  A couple's shared journal (memories and special days) and the
       comments on its entries.
How:   Entries belong to a relationship. Comments are limited to
       `settings.journal_max_commenters` distinct users per entry (the two
       partners); a user who already commented may always comment again.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.dates import utc_now
from app.exceptions import ValidationError
from app.models.journal import JournalComment, JournalEntry
from app.schemas.journal import CommentCreate, JournalCreate, JournalUpdate
from app.services.base import CRUDService, translate_db_errors
from app.services.relationship_service import relationship_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


class JournalService(CRUDService[JournalEntry]):
    model = JournalEntry
    resource = "journal entry"

    async def add_entry(self, db: AsyncSession, payload: JournalCreate) -> JournalEntry:
        await relationship_service.get(db, payload.relationship_id)
        values = payload.model_dump(exclude_none=True)
        values.setdefault("date_time", utc_now())
        return await self.create(db, values)

    async def edit_entry(self, db: AsyncSession, payload: JournalUpdate) -> JournalEntry:
        values = payload.model_dump(exclude_unset=True, exclude={"id"})
        return await self.update(db, payload.id, values)

    async def list_for_relationship(
        self,
        db: AsyncSession,
        relationship_id: int,
        entry_type: Optional[str] = None,
    ) -> List[JournalEntry]:
        """Entries of a relationship, newest `date_time` first, optionally one type only."""
        filters = [JournalEntry.relationship_id == relationship_id]
        if entry_type is not None:
            filters.append(JournalEntry.type == entry_type)
        return await self.list(
            db, *filters, order_by=[JournalEntry.date_time.desc(), JournalEntry.id.desc()]
        )

    # ── Comments ──────────────────────────────────────────────────────────

    async def add_comment(
        self, db: AsyncSession, journal_id: int, payload: CommentCreate
    ) -> JournalComment:
        """
        Raises:
            NotFoundError:   Unknown entry or user.
            ValidationError: The entry already has comments from the maximum
                             number of other users.
        """
        await self.get(db, journal_id)
        await user_service.get_active(db, payload.user_id)

        with translate_db_errors("load journal commenters", journal_id=journal_id):
            result = await db.execute(
                select(JournalComment.user_id)
                .where(JournalComment.journal_id == journal_id)
                .distinct()
            )
            commenters = set(result.scalars().all())

        if payload.user_id not in commenters and len(commenters) >= settings.journal_max_commenters:
            raise ValidationError(
                f"Only {settings.journal_max_commenters} different users can comment on a journal entry",
                context={"journal_id": journal_id},
            )

        comment = JournalComment(journal_id=journal_id, **payload.model_dump())
        with translate_db_errors("create journal comment", journal_id=journal_id):
            db.add(comment)
            await db.flush()
            await db.refresh(comment)
        return comment

    async def list_comments(self, db: AsyncSession, journal_id: int) -> List[JournalComment]:
        await self.get(db, journal_id)
        with translate_db_errors("list journal comments", journal_id=journal_id):
            result = await db.execute(
                select(JournalComment)
                .where(JournalComment.journal_id == journal_id)
                .order_by(JournalComment.created_at, JournalComment.id)
            )
            return list(result.scalars().all())

    # ── Counters for the home screen ──────────────────────────────────────

    async def count_by_type(self, db: AsyncSession, relationship_id: int, entry_type: str) -> int:
        with translate_db_errors("count journal entries", relationship_id=relationship_id):
            result = await db.execute(
                select(func.count(JournalEntry.id)).where(
                    JournalEntry.relationship_id == relationship_id,
                    JournalEntry.type == entry_type,
                )
            )
            return result.scalar() or 0

    async def count_locations(self, db: AsyncSession, relationship_id: int) -> int:
        """Distinct non-empty `location` values across the relationship's entries."""
        with translate_db_errors("count journal locations", relationship_id=relationship_id):
            result = await db.execute(
                select(func.count(func.distinct(JournalEntry.location))).where(
                    JournalEntry.relationship_id == relationship_id,
                    JournalEntry.location.is_not(None),
                    JournalEntry.location != "",
                )
            )
            return result.scalar() or 0


journal_service = JournalService()
