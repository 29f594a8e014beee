"""
Duet Backend — User Answer Service
====================================

What:  CRUD for user answers and the batched answer lookups the derived
       views are built from.
How:   A user may answer the same question more than once; readers that
       need one answer per (user, question) take the most recent one.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.answer import UserAnswer
from app.models.content import Question
from app.schemas.answer import AnswerCreate, BulkAnswerCreate
from app.services.base import CRUDService, translate_db_errors
from app.services.content_service import question_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

AnswerKey = Tuple[int, int]


class AnswerService(CRUDService[UserAnswer]):
    model = UserAnswer
    resource = "user answer"

    async def list_filtered(
        self,
        db: AsyncSession,
        user_id: Optional[int] = None,
        question_id: Optional[int] = None,
    ) -> List[UserAnswer]:
        filters = []
        if user_id is not None:
            filters.append(UserAnswer.user_id == user_id)
        if question_id is not None:
            filters.append(UserAnswer.question_id == question_id)
        return await self.list(db, *filters, order_by=[UserAnswer.answered_at.desc(), UserAnswer.id.desc()])

    async def submit(self, db: AsyncSession, payload: AnswerCreate) -> UserAnswer:
        await user_service.get_active(db, payload.user_id)
        await question_service.get(db, payload.question_id)
        return await self.create(db, payload.model_dump())

    async def submit_bulk(self, db: AsyncSession, payload: BulkAnswerCreate) -> List[UserAnswer]:
        """
        Store several answers of one user in one flush.

        Raises:
            NotFoundError: The user does not exist or is soft-deleted.
        """
        await user_service.get_active(db, payload.user_id)
        answers = [
            UserAnswer(user_id=payload.user_id, **item.model_dump())
            for item in payload.answers
        ]
        with translate_db_errors("create user answers", user_id=payload.user_id):
            db.add_all(answers)
            await db.flush()
            for answer in answers:
                await db.refresh(answer)
        logger.info("Stored %d answers for user %s", len(answers), payload.user_id)
        return answers

    # ── Batched lookups ───────────────────────────────────────────────────

    async def latest_answers(
        self,
        db: AsyncSession,
        user_ids: Iterable[int],
        question_ids: Iterable[int],
    ) -> Dict[AnswerKey, UserAnswer]:
        """Most recent answer per (user_id, question_id) among the given ids."""
        user_ids, question_ids = list(user_ids), list(question_ids)
        if not user_ids or not question_ids:
            return {}
        query = (
            select(UserAnswer)
            .where(UserAnswer.user_id.in_(user_ids), UserAnswer.question_id.in_(question_ids))
            .order_by(UserAnswer.answered_at, UserAnswer.id)
        )
        with translate_db_errors("load latest answers"):
            result = await db.execute(query)
            rows = result.scalars().all()
        # Ascending order, so later rows overwrite earlier ones
        return {(row.user_id, row.question_id): row for row in rows}

    async def answered_question_ids(
        self,
        db: AsyncSession,
        user_ids: Iterable[int],
        question_ids: Iterable[int],
        complete_only: bool = False,
    ) -> Dict[int, Set[int]]:
        """user_id → distinct question ids (from `question_ids`) the user has answered."""
        user_ids, question_ids = list(user_ids), list(question_ids)
        answered: Dict[int, Set[int]] = {uid: set() for uid in user_ids}
        if not user_ids or not question_ids:
            return answered
        query = (
            select(UserAnswer.user_id, UserAnswer.question_id)
            .where(UserAnswer.user_id.in_(user_ids), UserAnswer.question_id.in_(question_ids))
            .distinct()
        )
        if complete_only:
            query = query.where(UserAnswer.answer_status == "complete")
        with translate_db_errors("load answered questions"):
            result = await db.execute(query)
            for user_id, question_id in result.all():
                answered[user_id].add(question_id)
        return answered

    async def count_answered(self, db: AsyncSession, user_ids: Iterable[int]) -> int:
        """Distinct (user, active question) pairs answered by any of `user_ids`."""
        user_ids = list(user_ids)
        if not user_ids:
            return 0
        pairs = (
            select(UserAnswer.user_id, UserAnswer.question_id)
            .join(Question, Question.id == UserAnswer.question_id)
            .where(UserAnswer.user_id.in_(user_ids), Question.is_active.is_(True))
            .distinct()
            .subquery()
        )
        with translate_db_errors("count answered questions"):
            result = await db.execute(select(func.count()).select_from(pairs))
            return result.scalar() or 0


answer_service = AnswerService()
