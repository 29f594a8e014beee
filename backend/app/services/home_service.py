"""
Duet Backend — Home Service
=============================

What:  The three home-screen views:
       - overview: days together, journal counters, answered share, streaks
       - random sub-topics: a stored random batch, replaced once finished
       - daily question: one question per UTC day from a fixed pool

How:   Every view accepts `relationshipId` or `userId` (see
       `services.pairing`). Rotation and sampling rules live in
       `app.core.rotation`; this module only loads and stores rows.
"""

import logging
import random
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.dates import days_between, to_utc_date, utc_now
from app.core.divisions import division_status
from app.core.progress import completion_percent, pair_completion_percent
from app.core.rotation import (
    is_selection_exhausted,
    sample_without_replacement,
    select_daily_question,
)
from app.core.streak import combined_streak
from app.exceptions import NotFoundError
from app.models.activity import ActiveRandomSubtopicSet
from app.models.content import SubTopic, Topic
from app.models.user import User
from app.schemas.content import QuestionResponse
from app.schemas.home import (
    DailyQuestionResponse,
    DailyStreakSummary,
    HomeResponse,
    HomeUser,
    RandomSubtopicEntry,
    RandomSubtopicsResponse,
)
from app.services.answer_service import answer_service
from app.services.base import translate_db_errors
from app.services.content_service import question_service
from app.services.journal_service import journal_service
from app.services.pairing import Pairing, require_scope, resolve_pairing
from app.services.progress_service import QuestionBank, load_group_names, load_question_bank
from app.services.streak_service import streak_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


class HomeService:
    # ── Overview ──────────────────────────────────────────────────────────

    async def overview(
        self,
        db: AsyncSession,
        relationship_id: Optional[int] = None,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> HomeResponse:
        """
        Raises:
            ValidationError: Neither id given.
            NotFoundError:   Unknown relationship or user.
        """
        now = now or utc_now()
        pairing = await resolve_pairing(db, relationship_id, user_id)
        users = await self._home_users(db, pairing.user_ids)

        total_questions = await question_service.count_active(db)
        answered = await answer_service.count_answered(db, pairing.user_ids)
        answered_share = completion_percent(total_questions * len(pairing.user_ids), answered)

        streaks = await streak_service.streaks(db, pairing.user_ids, now=now)
        user1_streak = streaks[pairing.user1_id]
        user2_streak = streaks[pairing.user2_id] if pairing.has_partner else None

        response = HomeResponse(
            relationship_id=pairing.relationship_id,
            user1=users.get(pairing.user1_id),
            user2=users.get(pairing.user2_id) if pairing.has_partner else None,
            question_answered_percentage=answered_share,
            daily_streak=DailyStreakSummary(
                user1=user1_streak,
                user2=user2_streak,
                combined=combined_streak(user1_streak, user2_streak),
            ),
        )

        relationship = pairing.relationship
        if relationship is not None:
            if not relationship.deleted:
                started = relationship.started_at or relationship.created_at
                response.days_together = days_between(started, now)
            response.memories_created = await journal_service.count_by_type(db, relationship.id, "memory")
            response.special_days = await journal_service.count_by_type(db, relationship.id, "special_day")
            response.cities_visited = await journal_service.count_locations(db, relationship.id)
        return response

    async def _home_users(self, db: AsyncSession, user_ids: List[int]) -> Dict[int, HomeUser]:
        """Profile summaries; soft-deleted users are left out."""
        with translate_db_errors("load home users"):
            result = await db.execute(
                select(User).where(User.id.in_(user_ids), User.deleted.is_(False))
            )
            return {u.id: HomeUser.model_validate(u) for u in result.scalars().all()}

    # ── Random sub-topics ─────────────────────────────────────────────────

    async def random_subtopics(
        self,
        db: AsyncSession,
        relationship_id: Optional[int] = None,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ) -> RandomSubtopicsResponse:
        """
        The caller's active random batch of sub-topics with progress.

        A relationship and a single user each keep their own batch. A new
        batch is drawn when there is none yet or when every user in scope
        has completed every question of every sub-topic in the current one.
        Adult sub-topics are left out of new batches when the first user
        has `hide_content` set.
        """
        now = now or utc_now()
        pairing = await resolve_pairing(db, relationship_id, user_id)
        owner = await user_service.get(db, pairing.user1_id)

        active = await self._latest_set(db, pairing, relationship_id)
        regenerated = False
        if active is None or await self._is_exhausted(db, active, pairing):
            active = await self._draw_set(db, pairing, relationship_id, owner.hide_content, now, rng)
            regenerated = True

        bank = await load_question_bank(db, sub_topic_ids=active.subtopic_ids)
        completed = await answer_service.answered_question_ids(
            db, pairing.user_ids, bank.all_question_ids, complete_only=True
        )
        topic_names, category_names = await load_group_names(db)
        by_id = {st.id: st for st in bank.sub_topics}

        entries = []
        for sub_topic_id in active.subtopic_ids:
            st = by_id.get(sub_topic_id)
            if st is None:
                continue
            mine = bank.snapshot([st.id], completed[pairing.user1_id])
            theirs = bank.snapshot([st.id], completed[pairing.user2_id]) if pairing.has_partner else None
            status = division_status(
                mine.percent,
                mine.answered_count,
                pairing.has_partner,
                theirs.percent if theirs else 0,
                theirs.answered_count if theirs else 0,
            )
            overall = status.overall_progress
            if theirs is not None:
                overall = pair_completion_percent(
                    mine.total_questions, mine.answered_count, theirs.answered_count
                )
            entries.append(
                RandomSubtopicEntry(
                    id=st.id,
                    name=st.name,
                    description=st.description,
                    icon=st.icon,
                    color=st.color,
                    topic_id=st.topic_id,
                    category_id=st.category_id,
                    topic_name=topic_names.get(st.topic_id),
                    category_name=category_names.get(st.category_id),
                    adult=st.adult,
                    total_questions=mine.total_questions,
                    user_progress=mine.percent,
                    partner_progress=theirs.percent if theirs else None,
                    overall_progress=overall,
                    division=status.division,
                )
            )

        return RandomSubtopicsResponse(
            set_id=active.id,
            created_at=active.created_at,
            regenerated=regenerated,
            sub_topics=entries,
        )

    async def _latest_set(
        self, db: AsyncSession, pairing: Pairing, relationship_id: Optional[int]
    ) -> Optional[ActiveRandomSubtopicSet]:
        query = select(ActiveRandomSubtopicSet)
        if relationship_id is not None:
            query = query.where(ActiveRandomSubtopicSet.relationship_id == relationship_id)
        else:
            query = query.where(ActiveRandomSubtopicSet.user_id == pairing.user1_id)
        query = query.order_by(
            ActiveRandomSubtopicSet.created_at.desc(), ActiveRandomSubtopicSet.id.desc()
        ).limit(1)
        with translate_db_errors("load random sub-topic set"):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def _is_exhausted(
        self, db: AsyncSession, active: ActiveRandomSubtopicSet, pairing: Pairing
    ) -> bool:
        bank = await load_question_bank(db, sub_topic_ids=active.subtopic_ids)
        completed = await answer_service.answered_question_ids(
            db, pairing.user_ids, bank.all_question_ids, complete_only=True
        )
        question_counts = {st_id: bank.total(st_id) for st_id in active.subtopic_ids}
        completed_counts = {
            st_id: {
                uid: len(completed[uid].intersection(bank.question_ids.get(st_id, ())))
                for uid in pairing.user_ids
            }
            for st_id in active.subtopic_ids
        }
        return is_selection_exhausted(question_counts, completed_counts, pairing.user_ids)

    async def _draw_set(
        self,
        db: AsyncSession,
        pairing: Pairing,
        relationship_id: Optional[int],
        hide_adult: bool,
        now: datetime,
        rng: Optional[random.Random],
    ) -> ActiveRandomSubtopicSet:
        candidates: QuestionBank = await load_question_bank(db, hide_adult=hide_adult)
        chosen = sample_without_replacement(
            [st.id for st in candidates.sub_topics],
            settings.random_subtopic_batch_size,
            rng,
        )
        new_set = ActiveRandomSubtopicSet(
            relationship_id=relationship_id,
            user_id=None if relationship_id is not None else pairing.user1_id,
            subtopic_ids=chosen,
            created_at=now,
        )
        with translate_db_errors("store random sub-topic set"):
            db.add(new_set)
            await db.flush()
            await db.refresh(new_set)
        logger.info(
            "Drew random sub-topics %s for %s",
            chosen,
            f"relationship {relationship_id}" if relationship_id is not None else f"user {pairing.user1_id}",
        )
        return new_set

    # ── Daily question ────────────────────────────────────────────────────

    async def daily_question(
        self,
        db: AsyncSession,
        relationship_id: Optional[int] = None,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> DailyQuestionResponse:
        """
        Today's question from the configured daily sub-topic, with each
        user's latest answer to it.

        A `userId` caller in a connected relationship sees the pair.

        Raises:
            ValidationError: Neither id given.
            NotFoundError:   The daily topic or sub-topic is missing or
                             inactive, it has no active questions, or the
                             relationship/user is unknown.
        """
        require_scope(relationship_id, user_id)
        now = now or utc_now()
        today = to_utc_date(now)

        await self._require_active(db, Topic, settings.daily_topic_id, "daily topic")
        await self._require_active(db, SubTopic, settings.daily_subtopic_id, "daily sub-topic")

        pool = await question_service.active_ids_for_sub_topic(db, settings.daily_subtopic_id)
        question_id = select_daily_question(pool, settings.daily_rotation_epoch, today)
        if question_id is None:
            raise NotFoundError(
                resource="daily question",
                message="No daily question available",
                context={"sub_topic_id": settings.daily_subtopic_id},
            )
        question = await question_service.get(db, question_id)

        pairing = await resolve_pairing(db, relationship_id, user_id, lookup_relationship=True)
        latest = await answer_service.latest_answers(db, pairing.user_ids, [question_id])
        first = latest.get((pairing.user1_id, question_id))
        second = latest.get((pairing.user2_id, question_id)) if pairing.has_partner else None

        return DailyQuestionResponse(
            date=today,
            rotation_day=days_between(settings.daily_rotation_epoch, today),
            pool_size=len(pool),
            question=QuestionResponse.model_validate(question),
            user1_id=pairing.user1_id,
            user2_id=pairing.user2_id,
            user1_answered=first is not None,
            user2_answered=second is not None,
            user1_answer=first.answer_text if first is not None else None,
            user2_answer=second.answer_text if second is not None else None,
        )

    async def _require_active(self, db: AsyncSession, model, obj_id: int, label: str) -> None:
        with translate_db_errors(f"load {label}", id=obj_id):
            result = await db.execute(
                select(model.id).where(model.id == obj_id, model.is_active.is_(True))
            )
            found = result.scalar_one_or_none()
        if found is None:
            raise NotFoundError(resource=label, message=f"{label.capitalize()} not found")


home_service = HomeService()
