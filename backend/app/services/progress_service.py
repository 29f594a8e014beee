"""
Duet Backend — Progress Service
=================================

What:  Per-user completion of the question bank, and the division views
       built on top of it.
How:   Each call loads the active question bank once (active sub-topics and
       their active questions, adult sub-topics dropped for users with
       `hide_content`), then the set of question ids each user has
       answered. Everything after that is arithmetic in `app.core`.

Counting rules:
    - Only active questions of active sub-topics count.
    - A question counts as answered once, however many answers it has.
    - `answered_count > total_questions` cannot happen here, since both
      sides come from the same question set.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.divisions import (
    ALL_DIVISIONS,
    Division,
    classify_division,
    division_status,
    filter_by_division,
    parse_division,
    summarize_divisions,
)
from app.core.progress import ProgressSnapshot
from app.exceptions import ValidationError
from app.models.content import Category, Question, SubTopic, Topic
from app.schemas.progress import (
    DivisionEntry,
    DivisionsResponse,
    ProgressEntry,
    RelationshipInfo,
    SubTopicProgressEntry,
    SubtopicDivisionEntry,
    SubtopicDivisionsResponse,
)
from app.services.answer_service import answer_service
from app.services.base import translate_db_errors
from app.services.relationship_service import relationship_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Question bank snapshot
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class QuestionBank:
    """Active sub-topics and, per sub-topic, the ordered ids of active questions."""

    sub_topics: List[SubTopic]
    question_ids: Dict[int, List[int]] = field(default_factory=dict)

    def total(self, sub_topic_id: int) -> int:
        return len(self.question_ids.get(sub_topic_id, ()))

    def ids_for(self, sub_topic_ids: Iterable[int]) -> List[int]:
        ids: List[int] = []
        for sub_topic_id in sub_topic_ids:
            ids.extend(self.question_ids.get(sub_topic_id, ()))
        return ids

    @property
    def all_question_ids(self) -> List[int]:
        return self.ids_for(st.id for st in self.sub_topics)

    def snapshot(self, sub_topic_ids: Iterable[int], answered: Set[int]) -> ProgressSnapshot:
        ids = self.ids_for(sub_topic_ids)
        return ProgressSnapshot.compute(len(ids), len(answered.intersection(ids)))


async def load_question_bank(
    db: AsyncSession,
    hide_adult: bool = False,
    topic_id: Optional[int] = None,
    category_id: Optional[int] = None,
    sub_topic_ids: Optional[Iterable[int]] = None,
) -> QuestionBank:
    """Topic and category filters are combined with AND."""
    query = select(SubTopic).where(SubTopic.is_active.is_(True))
    if hide_adult:
        query = query.where(SubTopic.adult.is_(False))
    if topic_id is not None:
        query = query.where(SubTopic.topic_id == topic_id)
    if category_id is not None:
        query = query.where(SubTopic.category_id == category_id)
    if sub_topic_ids is not None:
        query = query.where(SubTopic.id.in_(list(sub_topic_ids)))
    query = query.order_by(SubTopic.sort_order, SubTopic.id)

    with translate_db_errors("load question bank"):
        result = await db.execute(query)
        sub_topics = list(result.scalars().all())
        bank = QuestionBank(sub_topics=sub_topics)
        if not sub_topics:
            return bank

        rows = await db.execute(
            select(Question.id, Question.sub_topic_id)
            .where(
                Question.sub_topic_id.in_([st.id for st in sub_topics]),
                Question.is_active.is_(True),
            )
            .order_by(Question.sort_order, Question.id)
        )
        for question_id, sub_topic_id in rows.all():
            bank.question_ids.setdefault(sub_topic_id, []).append(question_id)
    return bank


async def load_group_names(db: AsyncSession) -> Tuple[Dict[int, str], Dict[int, str]]:
    """(topic id → name, category id → name) for labelling sub-topics."""
    with translate_db_errors("load topic and category names"):
        topics = await db.execute(select(Topic.id, Topic.name))
        categories = await db.execute(select(Category.id, Category.name))
        return dict(topics.all()), dict(categories.all())


def parse_division_filter(division: Optional[str]) -> str:
    try:
        return parse_division(division)
    except ValueError:
        allowed = [ALL_DIVISIONS] + [d.value for d in Division]
        raise ValidationError(
            f"Unknown division '{division}'",
            field="division",
            context={"allowed": allowed},
        ) from None


# ══════════════════════════════════════════════════════════════════════════
# Service
# ══════════════════════════════════════════════════════════════════════════


class ProgressService:
    """
    Read-only progress views for one user.

    Every method raises NotFoundError (→ 404) for an unknown or
    soft-deleted user.
    """

    async def _bank_and_answers(
        self,
        db: AsyncSession,
        user_ids: List[int],
        hide_adult: bool,
        topic_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Tuple[QuestionBank, Dict[int, Set[int]]]:
        bank = await load_question_bank(
            db, hide_adult=hide_adult, topic_id=topic_id, category_id=category_id
        )
        answered = await answer_service.answered_question_ids(db, user_ids, bank.all_question_ids)
        return bank, answered

    async def by_subtopic(
        self,
        db: AsyncSession,
        user_id: int,
        topic_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> List[SubTopicProgressEntry]:
        user = await user_service.get_active(db, user_id)
        bank, answered = await self._bank_and_answers(
            db, [user_id], user.hide_content, topic_id=topic_id, category_id=category_id
        )
        entries = []
        for st in bank.sub_topics:
            snap = bank.snapshot([st.id], answered[user_id])
            entries.append(
                SubTopicProgressEntry(
                    id=st.id,
                    name=st.name,
                    description=st.description,
                    icon=st.icon,
                    color=st.color,
                    topic_id=st.topic_id,
                    category_id=st.category_id,
                    adult=st.adult,
                    total_questions=snap.total_questions,
                    answered_count=snap.answered_count,
                    progress=snap.percent,
                )
            )
        return entries

    async def by_topic(self, db: AsyncSession, user_id: int) -> List[ProgressEntry]:
        return await self._by_group(db, user_id, Topic, "topic_id")

    async def by_category(self, db: AsyncSession, user_id: int) -> List[ProgressEntry]:
        return await self._by_group(db, user_id, Category, "category_id")

    async def _by_group(
        self,
        db: AsyncSession,
        user_id: int,
        model: Union[Type[Topic], Type[Category]],
        link: str,
    ) -> List[ProgressEntry]:
        user = await user_service.get_active(db, user_id)
        bank, answered = await self._bank_and_answers(db, [user_id], user.hide_content)
        with translate_db_errors(f"list {model.__tablename__}"):
            result = await db.execute(
                select(model).where(model.is_active.is_(True)).order_by(model.sort_order, model.id)
            )
            groups = list(result.scalars().all())

        members: Dict[int, List[int]] = {}
        for st in bank.sub_topics:
            group_id = getattr(st, link)
            if group_id is not None:
                members.setdefault(group_id, []).append(st.id)

        entries = []
        for group in groups:
            snap = bank.snapshot(members.get(group.id, []), answered[user_id])
            entries.append(
                ProgressEntry(
                    id=group.id,
                    name=group.name,
                    description=group.description,
                    icon=group.icon,
                    color=group.color,
                    total_questions=snap.total_questions,
                    answered_count=snap.answered_count,
                    progress=snap.percent,
                )
            )
        return entries

    async def divisions(
        self,
        db: AsyncSession,
        user_id: int,
        division: Optional[str] = None,
        category_id: Optional[int] = None,
        topic_id: Optional[int] = None,
    ) -> DivisionsResponse:
        """
        Categories and sub-topics bucketed by the user's own progress.

        The category/topic filters narrow the sub-topic list only; the
        category list always covers every active category.
        """
        wanted = parse_division_filter(division)
        category_entries = [
            DivisionEntry(
                kind="category",
                division=classify_division(e.progress, e.answered_count, has_partner=False),
                **e.model_dump(exclude={"description"}),
            )
            for e in await self.by_category(db, user_id)
        ]
        sub_topic_entries = [
            DivisionEntry(
                kind="sub_topic",
                division=classify_division(e.progress, e.answered_count, has_partner=False),
                **e.model_dump(exclude={"description", "adult"}),
            )
            for e in await self.by_subtopic(db, user_id, topic_id=topic_id, category_id=category_id)
        ]

        categories = filter_by_division(category_entries, wanted, key=lambda e: e.division)
        sub_topics = filter_by_division(sub_topic_entries, wanted, key=lambda e: e.division)
        return DivisionsResponse(
            user_id=user_id,
            division=wanted,
            categories=categories,
            sub_topics=sub_topics,
            category_count=len(categories),
            sub_topic_count=len(sub_topics),
            total=len(categories) + len(sub_topics),
            summary=summarize_divisions(e.division for e in sub_topic_entries),
        )

    async def subtopic_divisions(
        self,
        db: AsyncSession,
        user_id: int,
        division: Optional[str] = None,
        topic_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> SubtopicDivisionsResponse:
        """
        Sub-topics classified against the user's partner, when the user is
        in a connected relationship, or solo otherwise.
        """
        wanted = parse_division_filter(division)
        user = await user_service.get_active(db, user_id)
        relationship = await relationship_service.find_active_for_user(db, user_id)
        partner_id = relationship.partner_of(user_id) if relationship is not None else None
        has_partner = partner_id is not None

        user_ids = [user_id] + ([partner_id] if has_partner else [])
        bank, answered = await self._bank_and_answers(
            db, user_ids, user.hide_content, topic_id=topic_id, category_id=category_id
        )
        topic_names, category_names = await load_group_names(db)

        entries = []
        for st in bank.sub_topics:
            mine = bank.snapshot([st.id], answered[user_id])
            theirs = bank.snapshot([st.id], answered[partner_id]) if has_partner else None
            status = division_status(
                mine.percent,
                mine.answered_count,
                has_partner,
                theirs.percent if theirs else 0,
                theirs.answered_count if theirs else 0,
            )
            entries.append(
                SubtopicDivisionEntry(
                    id=st.id,
                    name=st.name,
                    description=st.description,
                    icon=st.icon,
                    color=st.color,
                    topic_id=st.topic_id,
                    category_id=st.category_id,
                    topic_name=topic_names.get(st.topic_id),
                    category_name=category_names.get(st.category_id),
                    total_questions=mine.total_questions,
                    user_answered_count=mine.answered_count,
                    user_progress=mine.percent,
                    partner_answered_count=theirs.answered_count if theirs else None,
                    partner_progress=theirs.percent if theirs else None,
                    overall_progress=status.overall_progress,
                    division=status.division,
                    is_completed=status.is_completed,
                )
            )

        filtered = filter_by_division(entries, wanted, key=lambda e: e.division)
        return SubtopicDivisionsResponse(
            user_id=user_id,
            division=wanted,
            relationship=RelationshipInfo(
                relationship_id=relationship.id if relationship is not None else None,
                partner_user_id=partner_id,
                has_partner=has_partner,
            ),
            sub_topics=filtered,
            summary=summarize_divisions(e.division for e in entries),
            total=len(filtered),
        )


progress_service = ProgressService()
