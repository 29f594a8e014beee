"""
Duet Backend — Question Bank Service
======================================

What:  CRUD for categories, topics, sub-topics and questions, and the
       "sub-topics with their questions" listing.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.content import Category, Question, SubTopic, Topic
from app.schemas.content import QuestionResponse, SubTopicResponse, SubTopicWithQuestions
from app.services.base import CRUDService, translate_db_errors


class CategoryService(CRUDService[Category]):
    model = Category
    resource = "category"

    async def list_ordered(self, db: AsyncSession) -> List[Category]:
        return await self.list(db, order_by=[Category.sort_order, Category.id])


class TopicService(CRUDService[Topic]):
    model = Topic
    resource = "topic"

    async def list_ordered(self, db: AsyncSession) -> List[Topic]:
        return await self.list(db, order_by=[Topic.sort_order, Topic.id])


class SubTopicService(CRUDService[SubTopic]):
    model = SubTopic
    resource = "sub-topic"

    async def list_filtered(
        self,
        db: AsyncSession,
        topic_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> List[SubTopic]:
        """
        Sub-topics matching the topic OR the category filter.

        A sub-topic may hang off a topic, a category or both, so when both
        filters are given either one is enough.
        """
        conditions = []
        if topic_id is not None:
            conditions.append(SubTopic.topic_id == topic_id)
        if category_id is not None:
            conditions.append(SubTopic.category_id == category_id)
        filters = [or_(*conditions)] if conditions else []
        return await self.list(db, *filters, order_by=[SubTopic.sort_order, SubTopic.id])

    async def with_questions(
        self,
        db: AsyncSession,
        topic_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> List[SubTopicWithQuestions]:
        sub_topics = await self.list_filtered(db, topic_id=topic_id, category_id=category_id)
        if not sub_topics:
            return []

        questions = await question_service.list(
            db,
            Question.sub_topic_id.in_([st.id for st in sub_topics]),
            order_by=[Question.sort_order, Question.id],
        )
        by_sub_topic: Dict[int, List[QuestionResponse]] = {}
        for question in questions:
            by_sub_topic.setdefault(question.sub_topic_id, []).append(
                QuestionResponse.model_validate(question)
            )

        return [
            SubTopicWithQuestions(
                **SubTopicResponse.model_validate(st).model_dump(),
                questions=by_sub_topic.get(st.id, []),
            )
            for st in sub_topics
        ]


class QuestionService(CRUDService[Question]):
    model = Question
    resource = "question"

    async def list_filtered(
        self, db: AsyncSession, sub_topic_id: Optional[int] = None
    ) -> List[Question]:
        filters = [] if sub_topic_id is None else [Question.sub_topic_id == sub_topic_id]
        return await self.list(db, *filters, order_by=[Question.sort_order, Question.id])

    async def active_ids_for_sub_topic(self, db: AsyncSession, sub_topic_id: int) -> List[int]:
        """Ordered ids of the sub-topic's active questions."""
        questions = await self.list(
            db,
            Question.sub_topic_id == sub_topic_id,
            Question.is_active.is_(True),
            order_by=[Question.sort_order, Question.id],
        )
        return [q.id for q in questions]

    async def count_active(self, db: AsyncSession) -> int:
        with translate_db_errors("count active questions"):
            result = await db.execute(
                select(func.count(Question.id)).where(Question.is_active.is_(True))
            )
            return result.scalar() or 0


category_service = CategoryService()
topic_service = TopicService()
sub_topic_service = SubTopicService()
question_service = QuestionService()
