"""
Duet Backend — Result Service
===============================

What:  Side-by-side answers of a couple and their match score.
How:   Loads the latest answer of each partner per question and hands the
       texts to `app.core.matching.score_answers`. A disconnected
       relationship is scored as solo: nothing compared, "0.00".
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.matching import normalize_answer, score_answers
from app.exceptions import NotFoundError
from app.schemas.answer import AnswerResponse
from app.schemas.content import QuestionResponse
from app.schemas.result import (
    MatchSummary,
    QuestionComparison,
    SingleQuestionResult,
    SubtopicResultsResponse,
)
from app.services.answer_service import answer_service
from app.services.content_service import question_service, sub_topic_service
from app.services.pairing import resolve_pairing
from app.services.relationship_service import relationship_service

logger = logging.getLogger(__name__)


class ResultService:
    async def by_relationship_and_subtopic(
        self, db: AsyncSession, relationship_id: int, sub_topic_id: int
    ) -> SubtopicResultsResponse:
        """
        Raises:
            NotFoundError: Unknown relationship or sub-topic.
        """
        relationship = await relationship_service.get(db, relationship_id)
        await sub_topic_service.get(db, sub_topic_id)
        user1_id, user2_id = relationship.user1_id, relationship.partner_user_id

        questions = await question_service.list_filtered(db, sub_topic_id=sub_topic_id)
        questions = [q for q in questions if q.is_active]
        question_ids = [q.id for q in questions]

        user_ids = [user1_id] if user2_id is None else [user1_id, user2_id]
        latest = await answer_service.latest_answers(db, user_ids, question_ids)
        texts = {key: answer.answer_text for key, answer in latest.items()}
        match = score_answers(question_ids, texts, user1_id, user2_id)

        results = []
        for q in questions:
            first = texts.get((user1_id, q.id))
            second = texts.get((user2_id, q.id)) if user2_id is not None else None
            results.append(
                QuestionComparison(
                    question_id=q.id,
                    question_text=q.question_text,
                    question_type=q.question_type,
                    option_text=q.option_text,
                    option_img=q.option_img,
                    user1_answer=first,
                    user2_answer=second,
                    is_match=(
                        normalize_answer(first) == normalize_answer(second)
                        if first and second
                        else None
                    ),
                )
            )

        logger.debug(
            "Relationship %s sub-topic %s: %d/%d matched",
            relationship_id, sub_topic_id, match.matches, match.total_compared,
        )
        return SubtopicResultsResponse(
            relationship_id=relationship_id,
            sub_topic_id=sub_topic_id,
            user1_id=user1_id,
            user2_id=user2_id,
            results=results,
            match=MatchSummary(
                matches=match.matches,
                total_compared=match.total_compared,
                similarity_percent=match.similarity_percent,
            ),
        )

    async def single_question(
        self,
        db: AsyncSession,
        question_id: int,
        relationship_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> SingleQuestionResult:
        """
        One question's latest answer(s) for a pair or a single user.

        Raises:
            ValidationError: Neither id given.
            NotFoundError:   Unknown relationship, user or question, or
                             nobody in scope has answered the question.
        """
        pairing = await resolve_pairing(db, relationship_id, user_id)
        question = await question_service.get(db, question_id)
        latest = await answer_service.latest_answers(db, pairing.user_ids, [question_id])
        if not latest:
            raise NotFoundError(
                resource="answer",
                message="No answers found for this question",
                context={"question_id": question_id, "user_ids": pairing.user_ids},
            )

        def answer_of(uid: Optional[int]) -> Optional[AnswerResponse]:
            if uid is None:
                return None
            answer = latest.get((uid, question_id))
            return AnswerResponse.model_validate(answer) if answer is not None else None

        return SingleQuestionResult(
            question=QuestionResponse.model_validate(question),
            user1_id=pairing.user1_id,
            user2_id=pairing.user2_id,
            user1_answer=answer_of(pairing.user1_id),
            user2_answer=answer_of(pairing.user2_id),
        )


result_service = ResultService()
