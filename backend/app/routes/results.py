"""
Duet Backend — Results Routes
===============================

    GET /api/results/by-relationship-and-subtopic?relationshipId=&subTopicId=
    GET /api/results/single-question?questionId=&relationshipId=&userId=
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import Envelope
from app.schemas.result import SingleQuestionResult, SubtopicResultsResponse
from app.services.result_service import result_service

router = APIRouter(prefix="/api/results", tags=["Results"])


@router.get(
    "/by-relationship-and-subtopic",
    response_model=Envelope[SubtopicResultsResponse],
    responses=error_responses(404, 500),
    summary="Compare a couple's answers within a sub-topic",
)
async def results_by_subtopic(
    relationship_id: int = Query(alias="relationshipId", gt=0),
    sub_topic_id: int = Query(alias="subTopicId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    result = await result_service.by_relationship_and_subtopic(db, relationship_id, sub_topic_id)
    return Envelope(data=result)


@router.get(
    "/single-question",
    response_model=Envelope[SingleQuestionResult],
    responses=error_responses(400, 404, 500),
    summary="Both answers to one question",
)
async def single_question_result(
    question_id: int = Query(alias="questionId", gt=0),
    relationship_id: Optional[int] = Query(default=None, alias="relationshipId", gt=0),
    user_id: Optional[int] = Query(default=None, alias="userId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    result = await result_service.single_question(
        db, question_id, relationship_id=relationship_id, user_id=user_id
    )
    return Envelope(data=result)
