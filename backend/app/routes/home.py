"""
Duet Backend — Home Routes
============================

    GET /api/home?relationshipId=&userId=
    GET /api/home/random-subtopics?relationshipId=&userId=
    GET /api/daily-questions?relationshipId=&userId=

Each accepts either id. With only `userId` the views are computed for that
user alone (the daily question still looks up the user's relationship).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import Envelope
from app.schemas.home import DailyQuestionResponse, HomeResponse, RandomSubtopicsResponse
from app.services.home_service import home_service

router = APIRouter(prefix="/api", tags=["Home"])

_RELATIONSHIP_ID = Query(default=None, alias="relationshipId", gt=0)
_USER_ID = Query(default=None, alias="userId", gt=0)


@router.get(
    "/home",
    response_model=Envelope[HomeResponse],
    responses=error_responses(400, 404, 500),
    summary="Home overview",
)
async def home_overview(
    relationship_id: Optional[int] = _RELATIONSHIP_ID,
    user_id: Optional[int] = _USER_ID,
    db: AsyncSession = Depends(get_db_session),
):
    result = await home_service.overview(db, relationship_id=relationship_id, user_id=user_id)
    return Envelope(data=result)


@router.get(
    "/home/random-subtopics",
    response_model=Envelope[RandomSubtopicsResponse],
    responses=error_responses(400, 404, 500),
    summary="Current random sub-topic set",
    description="A new set is drawn when every sub-topic of the current one is complete.",
)
async def random_subtopics(
    relationship_id: Optional[int] = _RELATIONSHIP_ID,
    user_id: Optional[int] = _USER_ID,
    db: AsyncSession = Depends(get_db_session),
):
    result = await home_service.random_subtopics(
        db, relationship_id=relationship_id, user_id=user_id
    )
    return Envelope(data=result)


@router.get(
    "/daily-questions",
    response_model=Envelope[DailyQuestionResponse],
    responses=error_responses(400, 404, 500),
    summary="Today's question",
)
async def daily_question(
    relationship_id: Optional[int] = _RELATIONSHIP_ID,
    user_id: Optional[int] = _USER_ID,
    db: AsyncSession = Depends(get_db_session),
):
    result = await home_service.daily_question(
        db, relationship_id=relationship_id, user_id=user_id
    )
    return Envelope(data=result)
