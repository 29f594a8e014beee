"""
Duet Backend — User Progress Routes
=====================================

    GET /api/user-progress/by-subtopic?userId=&topicId=&categoryId=
    GET /api/user-progress/by-topic?userId=
    GET /api/user-progress/by-category?userId=
    GET /api/user-progress/divisions?userId=&division=&categoryId=&topicId=
    GET /api/user-progress/subtopic-divisions?userId=&division=&topicId=&categoryId=

Progress counts distinct answered active questions. Adult sub-topics are
left out for users with `hideContent` set.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import Envelope
from app.schemas.progress import (
    DivisionsResponse,
    ProgressEntry,
    SubtopicDivisionsResponse,
    SubTopicProgressEntry,
)
from app.services.progress_service import progress_service

router = APIRouter(prefix="/api/user-progress", tags=["Progress"])

_DIVISION_HELP = "`all` (default), `unanswered`, `your_turn`, `answered` or `complete`"


@router.get(
    "/by-subtopic",
    response_model=Envelope[List[SubTopicProgressEntry]],
    responses=error_responses(404, 500),
    summary="Progress per sub-topic",
)
async def progress_by_subtopic(
    user_id: int = Query(alias="userId", gt=0),
    topic_id: Optional[int] = Query(default=None, alias="topicId", gt=0),
    category_id: Optional[int] = Query(default=None, alias="categoryId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    entries = await progress_service.by_subtopic(
        db, user_id, topic_id=topic_id, category_id=category_id
    )
    return Envelope(data=entries)


@router.get(
    "/by-topic",
    response_model=Envelope[List[ProgressEntry]],
    responses=error_responses(404, 500),
    summary="Progress per topic",
)
async def progress_by_topic(
    user_id: int = Query(alias="userId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    return Envelope(data=await progress_service.by_topic(db, user_id))


@router.get(
    "/by-category",
    response_model=Envelope[List[ProgressEntry]],
    responses=error_responses(404, 500),
    summary="Progress per category",
)
async def progress_by_category(
    user_id: int = Query(alias="userId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    return Envelope(data=await progress_service.by_category(db, user_id))


@router.get(
    "/divisions",
    response_model=Envelope[DivisionsResponse],
    responses=error_responses(400, 404, 500),
    summary="Categories and sub-topics by division",
    description="Division labels from the user's own progress.",
)
async def progress_divisions(
    user_id: int = Query(alias="userId", gt=0),
    division: Optional[str] = Query(default=None, description=_DIVISION_HELP),
    category_id: Optional[int] = Query(default=None, alias="categoryId", gt=0),
    topic_id: Optional[int] = Query(default=None, alias="topicId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    result = await progress_service.divisions(
        db, user_id, division=division, category_id=category_id, topic_id=topic_id
    )
    return Envelope(data=result)


@router.get(
    "/subtopic-divisions",
    response_model=Envelope[SubtopicDivisionsResponse],
    responses=error_responses(400, 404, 500),
    summary="Sub-topics by division, against the partner",
    description=(
        "Uses the user's active relationship when there is one; otherwise "
        "the sub-topics are classified from the user's progress alone."
    ),
)
async def progress_subtopic_divisions(
    user_id: int = Query(alias="userId", gt=0),
    division: Optional[str] = Query(default=None, description=_DIVISION_HELP),
    topic_id: Optional[int] = Query(default=None, alias="topicId", gt=0),
    category_id: Optional[int] = Query(default=None, alias="categoryId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    result = await progress_service.subtopic_divisions(
        db, user_id, division=division, topic_id=topic_id, category_id=category_id
    )
    return Envelope(data=result)
