"""
Duet Backend — Streak Routes
==============================

    POST /api/streak/record-app-open
    GET  /api/streak/single-user?userId=
    GET  /api/streak/relationship?relationshipId=&userId=&month=MM-YYYY
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import Envelope
from app.schemas.streak import (
    AppOpenRecord,
    AppOpenResponse,
    RelationshipStreakResponse,
    SingleUserStreakResponse,
)
from app.services.streak_service import streak_service

router = APIRouter(prefix="/api/streak", tags=["Streaks"])


@router.post(
    "/record-app-open",
    response_model=Envelope[AppOpenResponse],
    responses=error_responses(404, 422, 500),
    summary="Record today's app open",
    description="Idempotent within a UTC day.",
)
async def record_app_open(payload: AppOpenRecord, db: AsyncSession = Depends(get_db_session)):
    return Envelope(data=await streak_service.record_app_open(db, payload.user_id))


@router.get(
    "/single-user",
    response_model=Envelope[SingleUserStreakResponse],
    responses=error_responses(404, 500),
    summary="Streak and current week of one user",
    description="Records today's open before reporting.",
)
async def single_user_streak(
    user_id: int = Query(alias="userId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    return Envelope(data=await streak_service.single_user(db, user_id))


@router.get(
    "/relationship",
    response_model=Envelope[RelationshipStreakResponse],
    responses=error_responses(400, 404, 500),
    summary="Streaks and month calendar of a pair",
)
async def relationship_streak(
    relationship_id: Optional[int] = Query(default=None, alias="relationshipId", gt=0),
    user_id: Optional[int] = Query(default=None, alias="userId", gt=0),
    month: Optional[str] = Query(default=None, description="MM-YYYY, current month by default"),
    db: AsyncSession = Depends(get_db_session),
):
    result = await streak_service.relationship_streak(
        db, relationship_id=relationship_id, user_id=user_id, month=month
    )
    return Envelope(data=result)
