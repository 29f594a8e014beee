"""
Duet Backend — User Answer Routes
===================================

    GET    /api/user-answers?userId=&questionId=
    GET    /api/user-answers/{id}
    POST   /api/user-answers
    POST   /api/user-answers/bulk
    PUT    /api/user-answers/{id}
    DELETE /api/user-answers/{id}
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.answer import AnswerCreate, AnswerResponse, AnswerUpdate, BulkAnswerCreate
from app.schemas.common import DeletedResponse, Envelope
from app.services.answer_service import answer_service

router = APIRouter(prefix="/api", tags=["User answers"])

AnswerId = Annotated[int, Path(gt=0, description="Answer id")]


@router.get(
    "/user-answers",
    response_model=Envelope[List[AnswerResponse]],
    responses=error_responses(500),
    summary="List answers",
    description="Newest first. Filter by user, by question, or both.",
)
async def list_answers(
    user_id: Optional[int] = Query(default=None, alias="userId", gt=0),
    question_id: Optional[int] = Query(default=None, alias="questionId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    answers = await answer_service.list_filtered(db, user_id=user_id, question_id=question_id)
    return Envelope(data=[AnswerResponse.model_validate(a) for a in answers])


@router.get(
    "/user-answers/{answer_id}",
    response_model=Envelope[AnswerResponse],
    responses=error_responses(404, 500),
    summary="Get an answer",
)
async def get_answer(answer_id: AnswerId, db: AsyncSession = Depends(get_db_session)):
    answer = await answer_service.get(db, answer_id)
    return Envelope(data=AnswerResponse.model_validate(answer))


@router.post(
    "/user-answers",
    response_model=Envelope[AnswerResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(404, 422, 500),
    summary="Submit an answer",
)
async def create_answer(payload: AnswerCreate, db: AsyncSession = Depends(get_db_session)):
    answer = await answer_service.submit(db, payload)
    return Envelope(data=AnswerResponse.model_validate(answer))


@router.post(
    "/user-answers/bulk",
    response_model=Envelope[List[AnswerResponse]],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(404, 409, 422, 500),
    summary="Submit several answers of one user",
    description="Returns 404 when the user does not exist or has been soft-deleted.",
)
async def create_answers_bulk(payload: BulkAnswerCreate, db: AsyncSession = Depends(get_db_session)):
    answers = await answer_service.submit_bulk(db, payload)
    return Envelope(data=[AnswerResponse.model_validate(a) for a in answers])


@router.put(
    "/user-answers/{answer_id}",
    response_model=Envelope[AnswerResponse],
    responses=error_responses(404, 422, 500),
    summary="Update an answer",
)
async def update_answer(
    payload: AnswerUpdate,
    answer_id: AnswerId,
    db: AsyncSession = Depends(get_db_session),
):
    answer = await answer_service.update(db, answer_id, payload.model_dump(exclude_unset=True))
    return Envelope(data=AnswerResponse.model_validate(answer))


@router.delete(
    "/user-answers/{answer_id}",
    response_model=Envelope[DeletedResponse],
    responses=error_responses(404, 500),
    summary="Delete an answer",
)
async def delete_answer(answer_id: AnswerId, db: AsyncSession = Depends(get_db_session)):
    return Envelope(data=DeletedResponse(id=await answer_service.delete(db, answer_id)))
