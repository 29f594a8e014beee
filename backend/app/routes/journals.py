"""
Duet Backend — Journal Routes
===============================

    POST   /api/journal-create                  new entry
    GET    /api/journals/all?relationshipId=    every entry, newest first
    GET    /api/journals?relationshipId=&type=  entries, optionally one type
    GET    /api/journals/{id}
    POST   /api/journals                        update (id in the body)
    DELETE /api/journals/{id}
    POST   /api/journals/{id}/comment
    GET    /api/journals/{id}/comments
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import DeletedResponse, Envelope
from app.schemas.journal import (
    CommentCreate,
    CommentResponse,
    JournalCreate,
    JournalResponse,
    JournalType,
    JournalUpdate,
)
from app.services.journal_service import journal_service

router = APIRouter(prefix="/api", tags=["Journals"])

JournalId = Annotated[int, Path(gt=0, description="Journal entry id")]


@router.post(
    "/journal-create",
    response_model=Envelope[JournalResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(404, 422, 500),
    summary="Create a journal entry",
)
async def create_journal(payload: JournalCreate, db: AsyncSession = Depends(get_db_session)):
    entry = await journal_service.add_entry(db, payload)
    return Envelope(data=JournalResponse.model_validate(entry))


@router.get(
    "/journals/all",
    response_model=Envelope[List[JournalResponse]],
    responses=error_responses(500),
    summary="All journal entries of a relationship",
)
async def list_all_journals(
    relationship_id: int = Query(alias="relationshipId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    entries = await journal_service.list_for_relationship(db, relationship_id)
    return Envelope(data=[JournalResponse.model_validate(e) for e in entries])


@router.get(
    "/journals",
    response_model=Envelope[List[JournalResponse]],
    responses=error_responses(500),
    summary="Journal entries of a relationship, by type",
)
async def list_journals(
    relationship_id: int = Query(alias="relationshipId", gt=0),
    entry_type: Optional[JournalType] = Query(default=None, alias="type"),
    db: AsyncSession = Depends(get_db_session),
):
    entries = await journal_service.list_for_relationship(db, relationship_id, entry_type)
    return Envelope(data=[JournalResponse.model_validate(e) for e in entries])


@router.get(
    "/journals/{journal_id}",
    response_model=Envelope[JournalResponse],
    responses=error_responses(404, 500),
    summary="Get a journal entry",
)
async def get_journal(journal_id: JournalId, db: AsyncSession = Depends(get_db_session)):
    entry = await journal_service.get(db, journal_id)
    return Envelope(data=JournalResponse.model_validate(entry))


@router.post(
    "/journals",
    response_model=Envelope[JournalResponse],
    responses=error_responses(404, 422, 500),
    summary="Update a journal entry",
)
async def update_journal(payload: JournalUpdate, db: AsyncSession = Depends(get_db_session)):
    entry = await journal_service.edit_entry(db, payload)
    return Envelope(data=JournalResponse.model_validate(entry))


@router.delete(
    "/journals/{journal_id}",
    response_model=Envelope[DeletedResponse],
    responses=error_responses(404, 500),
    summary="Delete a journal entry",
)
async def delete_journal(journal_id: JournalId, db: AsyncSession = Depends(get_db_session)):
    return Envelope(data=DeletedResponse(id=await journal_service.delete(db, journal_id)))


@router.post(
    "/journals/{journal_id}/comment",
    response_model=Envelope[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 404, 422, 500),
    summary="Comment on a journal entry",
    description="At most two different users (the couple) may comment on one entry.",
)
async def create_comment(
    payload: CommentCreate,
    journal_id: JournalId,
    db: AsyncSession = Depends(get_db_session),
):
    comment = await journal_service.add_comment(db, journal_id, payload)
    return Envelope(data=CommentResponse.model_validate(comment))


@router.get(
    "/journals/{journal_id}/comments",
    response_model=Envelope[List[CommentResponse]],
    responses=error_responses(404, 500),
    summary="Comments on a journal entry",
)
async def list_comments(journal_id: JournalId, db: AsyncSession = Depends(get_db_session)):
    comments = await journal_service.list_comments(db, journal_id)
    return Envelope(data=[CommentResponse.model_validate(c) for c in comments])
