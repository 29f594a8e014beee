"""
Duet Backend — Relationship Routes
====================================

    GET    /api/relationships            all pairings (optionally of one user)
    GET    /api/relationships/get?id=    one connected pairing
    POST   /api/relationships            pair two users
    POST   /api/relationships/invite     pair with the owner of an invite code
    PUT    /api/relationships/{id}       update; `deleted: true` disconnects
    DELETE /api/relationships/{id}
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import DeletedResponse, Envelope
from app.schemas.relationship import (
    RelationshipCreate,
    RelationshipInvite,
    RelationshipResponse,
    RelationshipUpdate,
)
from app.services.relationship_service import relationship_service

router = APIRouter(prefix="/api", tags=["Relationships"])

RelationshipId = Annotated[int, Path(gt=0, description="Relationship id")]


@router.get(
    "/relationships",
    response_model=Envelope[List[RelationshipResponse]],
    responses=error_responses(500),
    summary="List relationships",
)
async def list_relationships(
    user_id: Optional[int] = Query(default=None, alias="userId", gt=0),
    include_deleted: bool = Query(default=True, alias="includeDeleted"),
    db: AsyncSession = Depends(get_db_session),
):
    relationships = await relationship_service.list_all(
        db, user_id=user_id, include_deleted=include_deleted
    )
    return Envelope(data=[RelationshipResponse.model_validate(r) for r in relationships])


@router.get(
    "/relationships/get",
    response_model=Envelope[RelationshipResponse],
    responses=error_responses(404, 500),
    summary="Get a connected relationship",
    description="Disconnected relationships are reported as 404.",
)
async def get_relationship(
    relationship_id: int = Query(alias="id", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    relationship = await relationship_service.get_connected(db, relationship_id)
    return Envelope(data=RelationshipResponse.model_validate(relationship))


@router.post(
    "/relationships",
    response_model=Envelope[RelationshipResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(404, 409, 422, 500),
    summary="Pair two users",
)
async def create_relationship(payload: RelationshipCreate, db: AsyncSession = Depends(get_db_session)):
    relationship = await relationship_service.pair(db, payload)
    return Envelope(data=RelationshipResponse.model_validate(relationship))


@router.post(
    "/relationships/invite",
    response_model=Envelope[RelationshipResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 404, 422, 500),
    summary="Pair using a partner's invite code",
)
async def create_relationship_by_invite(
    payload: RelationshipInvite, db: AsyncSession = Depends(get_db_session)
):
    relationship = await relationship_service.pair_by_invite_code(db, payload)
    return Envelope(data=RelationshipResponse.model_validate(relationship))


@router.put(
    "/relationships/{relationship_id}",
    response_model=Envelope[RelationshipResponse],
    responses=error_responses(404, 422, 500),
    summary="Update or disconnect a relationship",
)
async def update_relationship(
    payload: RelationshipUpdate,
    relationship_id: RelationshipId,
    db: AsyncSession = Depends(get_db_session),
):
    relationship = await relationship_service.modify(db, relationship_id, payload)
    return Envelope(data=RelationshipResponse.model_validate(relationship))


@router.delete(
    "/relationships/{relationship_id}",
    response_model=Envelope[DeletedResponse],
    responses=error_responses(404, 500),
    summary="Delete a relationship",
)
async def delete_relationship(relationship_id: RelationshipId, db: AsyncSession = Depends(get_db_session)):
    deleted_id = await relationship_service.delete(db, relationship_id)
    return Envelope(data=DeletedResponse(id=deleted_id))
