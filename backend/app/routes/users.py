"""
Duet Backend — User Routes
============================

    GET    /api/users/deleted         soft-deleted users
    GET    /api/users/{id}
    POST   /api/users                 register (409 on duplicate uuid/socialId)
    PUT    /api/users/{id}
    DELETE /api/users/{id}            hard delete
    DELETE /api/users/{id}/soft       soft delete
    PUT    /api/users/{id}/restore    undo a soft delete
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import DeletedResponse, Envelope
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])

UserId = Annotated[int, Path(gt=0, description="User id")]


@router.get(
    "/users/deleted",
    response_model=Envelope[List[UserResponse]],
    responses=error_responses(500),
    summary="List soft-deleted users",
)
async def list_deleted_users(db: AsyncSession = Depends(get_db_session)):
    users = await user_service.list_deleted(db)
    return Envelope(data=[UserResponse.model_validate(u) for u in users])


@router.get(
    "/users/{user_id}",
    response_model=Envelope[UserResponse],
    responses=error_responses(404, 500),
    summary="Get a user",
)
async def get_user(user_id: UserId, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.get(db, user_id)
    return Envelope(data=UserResponse.model_validate(user))


@router.post(
    "/users",
    response_model=Envelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
    summary="Register a user",
    description="Creates a user. Fails with 409 when the uuid or socialId is already registered.",
)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.register(db, payload)
    return Envelope(data=UserResponse.model_validate(user))


@router.put(
    "/users/{user_id}",
    response_model=Envelope[UserResponse],
    responses=error_responses(404, 422, 500),
    summary="Update a user's profile",
)
async def update_user(
    payload: UserUpdate,
    user_id: UserId,
    db: AsyncSession = Depends(get_db_session),
):
    user = await user_service.update(db, user_id, payload.model_dump(exclude_unset=True))
    return Envelope(data=UserResponse.model_validate(user))


@router.delete(
    "/users/{user_id}",
    response_model=Envelope[DeletedResponse],
    responses=error_responses(404, 500),
    summary="Delete a user permanently",
)
async def delete_user(user_id: UserId, db: AsyncSession = Depends(get_db_session)):
    deleted_id = await user_service.delete(db, user_id)
    return Envelope(data=DeletedResponse(id=deleted_id))


@router.delete(
    "/users/{user_id}/soft",
    response_model=Envelope[UserResponse],
    responses=error_responses(404, 500),
    summary="Soft-delete a user",
)
async def soft_delete_user(user_id: UserId, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.soft_delete(db, user_id)
    return Envelope(data=UserResponse.model_validate(user))


@router.put(
    "/users/{user_id}/restore",
    response_model=Envelope[UserResponse],
    responses=error_responses(404, 500),
    summary="Restore a soft-deleted user",
)
async def restore_user(user_id: UserId, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.restore(db, user_id)
    return Envelope(data=UserResponse.model_validate(user))
