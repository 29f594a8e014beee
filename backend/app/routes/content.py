"""
Duet Backend — Question Bank Routes
=====================================

CRUD for the four content tables, plus:

    GET /api/sub-topics/with-questions?topicId=&categoryId=

Categories, topics and sub-topics share the same five endpoints, so their
routers are built by `crud_routes`; questions add a sub-topic filter.
"""

from typing import Annotated, List, Optional, Type

from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes import error_responses
from app.schemas.common import DeletedResponse, Envelope
from app.schemas.content import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    QuestionCreate,
    QuestionResponse,
    QuestionUpdate,
    SubTopicCreate,
    SubTopicResponse,
    SubTopicUpdate,
    SubTopicWithQuestions,
    TopicCreate,
    TopicResponse,
    TopicUpdate,
)
from app.services.base import CRUDService
from app.services.content_service import (
    category_service,
    question_service,
    sub_topic_service,
    topic_service,
)

router = APIRouter(prefix="/api")

ItemId = Annotated[int, Path(gt=0)]


@router.get(
    "/sub-topics/with-questions",
    tags=["Sub-topics"],
    response_model=Envelope[List[SubTopicWithQuestions]],
    responses=error_responses(500),
    summary="Sub-topics with their questions",
    description="When both filters are given, a sub-topic matching either one is included.",
)
async def list_sub_topics_with_questions(
    topic_id: Optional[int] = Query(default=None, alias="topicId", gt=0),
    category_id: Optional[int] = Query(default=None, alias="categoryId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    items = await sub_topic_service.with_questions(db, topic_id=topic_id, category_id=category_id)
    return Envelope(data=items)


@router.get(
    "/sub-topics",
    tags=["Sub-topics"],
    response_model=Envelope[List[SubTopicResponse]],
    responses=error_responses(500),
    summary="List sub-topics",
)
async def list_sub_topics(
    topic_id: Optional[int] = Query(default=None, alias="topicId", gt=0),
    category_id: Optional[int] = Query(default=None, alias="categoryId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    items = await sub_topic_service.list_filtered(db, topic_id=topic_id, category_id=category_id)
    return Envelope(data=[SubTopicResponse.model_validate(i) for i in items])


@router.get(
    "/questions",
    tags=["Questions"],
    response_model=Envelope[List[QuestionResponse]],
    responses=error_responses(500),
    summary="List questions",
)
async def list_questions(
    sub_topic_id: Optional[int] = Query(default=None, alias="subTopicId", gt=0),
    db: AsyncSession = Depends(get_db_session),
):
    items = await question_service.list_filtered(db, sub_topic_id=sub_topic_id)
    return Envelope(data=[QuestionResponse.model_validate(i) for i in items])


def crud_routes(
    path: str,
    tag: str,
    service: CRUDService,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    with_list: bool = True,
) -> None:
    """Register get/create/update/delete (and optionally list) for one table."""
    label = service.resource

    if with_list:
        @router.get(
            path,
            tags=[tag],
            response_model=Envelope[List[response_schema]],
            responses=error_responses(500),
            summary=f"List {label} rows",
        )
        async def list_items(db: AsyncSession = Depends(get_db_session)):
            items = await service.list(db, order_by=[service.model.sort_order, service.model.id])
            return Envelope(data=[response_schema.model_validate(i) for i in items])

    @router.get(
        f"{path}/{{item_id}}",
        tags=[tag],
        response_model=Envelope[response_schema],
        responses=error_responses(404, 500),
        summary=f"Get a {label}",
    )
    async def get_item(item_id: ItemId, db: AsyncSession = Depends(get_db_session)):
        return Envelope(data=response_schema.model_validate(await service.get(db, item_id)))

    @router.post(
        path,
        tags=[tag],
        response_model=Envelope[response_schema],
        status_code=status.HTTP_201_CREATED,
        responses=error_responses(409, 422, 500),
        summary=f"Create a {label}",
    )
    async def create_item(payload: create_schema, db: AsyncSession = Depends(get_db_session)):
        item = await service.create(db, payload.model_dump())
        return Envelope(data=response_schema.model_validate(item))

    @router.put(
        f"{path}/{{item_id}}",
        tags=[tag],
        response_model=Envelope[response_schema],
        responses=error_responses(404, 409, 422, 500),
        summary=f"Update a {label}",
    )
    async def update_item(
        payload: update_schema,
        item_id: ItemId,
        db: AsyncSession = Depends(get_db_session),
    ):
        item = await service.update(db, item_id, payload.model_dump(exclude_unset=True))
        return Envelope(data=response_schema.model_validate(item))

    @router.delete(
        f"{path}/{{item_id}}",
        tags=[tag],
        response_model=Envelope[DeletedResponse],
        responses=error_responses(404, 409, 500),
        summary=f"Delete a {label}",
    )
    async def delete_item(item_id: ItemId, db: AsyncSession = Depends(get_db_session)):
        return Envelope(data=DeletedResponse(id=await service.delete(db, item_id)))


crud_routes("/categories", "Categories", category_service, CategoryCreate, CategoryUpdate, CategoryResponse)
crud_routes("/topics", "Topics", topic_service, TopicCreate, TopicUpdate, TopicResponse)
crud_routes(
    "/sub-topics", "Sub-topics", sub_topic_service,
    SubTopicCreate, SubTopicUpdate, SubTopicResponse, with_list=False,
)
crud_routes(
    "/questions", "Questions", question_service,
    QuestionCreate, QuestionUpdate, QuestionResponse, with_list=False,
)
