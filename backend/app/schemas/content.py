"""
Duet Backend — Question Bank Schemas
======================================

Categories, topics and sub-topics share their display fields; questions
carry the answer format (`questionType`) and optional option text/image.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

QuestionType = Literal["yes_no", "multiple_choice", "photo", "text"]


# ══════════════════════════════════════════════════════════════════════════
# Category / Topic / Sub-topic
# ══════════════════════════════════════════════════════════════════════════


class GroupCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=50)
    sort_order: int = 0
    is_active: bool = True


class GroupUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=100)
    color: Optional[str] = Field(default=None, max_length=50)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class GroupResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


CategoryCreate = GroupCreate
CategoryUpdate = GroupUpdate
CategoryResponse = GroupResponse
TopicCreate = GroupCreate
TopicUpdate = GroupUpdate
TopicResponse = GroupResponse


class SubTopicCreate(GroupCreate):
    topic_id: Optional[int] = Field(default=None, gt=0)
    category_id: Optional[int] = Field(default=None, gt=0)
    adult: bool = False


class SubTopicUpdate(GroupUpdate):
    topic_id: Optional[int] = Field(default=None, gt=0)
    category_id: Optional[int] = Field(default=None, gt=0)
    adult: Optional[bool] = None


class SubTopicResponse(GroupResponse):
    topic_id: Optional[int] = None
    category_id: Optional[int] = None
    adult: bool


# ══════════════════════════════════════════════════════════════════════════
# Questions
# ══════════════════════════════════════════════════════════════════════════


class QuestionCreate(CamelModel):
    sub_topic_id: Optional[int] = Field(default=None, gt=0)
    question_text: str = Field(min_length=1)
    question_type: QuestionType = "yes_no"
    option_text: Optional[str] = Field(default=None, max_length=500)
    option_img: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True


class QuestionUpdate(CamelModel):
    sub_topic_id: Optional[int] = Field(default=None, gt=0)
    question_text: Optional[str] = Field(default=None, min_length=1)
    question_type: Optional[QuestionType] = None
    option_text: Optional[str] = Field(default=None, max_length=500)
    option_img: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class QuestionResponse(CamelModel):
    id: int
    sub_topic_id: Optional[int] = None
    question_text: str
    question_type: str
    option_text: Optional[str] = None
    option_img: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SubTopicWithQuestions(SubTopicResponse):
    questions: List[QuestionResponse] = Field(default_factory=list)
