"""
Duet Backend — User Answer Schemas
====================================
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

AnswerStatus = Literal["complete", "skipped"]


class AnswerCreate(CamelModel):
    user_id: int = Field(gt=0)
    question_id: int = Field(gt=0)
    answer_text: Optional[str] = None
    answer_status: AnswerStatus = "complete"


class BulkAnswerItem(CamelModel):
    question_id: int = Field(gt=0)
    answer_text: Optional[str] = None
    answer_status: AnswerStatus = "complete"


class BulkAnswerCreate(CamelModel):
    """Several answers from one user, e.g. a whole sub-topic at once."""

    user_id: int = Field(gt=0)
    answers: List[BulkAnswerItem] = Field(min_length=1, max_length=500)


class AnswerUpdate(CamelModel):
    answer_text: Optional[str] = None
    answer_status: Optional[AnswerStatus] = None


class AnswerResponse(CamelModel):
    id: int
    user_id: int
    question_id: int
    answer_text: Optional[str] = None
    answer_status: str
    answered_at: datetime
