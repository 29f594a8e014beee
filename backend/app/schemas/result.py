"""
Duet Backend — Answer Comparison Schemas
==========================================
"""

from typing import List, Optional

from app.schemas.answer import AnswerResponse
from app.schemas.common import CamelModel
from app.schemas.content import QuestionResponse


class MatchSummary(CamelModel):
    matches: int
    total_compared: int
    similarity_percent: str


class QuestionComparison(CamelModel):
    question_id: int
    question_text: str
    question_type: str
    option_text: Optional[str] = None
    option_img: Optional[str] = None
    user1_answer: Optional[str] = None
    user2_answer: Optional[str] = None
    is_match: Optional[bool] = None


class SubtopicResultsResponse(CamelModel):
    relationship_id: int
    sub_topic_id: int
    user1_id: int
    user2_id: Optional[int] = None
    results: List[QuestionComparison]
    match: MatchSummary


class SingleQuestionResult(CamelModel):
    question: QuestionResponse
    user1_id: int
    user2_id: Optional[int] = None
    user1_answer: Optional[AnswerResponse] = None
    user2_answer: Optional[AnswerResponse] = None
