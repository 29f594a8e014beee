"""
Duet Backend — Home Screen Schemas
====================================
"""

from datetime import date, datetime
from typing import List, Optional

from app.core.divisions import Division
from app.schemas.common import CamelModel
from app.schemas.content import QuestionResponse


class DailyStreakSummary(CamelModel):
    user1: int
    user2: Optional[int] = None
    combined: int


class HomeUser(CamelModel):
    id: int
    name: Optional[str] = None
    profile_img: Optional[str] = None
    mood: Optional[str] = None


class HomeResponse(CamelModel):
    """
    Overview of a couple, or of a single user.

    Journal counters are null in single-user mode; `days_together` is also
    null once the relationship is disconnected.
    """

    relationship_id: Optional[int] = None
    user1: Optional[HomeUser] = None
    user2: Optional[HomeUser] = None
    days_together: Optional[int] = None
    memories_created: Optional[int] = None
    special_days: Optional[int] = None
    cities_visited: Optional[int] = None
    question_answered_percentage: int
    daily_streak: DailyStreakSummary


class RandomSubtopicEntry(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    topic_id: Optional[int] = None
    category_id: Optional[int] = None
    topic_name: Optional[str] = None
    category_name: Optional[str] = None
    adult: bool = False
    total_questions: int
    user_progress: int
    partner_progress: Optional[int] = None
    overall_progress: int
    division: Division


class RandomSubtopicsResponse(CamelModel):
    set_id: int
    created_at: datetime
    regenerated: bool
    sub_topics: List[RandomSubtopicEntry]


class DailyQuestionResponse(CamelModel):
    date: date
    rotation_day: int
    pool_size: int
    question: QuestionResponse
    user1_id: int
    user2_id: Optional[int] = None
    user1_answered: bool
    user2_answered: bool
    user1_answer: Optional[str] = None
    user2_answer: Optional[str] = None
